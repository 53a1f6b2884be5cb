"""Tests for the command-line interface."""
from unittest.mock import Mock, call, patch

import pytest
from typer.testing import CliRunner

from sqs_labs.app.main import app

runner = CliRunner()

ROOT_TOML = """
[runtime]
mode = "aws"
region = "us-east-1"

[recv]
wait_secs = 0
"""


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory with logging and .env loading stubbed."""
    monkeypatch.chdir(tmp_path)
    for name in ("APP_SQS__QUEUE_NAME", "APP_SQS__FIFO", "APP_RUNTIME__REGION"):
        monkeypatch.delenv(name, raising=False)
    with patch("sqs_labs.app.main.setup_logging"), patch("sqs_labs.app.main.load_env_file"):
        yield


@pytest.fixture
def root_config(tmp_path):
    """Write the root config file."""
    path = tmp_path / "config.toml"
    path.write_text(ROOT_TOML)
    return str(path)


def test_missing_root_config_exits_nonzero():
    """Test that a missing root config is reported with exit code 1."""
    result = runner.invoke(app, ["send", "--queue-name", "orders"])

    assert result.exit_code == 1
    assert "Root config not found" in result.output


def test_non_utf8_root_config_exits_nonzero(tmp_path):
    """Test that an undecodable root config is reported as an error line."""
    path = tmp_path / "config.toml"
    path.write_bytes(b'[runtime]\nregion = "\xff"\n')

    result = runner.invoke(app, ["send", "--config", str(path), "--queue-name", "orders"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "UTF-8" in result.output


def test_env_file_loaded_before_logging_setup():
    """Test that .env is loaded first so LOG_LEVEL from it reaches logging."""
    calls = Mock()
    with patch("sqs_labs.app.main.load_env_file") as load_env, \
            patch("sqs_labs.app.main.setup_logging") as setup_log:
        calls.attach_mock(load_env, "load_env_file")
        calls.attach_mock(setup_log, "setup_logging")

        runner.invoke(app, ["send", "--queue-name", "orders"])

    assert calls.mock_calls[:2] == [call.load_env_file(), call.setup_logging()]


def test_missing_queue_name_exits_nonzero(root_config, aws_sqs):
    """Test that no queue name anywhere is an error."""
    result = runner.invoke(app, ["send", "--config", root_config])

    assert result.exit_code == 1
    assert "Queue name is required" in result.output


def test_send_command(root_config, aws_sqs):
    """Test the send command with a positional body."""
    url = aws_sqs.create_queue(QueueName="orders")["QueueUrl"]

    result = runner.invoke(app, ["send", "--config", root_config, "--queue-name", "orders", "hi there"])

    assert result.exit_code == 0, result.output
    assert "[send] sent message_id=" in result.output
    messages = aws_sqs.receive_message(QueueUrl=url)["Messages"]
    assert messages[0]["Body"] == "hi there"


def test_send_command_default_body(root_config, aws_sqs):
    """Test the default body."""
    url = aws_sqs.create_queue(QueueName="orders")["QueueUrl"]

    result = runner.invoke(app, ["send", "--config", root_config, "--queue-name", "orders"])

    assert result.exit_code == 0, result.output
    assert aws_sqs.receive_message(QueueUrl=url)["Messages"][0]["Body"] == "hello world"


def test_send_command_missing_queue(root_config, aws_sqs):
    """Test that a missing queue exits with code 1."""
    result = runner.invoke(app, ["send", "--config", root_config, "--queue-name", "missing"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_queue_name_from_lab_config(root_config, tmp_path, aws_sqs):
    """Test that the lab config supplies the queue name."""
    aws_sqs.create_queue(QueueName="lab-queue")
    lab = tmp_path / "lab.toml"
    lab.write_text('[sqs]\nqueue_name = "lab-queue"\n')

    result = runner.invoke(app, ["send", "--config", root_config, "--lab-config", str(lab), "--msg", "x"])

    assert result.exit_code == 0, result.output


def test_send_fifo_rejects_standard_queue(root_config, aws_sqs):
    """Test that send-fifo refuses a non-.fifo name."""
    result = runner.invoke(
        app, ["send-fifo", "--config", root_config, "--queue-name", "orders", "--group", "g1"]
    )

    assert result.exit_code == 1
    assert "requires a FIFO queue" in result.output


def test_send_fifo_requires_group_option(root_config):
    """Test that --group is mandatory for send-fifo."""
    result = runner.invoke(app, ["send-fifo", "--config", root_config, "--queue-name", "orders.fifo"])

    assert result.exit_code == 2


def test_send_fifo_command(root_config, aws_sqs):
    """Test sending to a FIFO queue."""
    aws_sqs.create_queue(
        QueueName="orders.fifo",
        Attributes={"FifoQueue": "true", "ContentBasedDeduplication": "true"},
    )

    result = runner.invoke(
        app,
        ["send-fifo", "--config", root_config, "--queue-name", "orders.fifo", "--group", "g1", "--msg", "x"],
    )

    assert result.exit_code == 0, result.output
    assert "[send_fifo] sent message_id=" in result.output


def test_send_attrs_command(root_config, aws_sqs):
    """Test sending attributes to a standard queue with an ignored group."""
    url = aws_sqs.create_queue(QueueName="orders")["QueueUrl"]

    result = runner.invoke(
        app,
        [
            "send-attrs", "--config", root_config, "--queue-name", "orders",
            "--attr", "event_type=user.created", "--attr", "tenant=acme", "--group", "g1",
        ],
    )

    assert result.exit_code == 0, result.output
    message = aws_sqs.receive_message(QueueUrl=url, MessageAttributeNames=["All"])["Messages"][0]
    assert message["MessageAttributes"]["event_type"]["StringValue"] == "user.created"
    assert message["Body"] == "hello"


def test_send_attrs_bad_attribute(root_config, aws_sqs):
    """Test that a malformed attribute exits with code 1."""
    aws_sqs.create_queue(QueueName="orders")

    result = runner.invoke(
        app, ["send-attrs", "--config", root_config, "--queue-name", "orders", "--attr", "novalue"]
    )

    assert result.exit_code == 1
    assert "key=value" in result.output


def test_recv_command_wires_loop(root_config, aws_sqs):
    """Test that recv runs the loop with the delete flag."""
    with patch("sqs_labs.app.main.run_receive_loop") as mock_loop:
        result = runner.invoke(app, ["recv", "--config", root_config, "--queue-name", "orders", "--no-delete"])

    assert result.exit_code == 0, result.output
    _, args, kwargs = mock_loop.mock_calls[0]
    assert args[1] == "orders"
    assert kwargs == {"no_delete": True}


def test_recv_attrs_command_wires_loop(root_config, aws_sqs):
    """Test that recv-attrs asks for attributes."""
    with patch("sqs_labs.app.main.run_receive_loop") as mock_loop:
        result = runner.invoke(app, ["recv-attrs", "--config", root_config, "--queue-name", "orders"])

    assert result.exit_code == 0, result.output
    _, _, kwargs = mock_loop.mock_calls[0]
    assert kwargs == {"no_delete": False, "with_attributes": True}


def test_bootstrap_command(root_config, aws_sqs):
    """Test bootstrap creating and printing a queue."""
    result = runner.invoke(app, ["bootstrap", "--config", root_config, "--queue-name", "orders.fifo"])

    assert result.exit_code == 0, result.output
    assert "[attr] FifoQueue = true" in result.output


def test_bootstrap_mismatch_from_env(root_config, aws_sqs, monkeypatch):
    """Test that env fifo=false with a .fifo name fails creation."""
    monkeypatch.setenv("APP_SQS__FIFO", "false")

    result = runner.invoke(app, ["bootstrap", "--config", root_config, "--queue-name", "orders.fifo"])

    assert result.exit_code == 1
    assert "fifo=false" in result.output


def test_attrs_command(root_config, aws_sqs):
    """Test printing queue attributes."""
    aws_sqs.create_queue(QueueName="orders", Attributes={"VisibilityTimeout": "21"})

    result = runner.invoke(app, ["attrs", "--config", root_config, "--queue-name", "orders"])

    assert result.exit_code == 0, result.output
    assert "[attr] VisibilityTimeout = 21" in result.output


def test_purge_command_missing_queue(root_config, aws_sqs):
    """Test that purge on a missing queue exits with code 1."""
    result = runner.invoke(app, ["purge", "--config", root_config, "--queue-name", "missing"])

    assert result.exit_code == 1


def test_purge_command(root_config, aws_sqs):
    """Test purging a queue."""
    aws_sqs.create_queue(QueueName="orders")

    result = runner.invoke(app, ["purge", "--config", root_config, "--queue-name", "orders"])

    assert result.exit_code == 0, result.output
    assert "[purge] purged" in result.output


def test_delete_queue_command_requires_confirmation(root_config, aws_sqs):
    """Test that declining the prompt keeps the queue."""
    aws_sqs.create_queue(QueueName="orders")

    result = runner.invoke(
        app, ["delete-queue", "--config", root_config, "--queue-name", "orders"], input="n\n"
    )

    assert result.exit_code == 1
    assert aws_sqs.get_queue_url(QueueName="orders")["QueueUrl"]


def test_delete_queue_command_with_yes(root_config, aws_sqs):
    """Test deleting with --yes."""
    aws_sqs.create_queue(QueueName="orders")

    result = runner.invoke(app, ["delete-queue", "--config", root_config, "--queue-name", "orders", "--yes"])

    assert result.exit_code == 0, result.output
    assert "[delete_queue] deleted" in result.output
