"""Shared fixtures."""
import logging

import boto3
import pytest
from moto import mock_aws

from sqs_labs.domain.entities.app_config import AppConfig
from sqs_labs.infra.sqs_client import SQSClient
from sqs_labs.use_cases.context import AppContext


REGION = "us-east-1"


def _build_config(**sqs) -> AppConfig:
    return AppConfig(
        runtime={"mode": "aws", "region": REGION},
        sqs=sqs,
        recv={"wait_secs": 0},
    )


@pytest.fixture
def make_config():
    """Build an AppConfig for the real-AWS code path with zero receive wait."""
    return _build_config


@pytest.fixture
def aws_sqs():
    """Mocked SQS service."""
    with mock_aws():
        yield boto3.client("sqs", region_name=REGION)


@pytest.fixture
def sqs_client(aws_sqs):
    """SQSClient bound to the mocked service."""
    return SQSClient(region=REGION)


@pytest.fixture
def output():
    """Collected echo lines."""
    return []


@pytest.fixture
def make_context(output):
    """Build an AppContext that records output lines."""
    def _make(client, config=None) -> AppContext:
        return AppContext(
            config=config or _build_config(),
            client=client,
            logger=logging.getLogger("sqs_labs.tests"),
            echo=output.append,
        )
    return _make
