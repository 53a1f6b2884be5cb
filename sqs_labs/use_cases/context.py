"""Per-invocation command context."""
import logging
from dataclasses import dataclass, field
from typing import Callable

from sqs_labs.domain.entities.app_config import AppConfig
from sqs_labs.infra.sqs_client import SQSClient


@dataclass
class AppContext:
    """
    Everything a command handler needs, built once at startup.

    ``echo`` writes user-facing output lines; ``logger`` carries
    diagnostics.
    """
    config: AppConfig
    client: SQSClient
    logger: logging.Logger
    echo: Callable[[str], None] = field(default=print)
