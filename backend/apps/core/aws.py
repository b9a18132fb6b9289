"""
AWS client factory.

Credentials come from the environment or the task role. AWS_ENDPOINT_URL
points every client at LocalStack for local development.
"""

from functools import lru_cache
from typing import Any

import boto3
from botocore.config import Config
from django.conf import settings

# Timeout configuration for AWS API calls
CONNECT_TIMEOUT = 5  # seconds to establish connection
# Must exceed the SQS long-poll wait (20s) or every idle receive times out
READ_TIMEOUT = 30


@lru_cache(maxsize=None)
def get_aws_client(service_name: str) -> Any:
    """
    Get a boto3 client for ``service_name`` ("sqs", "scheduler", ...).

    Uses lru_cache so each service gets one client per process. boto3 clients
    are thread-safe, so consumer threads share them.
    """
    config = Config(
        region_name=settings.AWS_REGION,
        connect_timeout=CONNECT_TIMEOUT,
        read_timeout=READ_TIMEOUT,
        retries={"max_attempts": 2},
    )
    client_kwargs: dict[str, str | Config | None] = {
        "config": config,
        "endpoint_url": getattr(settings, "AWS_ENDPOINT_URL", None),
    }
    # Remove None values to let boto3 use defaults
    client_kwargs = {k: v for k, v in client_kwargs.items() if v is not None}

    return boto3.client(service_name, **client_kwargs)  # type: ignore[call-overload]


def client_error_code(error: Exception) -> str:
    """Extract the AWS error code from a botocore ClientError, or "" otherwise."""
    response = getattr(error, "response", None) or {}
    return response.get("Error", {}).get("Code", "")
