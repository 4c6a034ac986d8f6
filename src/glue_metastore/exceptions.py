"""
Exception classes for glue-metastore-client.

Errors raised by the Glue service itself (botocore ``ClientError`` and
``BotoCoreError``) are never wrapped; they reach the caller unchanged.
The classes below cover failures that originate in this library.
"""

from botocore.exceptions import BotoCoreError, ClientError

# Errors produced by the remote catalog service or the boto3 transport
REMOTE_SERVICE_ERRORS = (ClientError, BotoCoreError)


class GlueMetastoreError(Exception):
    """Base exception for all glue-metastore-client errors."""

    pass


class ConfigurationError(GlueMetastoreError):
    """Raised when the client configuration is invalid."""

    pass


class MetastoreClosedError(GlueMetastoreError):
    """Raised when an operation is attempted on a closed metastore."""

    pass


def is_remote_service_error(error: BaseException) -> bool:
    """Check whether an exception came from the Glue service or its transport."""
    return isinstance(error, REMOTE_SERVICE_ERRORS)
