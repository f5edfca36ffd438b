"""iwait: block until files, sockets, HTTP endpoints, and hosts are ready."""

import logging

from iwait.api import wait, wait_sync
from iwait.config.models import BasicAuthCredentials, Strategy, WaitConfig
from iwait.errors import (
    AbortError,
    ConfigurationError,
    IWaitError,
    ParseError,
    ResourceError,
    WaitTimeoutError,
)
from iwait.models import ResourceDescriptor, ResourceState, ResourceType, WaitResult
from iwait.parser import parse_resource, parse_resources

__version__ = "0.3.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AbortError",
    "BasicAuthCredentials",
    "ConfigurationError",
    "IWaitError",
    "ParseError",
    "ResourceDescriptor",
    "ResourceError",
    "ResourceState",
    "ResourceType",
    "Strategy",
    "WaitConfig",
    "WaitResult",
    "WaitTimeoutError",
    "__version__",
    "parse_resource",
    "parse_resources",
    "wait",
    "wait_sync",
]
