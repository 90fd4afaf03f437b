"""
Common test utilities for the vappnet test suite.

This module provides shared documents, fake transports and mock factories
to reduce duplication across test files.
"""

from .fixtures import *
from .factories import *

__all__ = [
    # Documents
    "API_URL",
    "TASK_ID",
    "TASK_LOCATION",
    "NETWORK_CONFIG_SECTION",
    "ROUTED_NETWORK_CONFIG_SECTION",
    "UNDEPLOYED_ROUTED_SECTION",
    "IP_TRANSLATION_SECTION",
    "NO_IP_SCOPES_SECTION",
    "TASK_DOCUMENT",
    "VCD_ERROR_DOCUMENT",

    # Factories
    "ConfigFactory",
    "FakeTransport",
    "MockFactory",
]
