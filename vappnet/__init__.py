"""
vappnet - vCloud Director vApp network configuration client

Translates vApp networking intents (edit a network, set port forwarding rules,
find the edge device's public IP) into vCloud Director API requests.
"""

import logging

__version__ = "0.1.0"

# Import core exceptions
from .core.exceptions import (
    VAppNetError, ConfigError, DocumentStructureError, ValidationError,
    ParseError, XPathError, SelectionError, NetworkNotFoundError,
    StatePreconditionError, TransportError, TaskReferenceError
)

from .constants import FenceMode, NatType, NatPolicy, Protocol

from .core.transport import Transport, HttpTransport, extract_task_id
from .core.network_config import (
    NetworkConfigEditor, PortForwardingConfigBuilder, NetworkConfigReader,
    ParentNetworkRef, PortForwardingRule
)
from .core.settings import Settings, build_transport

# Import functional modules
from .modules.vapp_networking import (
    set_vapp_network_config,
    set_vapp_port_forwarding_rules,
    get_vapp_port_forwarding_rules,
    get_vapp_edge_public_ip,
)

# Library code logs through "vappnet" and leaves handler setup to the application
logging.getLogger("vappnet").addHandler(logging.NullHandler())

__all__ = [
    # Exceptions
    "VAppNetError", "ConfigError", "DocumentStructureError", "ValidationError",
    "ParseError", "XPathError", "SelectionError", "NetworkNotFoundError",
    "StatePreconditionError", "TransportError", "TaskReferenceError",
    # Enumerations
    "FenceMode", "NatType", "NatPolicy", "Protocol",
    # Transport
    "Transport", "HttpTransport", "extract_task_id",
    # Operations
    "NetworkConfigEditor", "PortForwardingConfigBuilder", "NetworkConfigReader",
    "ParentNetworkRef", "PortForwardingRule",
    "set_vapp_network_config", "set_vapp_port_forwarding_rules",
    "get_vapp_port_forwarding_rules", "get_vapp_edge_public_ip",
    # Settings
    "Settings", "build_transport",
]
