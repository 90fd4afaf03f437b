"""
Common constants for the vCloud Director network configuration API.

This module defines constants used throughout vappnet, including namespaces,
resource paths, content types, default values and the enumerated values the
network configuration schema accepts.
"""

from enum import Enum
from typing import List

# XML Namespaces
NAMESPACES = {
    "vcd": "http://www.vmware.com/vcloud/v1.5",
    "ovf": "http://schemas.dmtf.org/ovf/envelope/1",
}

# Namespace map for documents built from scratch (vcd is the default namespace)
NETWORK_CONFIG_NSMAP = {
    None: NAMESPACES["vcd"],
    "ovf": NAMESPACES["ovf"],
}

# Resource paths, relative to the API base URL
PATHS = {
    "NETWORK_CONFIG_SECTION": "/vApp/vapp-{vapp_id}/networkConfigSection",
    "SESSIONS": "/sessions",
    "ADMIN_NETWORK": "{api_url}/admin/network/{network_id}",
    "NETWORK": "{api_url}/network/{network_id}",
}

# Content types for API requests
CONTENT_TYPES = {
    "NETWORK_CONFIG_SECTION": "application/vnd.vmware.vcloud.networkConfigSection+xml",
    "ACCEPT": "application/*+xml;version={api_version}",
}

# HTTP headers used by the API
HEADERS = {
    "AUTH_TOKEN": "x-vcloud-authorization",
    "LOCATION": "Location",
    "ACCEPT": "Accept",
    "CONTENT_TYPE": "Content-Type",
}

# Marker preceding the task id in a task URL
TASK_MARKER = "task/"

# Default values
DEFAULT_VALUES = {
    "API_VERSION": "5.5",
    "TIMEOUT": 30.0,
    "INFO_TEXT": "Network configuration",
    "VM_NIC_ID": "0",
    "IS_ENABLED": "true",
    "IS_INHERITED": "true",
}

# Tag names of the network configuration schema
TAG_NAMES = {
    "SECTION": "NetworkConfigSection",
    "INFO": "Info",
    "NETWORK_CONFIG": "NetworkConfig",
    "CONFIGURATION": "Configuration",
    "IP_SCOPES": "IpScopes",
    "PARENT_NETWORK": "ParentNetwork",
    "FENCE_MODE": "FenceMode",
    "IS_INHERITED": "IsInherited",
    "FEATURES": "Features",
    "NAT_SERVICE": "NatService",
    "IS_ENABLED": "IsEnabled",
    "NAT_TYPE": "NatType",
    "POLICY": "Policy",
    "NAT_RULE": "NatRule",
    "VM_RULE": "VmRule",
    "ID": "Id",
    "ROUTER_INFO": "RouterInfo",
    "EXTERNAL_IP": "ExternalIp",
    "TASK": "Task",
    "ERROR": "Error",
}

# Attribute names
ATTRIBUTES = {
    "NETWORK_NAME": "networkName",
    "NAME": "name",
    "ID": "id",
    "HREF": "href",
}

# VmRule fields reported for every port forwarding rule, in schema order
VM_RULE_FIELDS: List[str] = [
    "ExternalIpAddress",
    "ExternalPort",
    "VAppScopedVmId",
    "VmNicId",
    "InternalPort",
    "Protocol",
]


class FenceMode(str, Enum):
    """Isolation mode of a vApp network."""

    BRIDGED = "bridged"
    NAT_ROUTED = "natRouted"
    ISOLATED = "isolated"


class NatType(str, Enum):
    """NAT flavour of an edge device."""

    PORT_FORWARDING = "portForwarding"
    IP_TRANSLATION = "ipTranslation"


class NatPolicy(str, Enum):
    """Traffic policy of the NAT service."""

    ALLOW_TRAFFIC = "allowTraffic"
    ALLOW_TRAFFIC_IN = "allowTrafficIn"


class Protocol(str, Enum):
    """Protocol matched by a port forwarding rule."""

    TCP = "TCP"
    UDP = "UDP"
    TCP_UDP = "TCP_UDP"


def enum_values(enum_cls) -> List[str]:
    """Return the wire values of an enumeration, in declaration order."""
    return [member.value for member in enum_cls]

