"""
Functional modules for vappnet.
"""

from .vapp_networking import (
    set_vapp_network_config,
    set_vapp_port_forwarding_rules,
    get_vapp_port_forwarding_rules,
    get_vapp_edge_public_ip,
)

__all__ = [
    "set_vapp_network_config",
    "set_vapp_port_forwarding_rules",
    "get_vapp_port_forwarding_rules",
    "get_vapp_edge_public_ip",
]
