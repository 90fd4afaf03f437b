"""
vApp networking module for vappnet.

This module provides one function per network operation, wrapping the
classes of ``vappnet.core.network_config`` for callers that prefer a
functional interface.
"""

from typing import Any, Iterable, Mapping, Optional, Union
import logging

from ..constants import FenceMode, NatPolicy
from ..core.network_config import (
    NatRules,
    NetworkConfigEditor,
    NetworkConfigReader,
    ParentNetworkRef,
    PortForwardingConfigBuilder,
    PortForwardingRule,
)
from ..core.transport import Transport

logger = logging.getLogger("vappnet")

def set_vapp_network_config(
    transport: Transport,
    vapp_id: str,
    network_name: str,
    fence_mode: Optional[Union[FenceMode, str]] = None,
    parent_network: Optional[Union[ParentNetworkRef, Mapping[str, Any]]] = None,
) -> str:
    """
    Edit the configuration of an existing vApp network.

    The current configuration is fetched and only the given settings change,
    so nothing else configured on the vApp is lost. ``IsInherited`` is always
    set to true.

    Args:
        transport: Transport to the vCloud Director API
        vapp_id: Id of the vApp
        network_name: Name of the vApp network to edit
        fence_mode: New fence mode (bridged, natRouted, isolated)
        parent_network: Parent network with ``name`` and ``id``

    Returns:
        str: Id of the task applying the configuration
    """
    return NetworkConfigEditor(transport).merge(
        vapp_id, network_name, fence_mode=fence_mode, parent_network=parent_network
    )

def set_vapp_port_forwarding_rules(
    transport: Transport,
    vapp_id: str,
    network_name: str,
    parent_network: str,
    nat_rules: Iterable[Union[PortForwardingRule, Mapping[str, Any]]],
    fence_mode: Union[FenceMode, str] = FenceMode.ISOLATED,
    nat_policy: Union[NatPolicy, str] = NatPolicy.ALLOW_TRAFFIC,
) -> str:
    """
    Replace the network configuration of a vApp with port forwarding rules.

    This is not a merge: the vApp ends up with a single network configured as
    given here. Use ``set_vapp_network_config`` to keep existing settings.

    Args:
        transport: Transport to the vCloud Director API
        vapp_id: Id of the vApp
        network_name: Name of the vApp network to configure
        parent_network: Id of the parent network
        nat_rules: Rules with external_port, vm_scoped_local_id, internal_port
            and optionally vm_nic_id (default "0") and protocol (default TCP)
        fence_mode: Fence mode (default isolated)
        nat_policy: NAT policy (default allowTraffic)

    Returns:
        str: Id of the task applying the configuration
    """
    return PortForwardingConfigBuilder(transport).apply(
        vapp_id,
        network_name,
        parent_network,
        nat_rules,
        fence_mode=fence_mode,
        nat_policy=nat_policy,
    )

def get_vapp_port_forwarding_rules(
    transport: Transport,
    vapp_id: str,
    network_name: Optional[str] = None,
) -> NatRules:
    """
    Get the port forwarding rules of a vApp.

    Args:
        transport: Transport to the vCloud Director API
        vapp_id: Id of the vApp
        network_name: Network to read; the first network when omitted

    Returns:
        Dict: Rule id mapped to ExternalIpAddress, ExternalPort, VAppScopedVmId,
        VmNicId, InternalPort and Protocol
    """
    return NetworkConfigReader(transport).get_port_forwarding_rules(vapp_id, network_name)

def get_vapp_edge_public_ip(
    transport: Transport,
    vapp_id: str,
    network_name: Optional[str] = None,
) -> Optional[str]:
    """
    Get the public IP of a vApp's edge device.

    Only available when the network is natRouted in portForwarding mode and
    the vApp has been deployed.

    Args:
        transport: Transport to the vCloud Director API
        vapp_id: Id of the vApp
        network_name: Network to read; the first network when omitted

    Returns:
        The external IP, or None if none is allocated
    """
    return NetworkConfigReader(transport).get_edge_public_ip(vapp_id, network_name)
