"""
Network commands for vappnet CLI.

This module provides commands for editing vApp network configuration,
setting port forwarding rules and reading the edge device state.
"""

import logging
import typer
from typing import Any, Dict, List, Optional

from vappnet.constants import FenceMode, NatPolicy
from vappnet.core.exceptions import VAppNetError
from vappnet.core.network_config import (
    ParentNetworkRef,
    PortForwardingConfigBuilder,
    PortForwardingRule,
    coerce_enum,
)
from vappnet.modules.vapp_networking import (
    set_vapp_network_config,
    set_vapp_port_forwarding_rules,
    get_vapp_port_forwarding_rules,
    get_vapp_edge_public_ip,
)

from ..app import network_app
from ..common import (
    NetworkOptions,
    console,
    get_offline_transport,
    get_transport,
    load_rules_file,
    parse_rule_option,
    print_rules,
)

# Get logger
logger = logging.getLogger("vappnet")


@network_app.command("configure")
def configure_command(
    ctx: typer.Context,
    vapp_id: str = NetworkOptions.vapp_id(),
    network_name: str = NetworkOptions.network_name(),
    fence_mode: Optional[str] = NetworkOptions.fence_mode(),
    parent_name: Optional[str] = typer.Option(
        None, "--parent-name", help="Name of the parent network to connect to"
    ),
    parent_id: Optional[str] = typer.Option(
        None, "--parent-id", help="Id of the parent network to connect to"
    ),
):
    """
    Edit an existing vApp network, keeping the rest of its configuration.

    Examples:

        # Route a network through its edge device
        vappnet network configure --vapp 1234 --network net1 --fence-mode natRouted

        # Connect a network to an organization network
        vappnet network configure --vapp 1234 --network net1 --parent-name ext-net --parent-id 42
    """
    if (parent_name is None) != (parent_id is None):
        raise typer.BadParameter("--parent-name and --parent-id must be given together")

    parent_network = {"name": parent_name, "id": parent_id} if parent_name is not None else None

    try:
        # Validate before get_transport, which may already log in
        if fence_mode is not None:
            fence_mode = coerce_enum(FenceMode, fence_mode, "fence mode")
        if parent_network is not None:
            parent_network = ParentNetworkRef.coerce(parent_network)

        task_id = set_vapp_network_config(
            get_transport(ctx),
            vapp_id,
            network_name,
            fence_mode=fence_mode,
            parent_network=parent_network,
        )
    except VAppNetError as e:
        logger.error(f"Failed to configure network '{network_name}': {e}")
        raise typer.Exit(1)

    logger.info(f"Network '{network_name}' update submitted")
    console.print(f"Task: {task_id}")


@network_app.command("port-forward")
def port_forward_command(
    ctx: typer.Context,
    vapp_id: str = NetworkOptions.vapp_id(),
    network_name: str = NetworkOptions.network_name(),
    parent_network: str = typer.Option(
        ..., "--parent-network", "-p", help="Id of the parent network"
    ),
    fence_mode: str = NetworkOptions.fence_mode(FenceMode.ISOLATED.value),
    nat_policy: str = NetworkOptions.nat_policy(),
    rules: Optional[List[str]] = typer.Option(
        None, "--rule", "-r",
        help="Rule as EXTERNAL_PORT:VM_ID:INTERNAL_PORT[:PROTOCOL[:NIC_ID]] (repeatable)"
    ),
    rules_file: Optional[str] = typer.Option(
        None, "--rules-file", help="YAML or JSON file with a list of rules"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the configuration instead of sending it"
    ),
):
    """
    Replace the vApp network configuration with port forwarding rules.

    Any other network settings of the vApp are replaced as well.

    Examples:

        # Forward port 2222 to port 22 of VM 1 and 8080/udp to port 80 of VM 2
        vappnet network port-forward --vapp 1234 --network net1 -p 42 -r 2222:1:22 -r 8080:2:80:UDP

        # Show the document that would be sent
        vappnet network port-forward --vapp 1234 --network net1 -p 42 --rules-file rules.yaml --dry-run
    """
    nat_rules: List[Dict[str, Any]] = []
    if rules_file:
        nat_rules.extend(load_rules_file(rules_file))
    for rule in rules or []:
        nat_rules.append(parse_rule_option(rule))

    if not nat_rules:
        raise typer.BadParameter("At least one --rule or a --rules-file is required")

    try:
        fence_mode = coerce_enum(FenceMode, fence_mode, "fence mode")
        nat_policy = coerce_enum(NatPolicy, nat_policy, "NAT policy")
        port_rules = [PortForwardingRule.coerce(rule) for rule in nat_rules]

        if dry_run:
            logger.info("DRY RUN MODE: No changes will be made")
            document = PortForwardingConfigBuilder(get_offline_transport(ctx)).build(
                network_name, parent_network, port_rules, fence_mode=fence_mode, nat_policy=nat_policy
            )
            typer.echo(document.to_string(pretty_print=True))
            return

        task_id = set_vapp_port_forwarding_rules(
            get_transport(ctx),
            vapp_id,
            network_name,
            parent_network,
            port_rules,
            fence_mode=fence_mode,
            nat_policy=nat_policy,
        )
    except VAppNetError as e:
        logger.error(f"Failed to set port forwarding rules on '{network_name}': {e}")
        raise typer.Exit(1)

    logger.info(f"Port forwarding configuration with {len(nat_rules)} rules submitted")
    console.print(f"Task: {task_id}")


@network_app.command("rules")
def rules_command(
    ctx: typer.Context,
    vapp_id: str = NetworkOptions.vapp_id(),
    network_name: Optional[str] = NetworkOptions.network_name(required=False),
    output_format: str = NetworkOptions.output_format(),
):
    """
    List the port forwarding rules of a vApp.

    The network must be natRouted with NAT type portForwarding.
    """
    try:
        nat_rules = get_vapp_port_forwarding_rules(get_transport(ctx), vapp_id, network_name)
    except VAppNetError as e:
        logger.error(f"Failed to read port forwarding rules: {e}")
        raise typer.Exit(1)

    print_rules(nat_rules, output_format)


@network_app.command("edge-ip")
def edge_ip_command(
    ctx: typer.Context,
    vapp_id: str = NetworkOptions.vapp_id(),
    network_name: Optional[str] = NetworkOptions.network_name(required=False),
):
    """
    Show the public IP of the vApp's edge device.

    Exits with status 2 when no external IP is allocated yet.
    """
    try:
        edge_ip = get_vapp_edge_public_ip(get_transport(ctx), vapp_id, network_name)
    except VAppNetError as e:
        logger.error(f"Failed to read edge IP: {e}")
        raise typer.Exit(1)

    if edge_ip is None:
        logger.warning(f"vApp {vapp_id} has no external IP on its edge device")
        raise typer.Exit(2)

    typer.echo(edge_ip)
