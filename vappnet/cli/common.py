"""
Common CLI options and helpers for vappnet.

This module provides reusable option factories, the global callback that
configures logging and connection settings, and output helpers.
"""

import json
from typing import Any, Dict, List, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from vappnet.constants import VM_RULE_FIELDS, FenceMode, NatPolicy, Protocol, enum_values
from vappnet.core.logging_utils import (
    configure_logging,
    log_level_callback,
    log_file_callback,
)
from vappnet.core.settings import Settings, build_transport
from vappnet.core.transport import HttpTransport, Transport

# Rich console for output formatting
console = Console()


class CommonOptions:
    """Global options shared by every command."""

    @staticmethod
    def apply_to_app(app: typer.Typer):
        """Apply common options to the application."""

        @app.callback()
        def callback(
            ctx: typer.Context,
            verbose: bool = typer.Option(
                False, "--verbose", "-v", help="Enable verbose output"
            ),
            quiet: bool = typer.Option(
                False, "--quiet", "-q", help="Suppress console output"
            ),
            log_level: Optional[str] = typer.Option(
                None,
                "--log-level",
                "-l",
                help="Set log level (debug, info, warning, error, critical)",
                callback=log_level_callback,
            ),
            log_file: Optional[str] = typer.Option(
                None, "--log-file", "-f", help="Log to file", callback=log_file_callback
            ),
            settings_file: Optional[str] = typer.Option(
                None, "--settings", "-s", help="JSON settings file"
            ),
            api_url: Optional[str] = typer.Option(
                None, "--api-url", help="vCloud Director API base URL, e.g. https://vcd.example.com/api"
            ),
            token: Optional[str] = typer.Option(
                None, "--token", help="API session token (x-vcloud-authorization)"
            ),
        ):
            """vCloud Director vApp network configuration CLI"""
            configure_logging(
                level=log_level or "info", log_file=log_file, quiet=quiet, verbose=verbose
            )
            ctx.obj = {
                "settings_file": settings_file,
                "api_url": api_url,
                "auth_token": token,
            }


class NetworkOptions:
    """Options for network commands."""

    @staticmethod
    def vapp_id():
        """Option for the vApp id."""
        return typer.Option(..., "--vapp", help="vApp id (the part after 'vapp-')")

    @staticmethod
    def network_name(required: bool = True):
        """Option for the vApp network name."""
        if required:
            return typer.Option(..., "--network", "-n", help="vApp network name")
        return typer.Option(
            None, "--network", "-n", help="vApp network name (first network if omitted)"
        )

    @staticmethod
    def fence_mode(default: Optional[str] = None):
        """Option for the fence mode."""
        return typer.Option(
            default,
            "--fence-mode",
            help=f"Fence mode ({', '.join(enum_values(FenceMode))})",
            autocompletion=lambda: enum_values(FenceMode),
        )

    @staticmethod
    def nat_policy():
        """Option for the NAT policy."""
        return typer.Option(
            NatPolicy.ALLOW_TRAFFIC.value,
            "--nat-policy",
            help=f"NAT policy ({', '.join(enum_values(NatPolicy))})",
            autocompletion=lambda: enum_values(NatPolicy),
        )

    @staticmethod
    def output_format():
        """Option for the output format."""
        return typer.Option(
            "table",
            "--format",
            help="Output format (table, json, yaml)",
            autocompletion=lambda: ["table", "json", "yaml"],
        )


def load_settings(ctx: typer.Context) -> Settings:
    """Resolve settings from the global options of the invocation."""
    options: Dict[str, Any] = ctx.obj or {}
    settings = Settings.load(options.get("settings_file"))
    return settings.update(api_url=options.get("api_url"), auth_token=options.get("auth_token"))


def get_transport(ctx: typer.Context) -> Transport:
    """Create a connected transport from the global options of the invocation."""
    return build_transport(load_settings(ctx))


def get_offline_transport(ctx: typer.Context) -> Transport:
    """Create a transport that is never logged in, for commands that only build documents."""
    settings = load_settings(ctx)
    return HttpTransport(settings.require_api_url(), api_version=settings.api_version)


def parse_rule_option(value: str) -> Dict[str, str]:
    """
    Parse a ``--rule`` value.

    Format: ``EXTERNAL_PORT:VM_ID:INTERNAL_PORT[:PROTOCOL[:NIC_ID]]``

    Raises:
        typer.BadParameter: If the value does not follow the format
    """
    parts = value.split(":")
    if len(parts) < 3 or len(parts) > 5 or not all(parts[:3]):
        raise typer.BadParameter(
            f"Invalid rule '{value}', expected EXTERNAL_PORT:VM_ID:INTERNAL_PORT[:PROTOCOL[:NIC_ID]]"
        )

    rule = {
        "external_port": parts[0],
        "vm_scoped_local_id": parts[1],
        "internal_port": parts[2],
    }
    if len(parts) > 3 and parts[3]:
        protocol = parts[3].upper()
        if protocol not in enum_values(Protocol):
            raise typer.BadParameter(
                f"Invalid protocol '{parts[3]}' in rule '{value}' ({', '.join(enum_values(Protocol))})"
            )
        rule["protocol"] = protocol
    if len(parts) > 4 and parts[4]:
        rule["vm_nic_id"] = parts[4]
    return rule


def load_rules_file(path: str) -> List[Dict[str, Any]]:
    """
    Load NAT rules from a YAML or JSON file.

    The file holds a list of rule mappings, or a mapping with a ``nat_rules`` list.

    Raises:
        typer.BadParameter: If the file cannot be read or has the wrong shape
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise typer.BadParameter(f"Cannot read rules file {path}: {e}")

    if isinstance(data, dict):
        data = data.get("nat_rules")
    if not isinstance(data, list) or not all(isinstance(rule, dict) for rule in data):
        raise typer.BadParameter(f"Rules file {path} must contain a list of rule mappings")
    return data


def print_rules(nat_rules: Dict[str, Dict[str, str]], output_format: str = "table"):
    """Print NAT rules in the requested format."""
    output_format = output_format.lower()
    if output_format == "json":
        typer.echo(json.dumps(nat_rules, indent=2))
    elif output_format == "yaml":
        typer.echo(yaml.safe_dump(nat_rules, sort_keys=False, default_flow_style=False))
    elif output_format == "table":
        table = Table(title="Port forwarding rules")
        table.add_column("Id")
        for field in VM_RULE_FIELDS:
            table.add_column(field)
        for rule_id, fields in nat_rules.items():
            table.add_row(rule_id, *[fields.get(field, "") for field in VM_RULE_FIELDS])
        console.print(table)
    else:
        raise typer.BadParameter(f"Unsupported output format '{output_format}' (table, json, yaml)")
