"""
vApp network configuration for vappnet.

This module translates network intents into ``NetworkConfigSection``
documents and back:

- ``NetworkConfigEditor`` fetches the current section, edits the named network
  in place and PUTs the whole document back.
- ``PortForwardingConfigBuilder`` builds a new section holding one network in
  port forwarding mode and PUTs it, replacing whatever was configured.
- ``NetworkConfigReader`` reads the port forwarding rules or the public IP of
  the edge device once the network is known to be NAT routed.

Write operations return the id of the asynchronous task the API started;
polling it is left to the caller.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Type, TypeVar, Union

from ..constants import (
    ATTRIBUTES,
    CONTENT_TYPES,
    DEFAULT_VALUES,
    NETWORK_CONFIG_NSMAP,
    NAMESPACES,
    PATHS,
    TAG_NAMES,
    VM_RULE_FIELDS,
    FenceMode,
    NatPolicy,
    NatType,
    Protocol,
    enum_values,
)
from .exceptions import (
    DocumentStructureError,
    NetworkNotFoundError,
    StatePreconditionError,
    ValidationError,
)
from .logging_utils import log_structured
from .transport import Transport, extract_task_id
from .xml.base import get_child_text
from .xml.builder import XmlBuilder, XmlNode

logger = logging.getLogger("vappnet")

E = TypeVar("E", bound=Enum)

NatRules = Dict[str, Dict[str, str]]


def coerce_enum(enum_cls: Type[E], value: Union[E, str], field: str) -> E:
    """
    Convert a caller supplied value to a member of ``enum_cls``.

    Raises:
        ValidationError: If the value is not one of the enumeration's values
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(enum_values(enum_cls))
        raise ValidationError(f"Invalid {field} {value!r}; expected one of: {allowed}")


def _required_text(values: Mapping[str, Any], key: str, what: str) -> str:
    value = values.get(key)
    if value is None or str(value) == "":
        raise ValidationError(f"{what} requires '{key}'")
    return str(value)


@dataclass
class ParentNetworkRef:
    """Reference to the organization network a vApp network connects to."""
    name: str
    id: str

    @classmethod
    def coerce(cls, value: Union["ParentNetworkRef", Mapping[str, Any]]) -> "ParentNetworkRef":
        """Accept an instance or a mapping with ``name`` and ``id`` keys."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ValidationError(f"Parent network must be a mapping with name and id, got {value!r}")
        return cls(
            name=_required_text(value, "name", "Parent network"),
            id=_required_text(value, "id", "Parent network"),
        )


@dataclass
class PortForwardingRule:
    """A port forwarding rule to create on the edge device."""
    external_port: str
    vm_scoped_local_id: str
    internal_port: str
    vm_nic_id: str = DEFAULT_VALUES["VM_NIC_ID"]
    protocol: Protocol = Protocol.TCP

    def __post_init__(self):
        self.external_port = str(self.external_port)
        self.vm_scoped_local_id = str(self.vm_scoped_local_id)
        self.internal_port = str(self.internal_port)
        self.vm_nic_id = str(self.vm_nic_id)
        self.protocol = coerce_enum(Protocol, self.protocol, "protocol")

    @classmethod
    def coerce(cls, value: Union["PortForwardingRule", Mapping[str, Any]]) -> "PortForwardingRule":
        """
        Accept an instance or a mapping.

        Mappings need ``external_port``, ``vm_scoped_local_id`` and
        ``internal_port``; ``vm_nic_id`` and ``protocol`` fall back to their
        defaults when missing or None.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ValidationError(f"NAT rule must be a mapping, got {value!r}")

        rule = cls(
            external_port=_required_text(value, "external_port", "NAT rule"),
            vm_scoped_local_id=_required_text(value, "vm_scoped_local_id", "NAT rule"),
            internal_port=_required_text(value, "internal_port", "NAT rule"),
        )
        if value.get("vm_nic_id") is not None:
            rule.vm_nic_id = str(value["vm_nic_id"])
        if value.get("protocol") is not None:
            rule.protocol = coerce_enum(Protocol, value["protocol"], "protocol")
        return rule


def network_config_path(vapp_id: str) -> str:
    """Resource path of a vApp's network configuration section."""
    return PATHS["NETWORK_CONFIG_SECTION"].format(vapp_id=vapp_id)


def _section(root: XmlNode) -> XmlNode:
    if root.tag == TAG_NAMES["SECTION"]:
        return root
    section = root.descendant(TAG_NAMES["SECTION"])
    if section is None:
        raise DocumentStructureError(f"Response is a <{root.tag}>, not a {TAG_NAMES['SECTION']}")
    return section


def select_network_config(root: XmlNode, network_name: str) -> XmlNode:
    """
    Select the ``NetworkConfig`` whose ``networkName`` equals ``network_name``.

    The first match wins when several networks share the name.

    Raises:
        NetworkNotFoundError: If no network has that name
    """
    matches = [
        network for network in _section(root).children_named(TAG_NAMES["NETWORK_CONFIG"])
        if network.get_attribute(ATTRIBUTES["NETWORK_NAME"]) == network_name
    ]
    if not matches:
        logger.error(f"Network named {network_name} not found")
        raise NetworkNotFoundError(f"Network named {network_name} not found.")
    if len(matches) > 1:
        logger.warning(f"{len(matches)} networks are named {network_name}, using the first one")
    return matches[0]


class _NetworkConfigOperation:
    """Shared plumbing: fetch and store the network configuration section."""

    def __init__(self, transport: Transport):
        self.transport = transport

    def fetch(self, vapp_id: str) -> XmlNode:
        """
        GET the network configuration section of a vApp.

        Raises:
            TransportError: If the request fails
            DocumentStructureError: If the response has no body
        """
        path = network_config_path(vapp_id)
        logger.debug(f"Fetching network configuration from {path}")
        document, headers = self.transport.send("GET", path)
        if document is None:
            raise DocumentStructureError(f"Empty response from GET {path}")
        return XmlNode(document)

    def store(self, vapp_id: str, body: bytes) -> str:
        """
        PUT a network configuration section and return the started task id.

        Raises:
            TransportError: If the request fails
            TaskReferenceError: If the response does not reference a task
        """
        path = network_config_path(vapp_id)
        logger.debug(f"Sending {len(body)} bytes to {path}")
        document, headers = self.transport.send(
            "PUT", path, body, CONTENT_TYPES["NETWORK_CONFIG_SECTION"]
        )
        task_id = extract_task_id(headers, document)
        log_structured("Network configuration update accepted", "info", vapp_id=vapp_id, task_id=task_id)
        return task_id


class NetworkConfigEditor(_NetworkConfigOperation):
    """
    Edits one network of an existing network configuration section.

    Only the requested fields change; every other node of the document is sent
    back exactly as the server returned it.
    """

    def apply_edits(
        self,
        root: XmlNode,
        network_name: str,
        fence_mode: Optional[Union[FenceMode, str]] = None,
        parent_network: Optional[Union[ParentNetworkRef, Mapping[str, Any]]] = None,
    ) -> XmlNode:
        """
        Edit the named network of a parsed section in place.

        Args:
            root: Parsed ``NetworkConfigSection``
            network_name: Name of the network to edit
            fence_mode: New fence mode (optional)
            parent_network: Parent network to link (optional)

        Returns:
            The edited ``NetworkConfig`` node

        Raises:
            ValidationError: If fence_mode or parent_network is invalid
            NetworkNotFoundError: If the network does not exist
            DocumentStructureError: If a node required by the edit is missing
        """
        if fence_mode is not None:
            fence_mode = coerce_enum(FenceMode, fence_mode, "fence mode")
        if parent_network is not None:
            parent_network = ParentNetworkRef.coerce(parent_network)

        network = select_network_config(root, network_name)

        if fence_mode is not None:
            self._required(network, TAG_NAMES["FENCE_MODE"], network_name).text = fence_mode.value
            logger.debug(f"FenceMode of {network_name} set to {fence_mode.value}")

        self._required(network, TAG_NAMES["IS_INHERITED"], network_name).text = DEFAULT_VALUES["IS_INHERITED"]

        if parent_network is not None:
            self._link_parent(network, network_name, parent_network)

        return network

    def merge(
        self,
        vapp_id: str,
        network_name: str,
        fence_mode: Optional[Union[FenceMode, str]] = None,
        parent_network: Optional[Union[ParentNetworkRef, Mapping[str, Any]]] = None,
    ) -> str:
        """
        Fetch the vApp's network configuration, edit one network and store it.

        Args:
            vapp_id: Id of the vApp
            network_name: Name of the vApp network to edit
            fence_mode: New fence mode (optional)
            parent_network: Parent network to link, with ``name`` and ``id`` (optional)

        Returns:
            Id of the task applying the configuration

        Raises:
            ValidationError: If fence_mode or parent_network is invalid
            NetworkNotFoundError: If the network does not exist
            DocumentStructureError: If a node required by the edit is missing
            TransportError: If a request fails
        """
        # Reject bad input before talking to the API
        if fence_mode is not None:
            fence_mode = coerce_enum(FenceMode, fence_mode, "fence mode")
        if parent_network is not None:
            parent_network = ParentNetworkRef.coerce(parent_network)

        logger.info(f"Updating network {network_name} of vApp {vapp_id}")
        root = self.fetch(vapp_id)
        self.apply_edits(root, network_name, fence_mode, parent_network)
        return self.store(vapp_id, root.to_bytes())

    @staticmethod
    def _required(network: XmlNode, tag: str, network_name: str) -> XmlNode:
        node = network.descendant(tag)
        if node is None:
            logger.error(f"Network {network_name} has no {tag}")
            raise DocumentStructureError(f"Network {network_name} has no {tag} element.")
        return node

    def _link_parent(self, network: XmlNode, network_name: str, parent_network: ParentNetworkRef):
        parent_node = network.descendant(TAG_NAMES["PARENT_NETWORK"])

        if parent_node is None:
            ip_scopes = network.descendant(TAG_NAMES["IP_SCOPES"])
            if ip_scopes is None:
                logger.error(f"Network {network_name} has no IpScopes to place a ParentNetwork after")
                raise DocumentStructureError(
                    f"Network {network_name} has no {TAG_NAMES['IP_SCOPES']} element; "
                    f"cannot place {TAG_NAMES['PARENT_NETWORK']}."
                )
            parent_node = ip_scopes.parent.insert_after(ip_scopes, TAG_NAMES["PARENT_NETWORK"])
            logger.debug(f"Created ParentNetwork for {network_name}")

        parent_node.set_attribute(ATTRIBUTES["NAME"], parent_network.name)
        parent_node.set_attribute(ATTRIBUTES["ID"], parent_network.id)
        parent_node.set_attribute(
            ATTRIBUTES["HREF"],
            PATHS["ADMIN_NETWORK"].format(api_url=self.transport.api_url, network_id=parent_network.id),
        )


class PortForwardingConfigBuilder(_NetworkConfigOperation):
    """
    Builds a network configuration section for one NAT routed network.

    The section replaces the vApp's whole network configuration; settings of
    other networks are not preserved.
    """

    def build(
        self,
        network_name: str,
        parent_network: str,
        nat_rules: Iterable[Union[PortForwardingRule, Mapping[str, Any]]],
        fence_mode: Union[FenceMode, str] = FenceMode.ISOLATED,
        nat_policy: Union[NatPolicy, str] = NatPolicy.ALLOW_TRAFFIC,
    ) -> XmlNode:
        """
        Build the section document.

        Args:
            network_name: Name of the vApp network
            parent_network: Id of the parent network
            nat_rules: Port forwarding rules, in the order they should apply
            fence_mode: Fence mode (default isolated)
            nat_policy: NAT policy (default allowTraffic)

        Returns:
            Root ``NetworkConfigSection`` node

        Raises:
            ValidationError: If any argument is invalid
        """
        if not network_name:
            raise ValidationError("A network name is required")
        if not parent_network:
            raise ValidationError("A parent network id is required")
        if nat_rules is None:
            raise ValidationError("A list of NAT rules is required")

        fence_mode = coerce_enum(FenceMode, fence_mode, "fence mode")
        nat_policy = coerce_enum(NatPolicy, nat_policy, "NAT policy")
        rules = [PortForwardingRule.coerce(rule) for rule in nat_rules]

        builder = XmlBuilder(TAG_NAMES["SECTION"], nsmap=NETWORK_CONFIG_NSMAP)
        builder.add(f"{{{NAMESPACES['ovf']}}}{TAG_NAMES['INFO']}", text=DEFAULT_VALUES["INFO_TEXT"])
        builder.into(TAG_NAMES["NETWORK_CONFIG"], {ATTRIBUTES["NETWORK_NAME"]: network_name})
        builder.into(TAG_NAMES["CONFIGURATION"])
        builder.add(TAG_NAMES["PARENT_NETWORK"], {
            ATTRIBUTES["HREF"]: PATHS["NETWORK"].format(api_url=self.transport.api_url, network_id=parent_network)
        })
        builder.add(TAG_NAMES["FENCE_MODE"], text=fence_mode.value)
        builder.into(TAG_NAMES["FEATURES"]).into(TAG_NAMES["NAT_SERVICE"])
        builder.add(TAG_NAMES["IS_ENABLED"], text=DEFAULT_VALUES["IS_ENABLED"])
        builder.add(TAG_NAMES["NAT_TYPE"], text=NatType.PORT_FORWARDING.value)
        builder.add(TAG_NAMES["POLICY"], text=nat_policy.value)

        for rule in rules:
            builder.into(TAG_NAMES["NAT_RULE"]).into(TAG_NAMES["VM_RULE"])
            builder.add("ExternalPort", text=rule.external_port)
            builder.add("VAppScopedVmId", text=rule.vm_scoped_local_id)
            builder.add("VmNicId", text=rule.vm_nic_id)
            builder.add("InternalPort", text=rule.internal_port)
            builder.add("Protocol", text=rule.protocol.value)
            builder.up().up()

        logger.debug(f"Built port forwarding configuration for {network_name} with {len(rules)} rules")
        return builder.build()

    def apply(
        self,
        vapp_id: str,
        network_name: str,
        parent_network: str,
        nat_rules: Iterable[Union[PortForwardingRule, Mapping[str, Any]]],
        fence_mode: Union[FenceMode, str] = FenceMode.ISOLATED,
        nat_policy: Union[NatPolicy, str] = NatPolicy.ALLOW_TRAFFIC,
    ) -> str:
        """
        Replace the vApp's network configuration with a port forwarding setup.

        Returns:
            Id of the task applying the configuration

        Raises:
            ValidationError: If any argument is invalid
            TransportError: If the request fails
        """
        document = self.build(network_name, parent_network, nat_rules, fence_mode, nat_policy)
        logger.info(f"Replacing network configuration of vApp {vapp_id} with port forwarding on {network_name}")
        return self.store(vapp_id, document.to_bytes())


class NetworkConfigReader(_NetworkConfigOperation):
    """
    Reads port forwarding state from a vApp's network configuration.

    Without a network name the first ``Configuration`` of the section is used.
    A vApp with several routed networks should name the one to read.
    """

    def configuration(self, root: XmlNode, network_name: Optional[str] = None) -> XmlNode:
        """
        Select the ``Configuration`` to read and check it is in port forwarding mode.

        Raises:
            NetworkNotFoundError: If ``network_name`` does not exist
            DocumentStructureError: If there is no Configuration to read
            StatePreconditionError: If FenceMode or NatType has the wrong value
        """
        if network_name is not None:
            configuration = select_network_config(root, network_name).child(TAG_NAMES["CONFIGURATION"])
            candidates = [configuration] if configuration is not None else []
        else:
            candidates = root.xpath(
                "//*[local-name()=$section]/*[local-name()=$network]/*[local-name()=$configuration]",
                section=TAG_NAMES["SECTION"],
                network=TAG_NAMES["NETWORK_CONFIG"],
                configuration=TAG_NAMES["CONFIGURATION"],
            )
            if len(candidates) > 1:
                logger.warning(f"{len(candidates)} network configurations found, reading the first one")

        if not candidates:
            raise DocumentStructureError("No network Configuration found in the network configuration section.")
        configuration = candidates[0]

        fence_mode = get_child_text(configuration.element, TAG_NAMES["FENCE_MODE"]).strip()
        if fence_mode != FenceMode.NAT_ROUTED.value:
            logger.error(f"FenceMode is {fence_mode!r}, expected {FenceMode.NAT_ROUTED.value}")
            raise StatePreconditionError(TAG_NAMES["FENCE_MODE"], FenceMode.NAT_ROUTED.value, fence_mode)

        nat_type = get_child_text(
            configuration.element, TAG_NAMES["FEATURES"], TAG_NAMES["NAT_SERVICE"], TAG_NAMES["NAT_TYPE"]
        ).strip()
        if nat_type != NatType.PORT_FORWARDING.value:
            logger.error(f"NatType is {nat_type!r}, expected {NatType.PORT_FORWARDING.value}")
            raise StatePreconditionError(TAG_NAMES["NAT_TYPE"], NatType.PORT_FORWARDING.value, nat_type)

        return configuration

    def port_forwarding_rules(self, root: XmlNode, network_name: Optional[str] = None) -> NatRules:
        """Extract the NAT rules of a parsed section, keyed by rule id."""
        configuration = self.configuration(root, network_name)
        nat_service = configuration.path(TAG_NAMES["FEATURES"], TAG_NAMES["NAT_SERVICE"])

        nat_rules: NatRules = {}
        for rule in nat_service.children_named(TAG_NAMES["NAT_RULE"]):
            rule_id = get_child_text(rule.element, TAG_NAMES["ID"])
            vm_rule = rule.child(TAG_NAMES["VM_RULE"])
            nat_rules[rule_id] = {
                field: get_child_text(vm_rule.element, field) if vm_rule is not None else ""
                for field in VM_RULE_FIELDS
            }
        return nat_rules

    def edge_public_ip(self, root: XmlNode, network_name: Optional[str] = None) -> Optional[str]:
        """Extract the external IP of the edge device from a parsed section."""
        configuration = self.configuration(root, network_name)
        external_ip = configuration.path(TAG_NAMES["ROUTER_INFO"], TAG_NAMES["EXTERNAL_IP"])
        if external_ip is None:
            return None
        return external_ip.text or ""

    def get_port_forwarding_rules(self, vapp_id: str, network_name: Optional[str] = None) -> NatRules:
        """
        Get the port forwarding rules of a vApp.

        Args:
            vapp_id: Id of the vApp
            network_name: Network to read (optional, first network by default)

        Returns:
            Mapping of rule id to the rule's VmRule fields, all as text

        Raises:
            StatePreconditionError: If the network is not natRouted/portForwarding
            NetworkNotFoundError: If ``network_name`` does not exist
            TransportError: If the request fails
        """
        nat_rules = self.port_forwarding_rules(self.fetch(vapp_id), network_name)
        logger.info(f"Found {len(nat_rules)} port forwarding rules on vApp {vapp_id}")
        return nat_rules

    def get_edge_public_ip(self, vapp_id: str, network_name: Optional[str] = None) -> Optional[str]:
        """
        Get the public IP of a vApp's edge device.

        The edge device only has an external IP once the vApp is deployed with a
        natRouted network in portForwarding mode.

        Returns:
            The external IP, or None if none is allocated

        Raises:
            StatePreconditionError: If the network is not natRouted/portForwarding
            NetworkNotFoundError: If ``network_name`` does not exist
            TransportError: If the request fails
        """
        edge_ip = self.edge_public_ip(self.fetch(vapp_id), network_name)
        if edge_ip is None:
            logger.info(f"vApp {vapp_id} has no edge external IP")
        return edge_ip
