"""
Core package for vappnet.

This package provides the core functionality for working with vCloud Director
network configuration documents:
- vappnet.core.xml: XML parsing, lookups and building
- vappnet.core.transport: the transport contract and its HTTP implementation
- vappnet.core.network_config: editing, building and reading network configuration
- vappnet.core.settings: connection settings
"""

# Import the xml package
from . import xml

from .xml import (
    # Classes
    XmlNode, XmlBuilder,

    # XML parsing and serialization
    parse_xml_string, to_bytes,

    # Lookups
    find_elements, find_element, find_children, find_child, find_path,
    find_descendant, get_child_text, local_name, qualified_tag,
)

from .exceptions import (
    VAppNetError, ConfigError, DocumentStructureError, ValidationError, ParseError,
    XPathError, SelectionError, NetworkNotFoundError, StatePreconditionError,
    TransportError, TaskReferenceError
)

from .transport import (
    Transport, HttpTransport, extract_task_id, task_id_from_url, get_header
)

from .network_config import (
    NetworkConfigEditor, PortForwardingConfigBuilder, NetworkConfigReader,
    ParentNetworkRef, PortForwardingRule, NatRules,
    select_network_config, network_config_path, coerce_enum
)

from .settings import Settings, build_transport
