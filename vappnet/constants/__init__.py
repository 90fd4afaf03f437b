"""
Constants package for vappnet.

This package exports constants used throughout vappnet, including namespaces,
resource paths, content types, default values and schema enumerations.
"""

from .common import (
    # XML Namespaces
    NAMESPACES,
    NETWORK_CONFIG_NSMAP,
    # Resource paths and content types
    PATHS,
    CONTENT_TYPES,
    HEADERS,
    TASK_MARKER,
    # Default values
    DEFAULT_VALUES,
    # Tag and attribute names
    TAG_NAMES,
    ATTRIBUTES,
    VM_RULE_FIELDS,
    # Schema enumerations
    FenceMode,
    NatType,
    NatPolicy,
    Protocol,
    enum_values,
)

# Define the public API
__all__ = [
    "NAMESPACES",
    "NETWORK_CONFIG_NSMAP",
    "PATHS",
    "CONTENT_TYPES",
    "HEADERS",
    "TASK_MARKER",
    "DEFAULT_VALUES",
    "TAG_NAMES",
    "ATTRIBUTES",
    "VM_RULE_FIELDS",
    "FenceMode",
    "NatType",
    "NatPolicy",
    "Protocol",
    "enum_values",
]
