"""
XML package for vappnet.

This package provides utilities for working with vCloud Director XML
documents, including parsing, namespace-agnostic lookups, in-place editing
and building new documents.

The package is organized into two modules:
- base: Core XML utilities and functions
- builder: Classes for building and manipulating XML

Most common functionality is available from the package directly.
"""

from .base import (
    parse_xml_string,
    local_name,
    qualified_tag,
    find_elements,
    find_element,
    find_children,
    find_child,
    find_path,
    find_descendant,
    get_child_text,
    to_bytes,
)

from .builder import (
    XmlNode,
    XmlBuilder,
)

__all__ = [
    # Base module exports
    'parse_xml_string',
    'local_name',
    'qualified_tag',
    'find_elements',
    'find_element',
    'find_children',
    'find_child',
    'find_path',
    'find_descendant',
    'get_child_text',
    'to_bytes',

    # XML builder exports
    'XmlNode',
    'XmlBuilder',
]
