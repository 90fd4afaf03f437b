"""
Core XML utilities for vappnet.

This module provides the parsing, lookup and serialization helpers the rest of
the package builds on. Lookups by tag compare local names only, so a vCloud
document behaves the same whether or not it carries the default
``http://www.vmware.com/vcloud/v1.5`` namespace.
"""

import logging
from typing import Dict, List, Optional, Tuple, Union

from lxml import etree

from ..exceptions import ParseError, XPathError

logger = logging.getLogger("vappnet")


def parse_xml_string(xml_string: Union[str, bytes]) -> Tuple[etree._ElementTree, etree._Element]:
    """
    Parse XML from a string or bytes.

    Args:
        xml_string: XML source as string or bytes

    Returns:
        Tuple containing (ElementTree, root Element)

    Raises:
        ParseError: If XML parsing fails
    """
    if isinstance(xml_string, str):
        xml_string = xml_string.encode('utf-8')

    try:
        # Entities and network access stay disabled for server supplied documents
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        root = etree.fromstring(xml_string, parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        error_msg = f"XML parsing failed: {e}"
        logger.error(error_msg)
        raise ParseError(error_msg) from e

    return etree.ElementTree(root), root


def local_name(element: etree._Element) -> str:
    """Return the tag of an element without its namespace."""
    return etree.QName(element).localname


def qualified_tag(parent: etree._Element, tag: str) -> str:
    """
    Qualify a tag with the namespace of a parent element.

    Args:
        parent: Element whose namespace the new tag should share
        tag: Unqualified tag name

    Returns:
        Tag in Clark notation when the parent is namespaced, else the bare tag
    """
    namespace = etree.QName(parent).namespace
    return f"{{{namespace}}}{tag}" if namespace else tag


def find_elements(
    root: etree._Element,
    xpath: str,
    namespaces: Optional[Dict[str, str]] = None,
    **variables
) -> List[etree._Element]:
    """
    Find all elements matching an XPath expression.

    Args:
        root: Root element to search from
        xpath: XPath expression to evaluate
        namespaces: Optional namespace map
        **variables: XPath variables referenced as ``$name`` in the expression

    Returns:
        List of matching elements

    Raises:
        XPathError: If the XPath expression is invalid
    """
    if not xpath:
        return []

    try:
        result = root.xpath(xpath, namespaces=namespaces, **variables)
    except etree.XPathError as e:
        error_msg = f"Error evaluating XPath '{xpath}': {e}"
        logger.error(error_msg)
        raise XPathError(error_msg) from e

    if isinstance(result, list):
        return [elem for elem in result if isinstance(elem, etree._Element)]
    if isinstance(result, etree._Element):
        return [result]
    return []


def find_element(
    root: etree._Element,
    xpath: str,
    namespaces: Optional[Dict[str, str]] = None,
    **variables
) -> Optional[etree._Element]:
    """
    Find a single element matching an XPath expression.

    Returns:
        First matching element or None if not found
    """
    elements = find_elements(root, xpath, namespaces, **variables)
    return elements[0] if elements else None


def find_children(element: etree._Element, tag: str) -> List[etree._Element]:
    """Return the direct children of ``element`` whose local name is ``tag``."""
    return [
        child for child in element
        if isinstance(child.tag, str) and local_name(child) == tag
    ]


def find_child(element: etree._Element, tag: str) -> Optional[etree._Element]:
    """Return the first direct child of ``element`` whose local name is ``tag``."""
    children = find_children(element, tag)
    return children[0] if children else None


def find_path(element: etree._Element, *tags: str) -> Optional[etree._Element]:
    """
    Walk down a chain of child tags, taking the first match at every step.

    Args:
        element: Element to start from
        *tags: Local names of the children to descend through

    Returns:
        The element at the end of the chain or None if any step is missing
    """
    current = element
    for tag in tags:
        current = find_child(current, tag)
        if current is None:
            return None
    return current


def find_descendant(element: etree._Element, tag: str) -> Optional[etree._Element]:
    """Return the first descendant of ``element`` in document order with local name ``tag``."""
    return find_element(element, ".//*[local-name()=$tag]", tag=tag)


def get_child_text(element: etree._Element, *tags: str, default: str = "") -> str:
    """
    Get the text found at the end of a chain of child tags.

    Text is returned verbatim. A missing element or an empty element yields
    ``default``.
    """
    target = find_path(element, *tags)
    if target is None or target.text is None:
        return default
    return target.text


def to_bytes(root: etree._Element, pretty_print: bool = False) -> bytes:
    """
    Serialize an element, with XML declaration, as UTF-8 bytes.

    Args:
        root: Element to serialize
        pretty_print: Whether to format the XML with indentation

    Returns:
        Serialized document
    """
    return etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=pretty_print,
    )
