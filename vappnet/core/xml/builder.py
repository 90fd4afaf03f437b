"""
XML builder utility for vappnet.

This module provides higher-level abstractions for XML operations, making it
easier to edit server documents in place and to create new ones.
"""

import logging
from typing import Dict, Optional, List
from lxml import etree

from ..exceptions import XPathError
from .base import (
    parse_xml_string,
    find_children,
    find_child,
    find_path,
    find_descendant,
    local_name,
    qualified_tag,
    to_bytes,
)

# Initialize logger
logger = logging.getLogger("vappnet")

class XmlNode:
    """
    A high-level wrapper for XML elements.

    Provides a more Pythonic interface for working with XML elements, with
    methods for navigating, querying, and modifying the element in place.
    Child lookups match on local name, ignoring namespaces.
    """

    def __init__(self, element: etree._Element):
        """
        Initialize with an XML element.

        Args:
            element: The XML element to wrap
        """
        self.element = element

    @classmethod
    def create(
        cls,
        tag: str,
        attributes: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
        nsmap: Optional[Dict[Optional[str], str]] = None
    ) -> 'XmlNode':
        """
        Create a new XML node.

        Args:
            tag: Element tag name (Clark notation for namespaced tags)
            attributes: Optional element attributes
            text: Optional element text
            nsmap: Optional namespace prefix mapping declared on the element

        Returns:
            XmlNode: A new XmlNode instance
        """
        element = etree.Element(tag, attrib=attributes or {}, nsmap=nsmap)
        if text is not None:
            element.text = text
        return cls(element)

    @classmethod
    def from_string(cls, xml_string: str) -> 'XmlNode':
        """
        Create a node from an XML string.

        Raises:
            ParseError: If the XML string cannot be parsed
        """
        tree, root = parse_xml_string(xml_string)
        return cls(root)

    @property
    def tag(self) -> str:
        """Get the element tag name without namespace."""
        return local_name(self.element)

    @property
    def text(self) -> Optional[str]:
        """Get the element text."""
        return self.element.text

    @text.setter
    def text(self, value: Optional[str]):
        """Set the element text."""
        self.element.text = value

    @property
    def attributes(self) -> Dict[str, str]:
        """Get all element attributes."""
        return dict(self.element.attrib)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get an attribute value, or ``default`` if it is not set."""
        return self.element.get(name, default)

    def set_attribute(self, name: str, value: str) -> 'XmlNode':
        """
        Set an attribute value.

        Returns:
            Self for chaining
        """
        self.element.set(name, value)
        return self

    @property
    def parent(self) -> Optional['XmlNode']:
        """Get the parent node, or None for the root."""
        parent = self.element.getparent()
        return XmlNode(parent) if parent is not None else None

    @property
    def children(self) -> List['XmlNode']:
        """Get all child element nodes."""
        return [XmlNode(child) for child in self.element if isinstance(child.tag, str)]

    def child(self, tag: str, index: int = 0) -> Optional['XmlNode']:
        """
        Get a specific child node.

        Args:
            tag: Local name of the child
            index: Index of the child (if multiple match)

        Returns:
            Child node or None if not found
        """
        matching_children = find_children(self.element, tag)
        return XmlNode(matching_children[index]) if 0 <= index < len(matching_children) else None

    def children_named(self, tag: str) -> List['XmlNode']:
        """Get all direct children with the given local name."""
        return [XmlNode(child) for child in find_children(self.element, tag)]

    def path(self, *tags: str) -> Optional['XmlNode']:
        """
        Descend through a chain of child tags, first match at every step.

        Returns:
            Node at the end of the chain or None if any step is missing
        """
        element = find_path(self.element, *tags)
        return XmlNode(element) if element is not None else None

    def descendant(self, tag: str) -> Optional['XmlNode']:
        """Get the first descendant with the given local name, in document order."""
        element = find_descendant(self.element, tag)
        return XmlNode(element) if element is not None else None

    def add_child(self, tag: str, attributes: Optional[Dict[str, str]] = None, text: Optional[str] = None) -> 'XmlNode':
        """
        Add a child node after the existing children.

        An unqualified tag takes the namespace of this node.

        Returns:
            The newly created child node
        """
        if not tag.startswith("{"):
            tag = qualified_tag(self.element, tag)
        child = etree.SubElement(self.element, tag, attrib=attributes or {})
        if text is not None:
            child.text = text
        return XmlNode(child)

    def insert_after(self, anchor: 'XmlNode', tag: str, attributes: Optional[Dict[str, str]] = None) -> 'XmlNode':
        """
        Create a child node and place it directly after ``anchor``.

        The insertion index is computed from the anchor's position, so siblings
        keep their order. Whitespace following the anchor is copied onto the
        new node to keep indented documents readable.

        Args:
            anchor: Existing child of this node to insert after
            tag: Local name of the new node (namespace taken from this node)
            attributes: Optional element attributes

        Returns:
            The newly created node

        Raises:
            ValueError: If ``anchor`` is not a child of this node
        """
        if anchor.element.getparent() is not self.element:
            raise ValueError(f"<{anchor.tag}> is not a child of <{self.tag}>")

        position = self.element.index(anchor.element) + 1
        new_element = etree.Element(qualified_tag(self.element, tag), attrib=attributes or {})
        new_element.tail = anchor.element.tail
        self.element.insert(position, new_element)
        logger.debug(f"Inserted <{tag}> after <{anchor.tag}> at position {position} of <{self.tag}>")
        return XmlNode(new_element)

    def index(self) -> int:
        """Position of this node among its parent's children."""
        parent = self.element.getparent()
        if parent is None:
            return 0
        return parent.index(self.element)

    def xpath(self, expression: str, namespaces: Optional[Dict[str, str]] = None, **variables) -> List['XmlNode']:
        """
        Execute an XPath expression returning elements.

        Raises:
            XPathError: If the XPath expression is invalid
        """
        try:
            results = self.element.xpath(expression, namespaces=namespaces, **variables)
        except etree.XPathError as e:
            logger.error(f"Error evaluating XPath '{expression}': {e}")
            raise XPathError(f"Failed to evaluate XPath '{expression}': {e}") from e
        return [XmlNode(result) for result in results if isinstance(result, etree._Element)]

    def to_bytes(self, pretty_print: bool = False) -> bytes:
        """Serialize the node, with XML declaration, as UTF-8 bytes."""
        return to_bytes(self.element, pretty_print=pretty_print)

    def to_string(self, pretty_print: bool = True) -> str:
        """Serialize the node to a string."""
        return self.to_bytes(pretty_print=pretty_print).decode("utf-8")

    def __eq__(self, other: object) -> bool:
        """Compare equality with another node."""
        if not isinstance(other, XmlNode):
            return False
        return etree.tostring(self.element) == etree.tostring(other.element)

    def __repr__(self) -> str:
        """String representation."""
        attributes = ' '.join(f'{k}="{v}"' for k, v in self.element.attrib.items())
        return f"<XmlNode {self.tag} {attributes}>"


class XmlBuilder:
    """
    Builder for creating XML hierarchies.

    Provides a fluent interface for creating XML elements. Unqualified tags
    added through the builder inherit the namespace of their parent, so a
    document only needs its default namespace declared on the root.
    """

    def __init__(
        self,
        root_tag: str,
        attributes: Optional[Dict[str, str]] = None,
        nsmap: Optional[Dict[Optional[str], str]] = None
    ):
        """
        Initialize with a root tag.

        Args:
            root_tag: Root element tag name
            attributes: Optional root element attributes
            nsmap: Optional namespace map; its ``None`` entry qualifies the root tag
        """
        default_namespace = (nsmap or {}).get(None)
        if default_namespace and not root_tag.startswith("{"):
            root_tag = f"{{{default_namespace}}}{root_tag}"
        self.root = XmlNode.create(root_tag, attributes, nsmap=nsmap)
        self.current = self.root
        self._path_stack = []

    def add(self, tag: str, attributes: Optional[Dict[str, str]] = None, text: Optional[str] = None) -> 'XmlBuilder':
        """
        Add a child element to the current element.

        Returns:
            Self for chaining
        """
        self.current.add_child(tag, attributes, text)
        return self

    def into(self, tag: str, attributes: Optional[Dict[str, str]] = None, text: Optional[str] = None) -> 'XmlBuilder':
        """
        Add a child element and navigate into it.

        Returns:
            Self for chaining
        """
        self._path_stack.append(self.current)
        self.current = self.current.add_child(tag, attributes, text)
        return self

    def up(self) -> 'XmlBuilder':
        """
        Navigate up to the parent element.

        Raises:
            ValueError: If already at the root element
        """
        if not self._path_stack:
            raise ValueError("Already at root element")

        self.current = self._path_stack.pop()
        return self

    def build(self) -> XmlNode:
        """Build and return the root XML node."""
        return self.root

    def to_bytes(self, pretty_print: bool = False) -> bytes:
        """Build and return the XML tree as UTF-8 bytes."""
        return self.root.to_bytes(pretty_print=pretty_print)
