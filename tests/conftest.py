"""
Test configuration and fixtures for vappnet tests.

This module provides pytest fixtures for unit tests.
"""

import os
import sys
import pytest

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tests.common import (  # noqa: E402
    ConfigFactory,
    FakeTransport,
    NETWORK_CONFIG_SECTION,
    ROUTED_NETWORK_CONFIG_SECTION,
)


@pytest.fixture
def section_xml():
    """Return a section with an isolated net1 and a routed net2."""
    return NETWORK_CONFIG_SECTION


@pytest.fixture
def section_node(section_xml):
    """Return the two network section as an XmlNode."""
    return ConfigFactory.node(section_xml)


@pytest.fixture
def routed_section_node():
    """Return a section with one routed network in port forwarding mode."""
    return ConfigFactory.node(ROUTED_NETWORK_CONFIG_SECTION)


@pytest.fixture
def fake_transport(section_xml):
    """Return a transport serving the two network section."""
    return FakeTransport(get_document=section_xml)


@pytest.fixture
def routed_transport():
    """Return a transport serving the routed section."""
    return FakeTransport(get_document=ROUTED_NETWORK_CONFIG_SECTION)
