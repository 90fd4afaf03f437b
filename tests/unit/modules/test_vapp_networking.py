"""
Tests for the functional vApp networking API.
"""

import pytest

import vappnet
from vappnet.core.exceptions import StatePreconditionError
from vappnet.modules.vapp_networking import (
    get_vapp_edge_public_ip,
    get_vapp_port_forwarding_rules,
    set_vapp_network_config,
    set_vapp_port_forwarding_rules,
)

from tests.common import API_URL, TASK_ID, FakeTransport


def test_set_vapp_network_config(fake_transport):
    task_id = set_vapp_network_config(
        fake_transport, "1234", "net1",
        fence_mode="natRouted", parent_network={"name": "ext", "id": "42"},
    )

    assert task_id == TASK_ID
    assert fake_transport.methods == ["GET", "PUT"]

    sent = fake_transport.sent_document()
    net1 = sent.xpath("//*[@networkName=$name]", name="net1")[0]
    assert net1.descendant("FenceMode").text == "natRouted"
    assert net1.descendant("ParentNetwork").get_attribute("href") == f"{API_URL}/admin/network/42"


def test_set_vapp_port_forwarding_rules():
    transport = FakeTransport()

    task_id = set_vapp_port_forwarding_rules(
        transport, "1234", "net1", "ext-42",
        [{"external_port": 2222, "vm_scoped_local_id": "vm-1", "internal_port": 22}],
    )

    assert task_id == TASK_ID
    assert transport.methods == ["PUT"]
    sent = transport.sent_document()
    assert sent.descendant("FenceMode").text == "isolated"
    assert sent.descendant("Policy").text == "allowTraffic"
    assert sent.descendant("ExternalPort").text == "2222"


def test_get_vapp_port_forwarding_rules(routed_transport):
    nat_rules = get_vapp_port_forwarding_rules(routed_transport, "1234")

    assert sorted(nat_rules) == ["1", "2"]
    assert nat_rules["1"]["InternalPort"] == "8080"


def test_get_vapp_edge_public_ip(fake_transport):
    assert get_vapp_edge_public_ip(fake_transport, "1234", "net2") == "203.0.113.10"

    with pytest.raises(StatePreconditionError):
        get_vapp_edge_public_ip(fake_transport, "1234")


def test_package_exports():
    assert vappnet.set_vapp_network_config is set_vapp_network_config
    assert vappnet.FenceMode.NAT_ROUTED == "natRouted"
    assert issubclass(vappnet.NetworkNotFoundError, vappnet.VAppNetError)
    assert issubclass(vappnet.DocumentStructureError, vappnet.ConfigError)
