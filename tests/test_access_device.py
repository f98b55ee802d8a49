"""Unit tests for the switch port override editor."""

import json

import pytest
import responses as rsps_lib

from unifi_multisite_api import AccessDevice, UnifiDevice, UnifiValidationError

from conftest import LEGACY_URL, envelope


def _switch(**overrides):
    device = {
        "_id": "sw1",
        "mac": "aa:bb:cc:dd:ee:ff",
        "type": "usw",
        "port_table": [
            {"port_idx": 1, "portconf_id": "pc-all", "port_poe": True},
            {"port_idx": 2, "portconf_id": "pc-all", "port_poe": True},
            {"port_idx": 3, "portconf_id": "pc-uplink", "port_poe": False},
        ],
        "port_overrides": [{"port_idx": 2, "portconf_id": "pc-all", "poe_mode": "auto"}],
    }
    device.update(overrides)
    return device


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_rejects_non_switch():
    with pytest.raises(UnifiValidationError):
        AccessDevice(_switch(type="uap"))


def test_unwraps_site_result_lists():
    switch = AccessDevice([[_switch()]])
    assert switch.device_id == "sw1"


def test_rejects_empty_result():
    with pytest.raises(UnifiValidationError):
        AccessDevice([[]])


def test_accepts_device_model():
    device = UnifiDevice(mac="aa:bb:cc:dd:ee:ff", type="usw", _id="sw1",
                         port_table=_switch()["port_table"])
    assert AccessDevice(device).device_id == "sw1"


def test_does_not_modify_source():
    source = _switch()
    AccessDevice(source).set_poe(2, "off")
    assert source["port_overrides"][0]["poe_mode"] == "auto"


# ---------------------------------------------------------------------------
# set_poe
# ---------------------------------------------------------------------------

def test_set_poe_updates_existing_override():
    switch = AccessDevice(_switch())
    switch.set_poe(2, "off")

    assert switch.get_changes() == {
        "port_overrides": [{"port_idx": 2, "portconf_id": "pc-all", "poe_mode": "off"}]}


def test_set_poe_adds_override():
    switch = AccessDevice(_switch())
    switch.set_poe(1, "passv24")

    assert switch.port_overrides[-1] == {
        "port_idx": 1, "portconf_id": "pc-all", "poe_mode": "passv24"}


@pytest.mark.parametrize("port", [0, 4, "1", True])
def test_set_poe_rejects_unknown_port(port):
    with pytest.raises(UnifiValidationError):
        AccessDevice(_switch()).set_poe(port, "auto")


def test_set_poe_rejects_port_without_poe():
    with pytest.raises(UnifiValidationError):
        AccessDevice(_switch()).set_poe(3, "auto")


def test_set_poe_rejects_unknown_mode():
    switch = AccessDevice(_switch())
    with pytest.raises(UnifiValidationError):
        switch.set_poe(1, "on")
    assert switch.get_changes() == {}


# ---------------------------------------------------------------------------
# Controller helper
# ---------------------------------------------------------------------------

def test_set_switch_port_poe_mode(rsps, controller):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/api/s/default/stat/device/aa:bb:cc:dd:ee:ff",
             json=envelope([_switch()]))
    rsps.add(rsps_lib.PUT, f"{LEGACY_URL}/api/s/default/rest/device/sw1",
             json=envelope([{"_id": "sw1"}]))

    result = controller.set_switch_port_poe_mode("default", "AA:BB:CC:DD:EE:FF", 2, "off")

    assert result == [{"_id": "sw1"}]
    put = rsps.calls[-1]
    assert put.request.method == "PUT"
    assert json.loads(put.request.body) == {
        "port_overrides": [{"port_idx": 2, "portconf_id": "pc-all", "poe_mode": "off"}]}
