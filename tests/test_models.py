"""Unit tests for mapping controller objects onto dataclasses."""

import responses as rsps_lib

from unifi_multisite_api import UnifiClient, UnifiDevice, UnifiSite
from unifi_multisite_api.utils import map_api_data_to_model, normalize_mac

from conftest import LEGACY_URL, envelope


def test_normalize_mac_formats():
    assert normalize_mac("AA-BB-CC-DD-EE-FF") == "aa:bb:cc:dd:ee:ff"
    assert normalize_mac("aabb.ccdd.eeff") == "aa:bb:cc:dd:ee:ff"
    assert normalize_mac(" AABBCCDDEEFF ") == "aa:bb:cc:dd:ee:ff"


def test_map_api_data_uses_field_metadata():
    fields, extra = map_api_data_to_model(
        {"mac": "aa", "user-num_sta": 3, "unexpected": 1}, UnifiDevice)

    assert fields == {"mac": "aa", "user_num_sta": 3}
    assert extra == {"unexpected": 1}


def test_devices_mapped_per_site(rsps, controller):
    for site, mac in (("default", "aa:aa:aa:aa:aa:aa"), ("branch", "bb:bb:bb:bb:bb:bb")):
        rsps.add(rsps_lib.GET, f"{LEGACY_URL}/api/s/{site}/stat/device", json=envelope([{
            "_id": f"id-{site}", "mac": mac, "type": "usw", "name": site,
            "port_table": [{"port_idx": 1, "poe_mode": "auto", "rx_bytes-r": 1.5}],
            "sys_stats": {"loadavg_1": "0.1"},
        }]))

    result = controller.get_access_devices(["default", "branch"], raw=False)

    assert [len(site_devices) for site_devices in result] == [1, 1]
    device = result[1][0]
    assert isinstance(device, UnifiDevice)
    assert device.site_name == "branch"
    assert device.device_id == "id-branch"
    assert device.is_switch
    assert device._extra_fields == {"sys_stats": {"loadavg_1": "0.1"}}
    assert device.get_port(1).rx_bytes_r == 1.5
    assert device.to_dict()["sys_stats"] == {"loadavg_1": "0.1"}


def test_sites_mapped(rsps, controller):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/api/stat/sites", json=envelope([{
        "_id": "s1", "name": "default", "desc": "Default",
        "health": [{"subsystem": "wan", "status": "ok"}],
    }]))

    sites = controller.get_sites_stats(raw=False)

    assert isinstance(sites[0], UnifiSite)
    assert sites[0].site_id == "s1"
    assert sites[0].get_subsystem("wan") == {"subsystem": "wan", "status": "ok"}
    assert sites[0].get_subsystem("vpn") is None


def test_clients_mapped(rsps, controller):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/api/s/default/stat/sta", json=envelope([
        {"mac": "aa:bb:cc:dd:ee:ff", "hostname": "laptop", "rssi": -60},
    ]))

    clients = controller.get_clients("default", raw=False)

    client = clients[0][0]
    assert isinstance(client, UnifiClient)
    assert client.display_name == "laptop"
    assert client._extra_fields == {"rssi": -60}


def test_port_entry_without_index_is_skipped():
    device = UnifiDevice(
        mac="aa:aa:aa:aa:aa:aa",
        port_table=[{"name": "SFP+ 1"}, {"port_idx": 2, "poe_mode": "off"}],
    )

    assert [port.port_idx for port in device.ports] == [2]
    assert device.get_port(2).poe_mode == "off"


def test_device_to_dict_omits_local_site_name():
    device = UnifiDevice(mac="aa:aa:aa:aa:aa:aa", _id="dev1", site_name="branch")
    device._extra_fields = {"sys_stats": {}}

    result = device.to_dict()

    assert "site_name" not in result
    assert "_extra_fields" not in result
    assert result["_id"] == "dev1"
    assert result["sys_stats"] == {}
