"""Shared fixtures: a mocked transport and logged-in controllers of both flavours."""

import pytest
import responses as rsps_lib

from unifi_multisite_api import UnifiController

LEGACY_URL = "https://unifi.example:8443"
UNIFI_OS_URL = "https://console.example"
PROXY_URL = f"{UNIFI_OS_URL}/proxy/network"


def envelope(data=None, rc="ok", msg=None):
    """Build a controller response envelope."""
    meta = {"rc": rc}
    if msg is not None:
        meta["msg"] = msg
    return {"meta": meta, "data": data if data is not None else []}


def register_legacy_login(rsps):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/", status=302,
             headers={"Location": "/manage"})
    rsps.add(rsps_lib.POST, f"{LEGACY_URL}/api/login", json=envelope([]))


def register_unifi_os_login(rsps, csrf_token="csrf-probe"):
    rsps.add(rsps_lib.GET, f"{UNIFI_OS_URL}/", status=200,
             body="<html></html>", headers={"X-CSRF-Token": csrf_token})
    rsps.add(rsps_lib.POST, f"{UNIFI_OS_URL}/api/auth/login",
             json={"username": "admin", "isSuperAdmin": True})


@pytest.fixture
def rsps():
    with rsps_lib.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def controller(rsps):
    """A controller logged in to a legacy (non UniFi OS) controller."""
    register_legacy_login(rsps)
    ctrl = UnifiController(LEGACY_URL, verify_ssl=False)
    ctrl.login("admin", "secret")
    rsps.calls.reset()
    return ctrl


@pytest.fixture
def os_controller(rsps):
    """A controller logged in to a UniFi OS console."""
    register_unifi_os_login(rsps)
    ctrl = UnifiController(UNIFI_OS_URL, verify_ssl=False)
    ctrl.login("admin", "secret")
    rsps.calls.reset()
    return ctrl
