"""Unit tests for login dialect detection and session teardown."""

import json

import pytest
import requests
import responses as rsps_lib

from unifi_multisite_api import (
    UnifiAuthenticationError,
    UnifiController,
    UnifiTransportError,
)

from conftest import (
    LEGACY_URL,
    PROXY_URL,
    UNIFI_OS_URL,
    envelope,
    register_legacy_login,
    register_unifi_os_login,
)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_constructor_does_no_network_io(rsps):
    ctrl = UnifiController(LEGACY_URL + "/")
    assert ctrl.controller_url == LEGACY_URL
    assert not ctrl.is_logged_in
    assert not ctrl.is_unifi_os
    assert len(rsps.calls) == 0


def test_default_controller_url():
    assert UnifiController().controller_url == "https://127.0.0.1:8443"


def test_custom_session_is_used(rsps):
    session = requests.Session()
    register_legacy_login(rsps)
    ctrl = UnifiController(LEGACY_URL, session=session)
    ctrl.login("admin", "secret")
    assert ctrl.session is session


# ---------------------------------------------------------------------------
# Dialect detection
# ---------------------------------------------------------------------------

def test_legacy_login(rsps):
    register_legacy_login(rsps)
    ctrl = UnifiController(LEGACY_URL, verify_ssl=False)

    result = ctrl.login("admin", "secret")

    assert result == []
    assert ctrl.is_logged_in
    assert not ctrl.is_unifi_os
    assert rsps.calls[0].request.method == "GET"
    assert rsps.calls[1].request.url == f"{LEGACY_URL}/api/login"
    assert json.loads(rsps.calls[1].request.body) == {
        "username": "admin", "password": "secret"}


def test_unifi_os_login(rsps):
    register_unifi_os_login(rsps)
    ctrl = UnifiController(UNIFI_OS_URL, verify_ssl=False)

    result = ctrl.login("admin", "secret")

    assert result["username"] == "admin"
    assert ctrl.is_logged_in
    assert ctrl.is_unifi_os
    assert rsps.calls[1].request.url == f"{UNIFI_OS_URL}/api/auth/login"
    assert rsps.calls[1].request.headers["X-CSRF-Token"] == "csrf-probe"


def test_unifi_os_api_calls_are_proxied(rsps, os_controller):
    rsps.add(rsps_lib.GET, f"{PROXY_URL}/api/s/default/stat/health",
             json=envelope([{"subsystem": "wlan"}]))

    assert os_controller.get_health("default") == [[{"subsystem": "wlan"}]]
    assert rsps.calls[0].request.url.startswith(PROXY_URL)


def test_legacy_api_calls_are_not_proxied(rsps, controller):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/api/self/sites",
             json=envelope([{"name": "default"}]))

    controller.get_sites()
    assert rsps.calls[0].request.url == f"{LEGACY_URL}/api/self/sites"


# ---------------------------------------------------------------------------
# Login failures
# ---------------------------------------------------------------------------

def test_login_rejected_credentials(rsps):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/", status=302)
    rsps.add(rsps_lib.POST, f"{LEGACY_URL}/api/login", status=400,
             json=envelope(rc="error", msg="api.err.Invalid"))
    ctrl = UnifiController(LEGACY_URL)

    with pytest.raises(UnifiAuthenticationError, match="api.err.Invalid"):
        ctrl.login("admin", "wrong")
    assert not ctrl.is_logged_in


def test_login_probe_unreachable(rsps):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/",
             body=requests.exceptions.ConnectionError("refused"))
    ctrl = UnifiController(LEGACY_URL)

    with pytest.raises(UnifiAuthenticationError) as exc_info:
        ctrl.login("admin", "secret")
    assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)


def test_login_unifi_os_http_401(rsps):
    rsps.add(rsps_lib.GET, f"{UNIFI_OS_URL}/", status=200)
    rsps.add(rsps_lib.POST, f"{UNIFI_OS_URL}/api/auth/login", status=401,
             json={"errors": ["Invalid username or password"]})
    ctrl = UnifiController(UNIFI_OS_URL)

    with pytest.raises(UnifiAuthenticationError):
        ctrl.login("admin", "wrong")
    assert not ctrl.is_logged_in
    assert not ctrl.is_unifi_os


def test_login_http_error_status_is_authentication_error(rsps):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/", status=302)
    rsps.add(rsps_lib.POST, f"{LEGACY_URL}/api/login", status=502, body="Bad Gateway")
    ctrl = UnifiController(LEGACY_URL)

    with pytest.raises(UnifiAuthenticationError) as exc_info:
        ctrl.login("admin", "secret")
    assert isinstance(exc_info.value.__cause__, UnifiTransportError)


def test_calls_before_login_fail_without_io(rsps):
    ctrl = UnifiController(LEGACY_URL)

    with pytest.raises(UnifiAuthenticationError):
        ctrl.get_health("default")
    assert len(rsps.calls) == 0


# ---------------------------------------------------------------------------
# Logout
# ---------------------------------------------------------------------------

def test_logout_without_login_is_noop(rsps):
    ctrl = UnifiController(LEGACY_URL)
    assert ctrl.logout() is None
    assert len(rsps.calls) == 0


def test_legacy_logout(rsps, controller):
    rsps.add(rsps_lib.POST, f"{LEGACY_URL}/logout", json=envelope([]))

    controller.logout()

    assert rsps.calls[0].request.url == f"{LEGACY_URL}/logout"
    assert json.loads(rsps.calls[0].request.body) == {}
    assert not controller.is_logged_in


def test_unifi_os_logout_is_not_proxied(rsps, os_controller):
    rsps.add(rsps_lib.POST, f"{UNIFI_OS_URL}/api/auth/logout", body="")

    os_controller.logout()

    assert rsps.calls[0].request.url == f"{UNIFI_OS_URL}/api/auth/logout"
    assert not os_controller.is_logged_in
    assert not os_controller.is_unifi_os


def test_calls_after_logout_fail(rsps, controller):
    rsps.add(rsps_lib.POST, f"{LEGACY_URL}/logout", json=envelope([]))
    controller.logout()
    rsps.calls.reset()

    with pytest.raises(UnifiAuthenticationError):
        controller.get_health("default")
    assert len(rsps.calls) == 0


def test_logout_clears_state_when_request_fails(rsps, controller):
    controller.session.cookies.set("unifises", "abc")
    rsps.add(rsps_lib.POST, f"{LEGACY_URL}/logout",
             body=requests.exceptions.ConnectionError("reset"))

    with pytest.raises(UnifiTransportError):
        controller.logout()
    assert not controller.is_logged_in
    assert len(controller.session.cookies) == 0


def test_get_status_does_not_require_login(rsps):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/status",
             json={"meta": {"rc": "ok", "server_version": "7.4.162"}, "data": []})
    ctrl = UnifiController(LEGACY_URL)

    assert ctrl.get_status() == []
    assert rsps.calls[0].request.method == "GET"
