"""Unit tests for site fan-out, envelope unwrapping and error mapping."""

import json

import pytest
import requests
import responses as rsps_lib

from unifi_multisite_api import (
    UnifiAPIError,
    UnifiAuthenticationError,
    UnifiDataError,
    UnifiTransportError,
    UnifiValidationError,
    UnifiController,
)

from conftest import LEGACY_URL, PROXY_URL, UNIFI_OS_URL, envelope


def _site_url(site, suffix):
    return f"{LEGACY_URL}/api/s/{site}/{suffix}"


def _body(call):
    return json.loads(call.request.body)


# ---------------------------------------------------------------------------
# Site fan-out
# ---------------------------------------------------------------------------

def test_single_site_returns_one_element_list(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("default", "stat/health"),
             json=envelope([{"subsystem": "wan"}]))

    assert controller.get_health("default") == [[{"subsystem": "wan"}]]


def test_site_list_preserves_order(rsps, controller):
    for site in ("c", "a", "b"):
        rsps.add(rsps_lib.GET, _site_url(site, "stat/health"),
                 json=envelope([{"site": site}]))

    result = controller.get_health(["c", "a", "b"])

    assert result == [[{"site": "c"}], [{"site": "a"}], [{"site": "b"}]]
    assert [c.request.url for c in rsps.calls] == [
        _site_url("c", "stat/health"),
        _site_url("a", "stat/health"),
        _site_url("b", "stat/health"),
    ]


def test_empty_site_list_makes_no_requests(rsps, controller):
    assert controller.get_health([]) == []
    assert len(rsps.calls) == 0


def test_controller_wide_call_returns_bare_value(rsps, controller):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/api/self/sites",
             json=envelope([{"name": "default"}, {"name": "branch"}]))

    assert controller.get_sites() == [{"name": "default"}, {"name": "branch"}]


def test_site_scoped_path_without_site_is_rejected(rsps, controller):
    with pytest.raises(UnifiValidationError):
        controller.custom_api_request(None, "/api/s/{site}/stat/health")
    assert len(rsps.calls) == 0


def test_invalid_site_name_is_rejected_before_io(rsps, controller):
    with pytest.raises(UnifiValidationError):
        controller.get_health(["default", ""])
    assert len(rsps.calls) == 0


@pytest.mark.parametrize("site", ["x/stat/health?", "a?b", "a#b", "a%2Fb", ".."])
def test_site_name_must_be_single_path_segment(rsps, controller, site):
    with pytest.raises(UnifiValidationError):
        controller.get_health(["default", site])
    assert len(rsps.calls) == 0


def test_site_name_with_dash_and_dot_is_accepted(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("branch-2.eu", "stat/health"), json=envelope())

    assert controller.get_health("branch-2.eu") == [[]]


def test_event_stream_rejects_multi_segment_site(controller):
    with pytest.raises(UnifiValidationError):
        controller.get_event_stream_config("x/events")


# ---------------------------------------------------------------------------
# Early abort
# ---------------------------------------------------------------------------

def test_error_stops_fan_out_and_keeps_partial_results(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("s1", "stat/health"), json=envelope([1]))
    rsps.add(rsps_lib.GET, _site_url("s2", "stat/health"), json=envelope([2]))
    rsps.add(rsps_lib.GET, _site_url("s3", "stat/health"), status=400,
             json=envelope(rc="error", msg="api.err.NoSiteContext"))
    rsps.add(rsps_lib.GET, _site_url("s4", "stat/health"), json=envelope([4]))

    with pytest.raises(UnifiAPIError) as exc_info:
        controller.get_health(["s1", "s2", "s3", "s4"])

    err = exc_info.value
    assert err.message == "api.err.NoSiteContext"
    assert err.partial_results == [[1], [2]]
    assert err.site == "s3"
    assert len(rsps.calls) == 3


def test_error_on_first_site_has_empty_partial_results(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("s1", "stat/health"),
             body=requests.exceptions.ConnectionError("refused"))

    with pytest.raises(UnifiTransportError) as exc_info:
        controller.get_health(["s1", "s2"])
    assert exc_info.value.partial_results == []
    assert exc_info.value.site == "s1"


def test_controller_wide_error_partial_results_is_none(rsps, controller):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/api/self/sites",
             json=envelope(rc="error", msg="api.err.NoPermission"))

    with pytest.raises(UnifiAPIError) as exc_info:
        controller.get_sites()
    assert exc_info.value.partial_results is None
    assert exc_info.value.site is None


# ---------------------------------------------------------------------------
# Verb selection
# ---------------------------------------------------------------------------

def test_no_payload_is_get(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("default", "stat/health"), json=envelope())

    controller.get_health("default")
    assert rsps.calls[0].request.method == "GET"
    assert rsps.calls[0].request.body is None


def test_payload_is_post(rsps, controller):
    rsps.add(rsps_lib.POST, _site_url("default", "cmd/stamgr"), json=envelope())

    controller.block_client("default", "aa:bb:cc:dd:ee:ff")
    assert rsps.calls[0].request.method == "POST"
    assert _body(rsps.calls[0]) == {"cmd": "block-sta", "mac": "aa:bb:cc:dd:ee:ff"}


def test_explicit_put(rsps, controller):
    rsps.add(rsps_lib.PUT, _site_url("default", "rest/device/dev1"), json=envelope())

    controller.set_led_override("default", " dev1 ", "off")
    assert rsps.calls[0].request.method == "PUT"
    assert _body(rsps.calls[0]) == {"led_override": "off"}


def test_explicit_delete_with_payload(rsps, controller):
    rsps.add(rsps_lib.DELETE, _site_url("default", "rest/wlanconf/w1"), json=envelope())

    controller.delete_wlan("default", "w1")
    assert rsps.calls[0].request.method == "DELETE"
    assert _body(rsps.calls[0]) == {}


def test_explicit_verb_is_case_insensitive(rsps, controller):
    rsps.add(rsps_lib.DELETE, _site_url("default", "rest/tag/t1"), json=envelope())

    controller.custom_api_request("default", "/api/s/{site}/rest/tag/t1", method="delete")
    assert rsps.calls[0].request.method == "DELETE"


def test_unsupported_verb_is_rejected(rsps, controller):
    with pytest.raises(UnifiValidationError):
        controller.custom_api_request("default", "/api/s/{site}/rest/tag", method="PATCH")
    assert len(rsps.calls) == 0


def test_custom_request_with_payload_and_no_verb_is_post(rsps, controller):
    rsps.add(rsps_lib.POST, _site_url("default", "cmd/stamgr"), json=envelope())

    controller.custom_api_request(
        "default", "/api/s/{site}/cmd/stamgr",
        payload={"cmd": "kick-sta", "mac": "aa:bb:cc:dd:ee:ff"})
    assert rsps.calls[0].request.method == "POST"
    assert _body(rsps.calls[0]) == {"cmd": "kick-sta", "mac": "aa:bb:cc:dd:ee:ff"}


def test_custom_request_without_payload_is_get(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("default", "stat/widget/warnings"), json=envelope())

    controller.custom_api_request("default", "/api/s/{site}/stat/widget/warnings")
    assert rsps.calls[0].request.method == "GET"


def test_custom_request_path_must_be_absolute(rsps, controller):
    with pytest.raises(UnifiValidationError):
        controller.custom_api_request("default", "api/s/{site}/rest/tag")


# ---------------------------------------------------------------------------
# MAC canonicalisation
# ---------------------------------------------------------------------------

def test_mac_fields_are_lower_cased_at_any_depth(rsps, controller):
    rsps.add(rsps_lib.POST, _site_url("default", "cmd/custom"), json=envelope())
    payload = {
        "cmd": "x",
        "mac": "AA:BB:CC:DD:EE:FF",
        "objects": [{"data": {"mac": "0A:0B:0C:0D:0E:0F", "name": "Keep Case"}}],
        "macs": ["11:22:33:AA:BB:CC"],
    }

    controller.custom_api_request("default", "/api/s/{site}/cmd/custom", "POST", payload)

    assert _body(rsps.calls[0]) == {
        "cmd": "x",
        "mac": "aa:bb:cc:dd:ee:ff",
        "objects": [{"data": {"mac": "0a:0b:0c:0d:0e:0f", "name": "Keep Case"}}],
        "macs": ["11:22:33:aa:bb:cc"],
    }
    assert payload["mac"] == "AA:BB:CC:DD:EE:FF"


# ---------------------------------------------------------------------------
# Response mapping
# ---------------------------------------------------------------------------

def test_login_required_maps_to_authentication_error(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("default", "stat/health"), status=401,
             json=envelope(rc="error", msg="api.err.LoginRequired"))

    with pytest.raises(UnifiAuthenticationError, match="api.err.LoginRequired"):
        controller.get_health("default")


def test_error_envelope_with_success_status(rsps, controller):
    rsps.add(rsps_lib.POST, _site_url("default", "cmd/devmgr"),
             json=envelope(rc="error", msg="api.err.UnknownDevice"))

    with pytest.raises(UnifiAPIError, match="api.err.UnknownDevice"):
        controller.adopt_device("default", "aa:bb:cc:dd:ee:ff")


def test_http_403_without_envelope(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("default", "stat/health"), status=403, body="Forbidden")

    with pytest.raises(UnifiAuthenticationError):
        controller.get_health("default")


def test_http_error_without_envelope(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("default", "stat/health"), status=500, body="oops")

    with pytest.raises(UnifiTransportError) as exc_info:
        controller.get_health("default")
    assert exc_info.value.status_code == 500


def test_transport_failure_is_chained(rsps, controller):
    cause = requests.exceptions.ConnectTimeout("timed out")
    rsps.add(rsps_lib.GET, _site_url("default", "stat/health"), body=cause)

    with pytest.raises(UnifiTransportError) as exc_info:
        controller.get_health("default")
    assert exc_info.value.__cause__ is cause


def test_undecodable_success_body(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("default", "stat/health"), body="<html>")

    with pytest.raises(UnifiDataError):
        controller.get_health("default")


def test_unknown_rc_is_data_error(rsps, controller):
    rsps.add(rsps_lib.GET, _site_url("default", "stat/health"),
             json={"meta": {"rc": "maybe"}, "data": []})

    with pytest.raises(UnifiDataError):
        controller.get_health("default")


def test_body_without_envelope_is_returned_whole(rsps, controller):
    rsps.add(rsps_lib.GET, f"{LEGACY_URL}/v2/api/site/default/trafficroutes",
             json=[{"_id": "r1"}])

    result = controller.custom_api_request("default", "/v2/api/site/{site}/trafficroutes")
    assert result == [[{"_id": "r1"}]]


def test_empty_success_body_is_none(rsps, controller):
    rsps.add(rsps_lib.POST, _site_url("default", "cmd/stamgr"), body="")

    assert controller.reconnect_client("default", "aa:bb:cc:dd:ee:ff") == [None]


# ---------------------------------------------------------------------------
# CSRF handling (UniFi OS)
# ---------------------------------------------------------------------------

def test_csrf_header_sent_on_non_get_only(rsps, os_controller):
    rsps.add(rsps_lib.GET, f"{PROXY_URL}/api/s/default/stat/health", json=envelope())
    rsps.add(rsps_lib.POST, f"{PROXY_URL}/api/s/default/cmd/stamgr", json=envelope())

    os_controller.get_health("default")
    os_controller.block_client("default", "aa:bb:cc:dd:ee:ff")

    assert "X-CSRF-Token" not in rsps.calls[0].request.headers
    assert rsps.calls[1].request.headers["X-CSRF-Token"] == "csrf-probe"


def test_csrf_token_is_refreshed_from_responses(rsps, os_controller):
    rsps.add(rsps_lib.GET, f"{PROXY_URL}/api/s/default/stat/health",
             json=envelope(), headers={"X-Updated-CSRF-Token": "csrf-rotated"})
    rsps.add(rsps_lib.POST, f"{PROXY_URL}/api/s/default/cmd/stamgr", json=envelope())

    os_controller.get_health("default")
    os_controller.block_client("default", "aa:bb:cc:dd:ee:ff")

    assert rsps.calls[1].request.headers["X-CSRF-Token"] == "csrf-rotated"


def test_csrf_token_recovered_from_jwt_cookie(rsps):
    # payload: {"csrfToken": "from-cookie"}
    token = "eyJhbGciOiJIUzI1NiJ9.eyJjc3JmVG9rZW4iOiJmcm9tLWNvb2tpZSJ9.sig"
    rsps.add(rsps_lib.GET, f"{UNIFI_OS_URL}/", status=200)
    rsps.add(rsps_lib.POST, f"{UNIFI_OS_URL}/api/auth/login", json={})
    rsps.add(rsps_lib.POST, f"{PROXY_URL}/api/s/default/cmd/stamgr", json=envelope())

    ctrl = UnifiController(UNIFI_OS_URL)
    ctrl.login("admin", "secret")
    ctrl.session.cookies.set("TOKEN", token)
    ctrl.block_client("default", "aa:bb:cc:dd:ee:ff")

    assert rsps.calls[-1].request.headers["X-CSRF-Token"] == "from-cookie"
