import json
import time
import base64
import binascii

import requests
import urllib3

from typing import List, Dict, Any, Union, Optional, Sequence, Type
from urllib.parse import urlsplit

from . import endpoints
from .access_device import AccessDevice
from .events import EventStreamConfig
from .models.site import UnifiSite
from .models.device import UnifiDevice
from .models.client import UnifiClient
from .logging import get_logger, log_api_request, log_api_response, log_extra_fields
from .utils import (
    SiteSelector,
    expand_sites,
    lowercase_mac_fields,
    map_api_data_to_model,
    normalize_mac,
    normalize_macs,
    render_path,
    trim_id,
    with_optional_id,
)
from .exceptions import (
    UnifiControllerError,
    UnifiAuthenticationError,
    UnifiAPIError,
    UnifiTransportError,
    UnifiValidationError,
    UnifiDataError,
)

logger = get_logger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")

# Envelope message returned by the controller when the session cookie is missing or expired.
LOGIN_REQUIRED_MSG = "api.err.LoginRequired"

# UniFi OS rotates the CSRF token; the updated header takes precedence.
CSRF_RESPONSE_HEADERS = ("X-Updated-CSRF-Token", "X-CSRF-Token")

HOUR_MS = 3600 * 1000
DAY_MS = 24 * HOUR_MS

DEFAULT_SITE_ATTRIBUTES = [
    'bytes', 'wan-tx_bytes', 'wan-rx_bytes', 'wlan_bytes',
    'num_sta', 'lan-num_sta', 'wlan-num_sta', 'time'
]
DEFAULT_AP_ATTRIBUTES = ['bytes', 'num_sta', 'time']
DEFAULT_USER_ATTRIBUTES = ['rx_bytes', 'tx_bytes']
DEFAULT_GATEWAY_ATTRIBUTES = ['mem', 'cpu', 'loadavg_5']
SPEEDTEST_ATTRIBUTES = ['xput_download', 'xput_upload', 'latency', 'time']

ADMIN_PERMISSION_ADOPT = 'API_DEVICE_ADOPT'
ADMIN_PERMISSION_RESTART = 'API_DEVICE_RESTART'


def _now_ms() -> int:
    return int(time.time() * 1000)


class UnifiController:
    """
    Client for the UniFi Controller management API.

    Every endpoint method funnels through a single dispatcher that resolves the
    controller flavour, fans the call out over one or more sites and unwraps the
    ``{"meta": ..., "data": ...}`` response envelopes.

    Site-scoped methods take a ``sites`` selector as their first argument:

    * a site short name (``"default"``) issues one request and returns a
      one-element list holding that site's ``data``;
    * a list of site names issues one request per site, sequentially and in
      order, and returns the ``data`` values in the same order.

    Controller-wide methods (``get_sites``, ``get_sites_stats``, ...) return the
    bare ``data`` value.

    When a site's request fails, no further sites are requested and the raised
    :class:`UnifiControllerError` carries the results collected so far in
    ``partial_results`` and the failing site in ``site``.

    Note:
        This client interacts with the UniFi Controller's **undocumented** private API.
        Response structures and endpoint behavior may change without notice between
        controller versions.
    """

    def __init__(
        self,
        controller_url: str = "https://127.0.0.1:8443",
        verify_ssl: Union[bool, str] = True,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the Unifi Controller client. No request is made until :meth:`login`.

        Args:
            controller_url: Base URL of the Unifi Controller, e.g. ``https://unifi:8443``
                            or ``https://192.168.1.1`` for UniFi OS consoles.
            verify_ssl: Whether to verify SSL certificates. Can be:
                       - True: Verify SSL certificates (default, recommended)
                       - False: Disable verification, e.g. for self-signed controller certificates
                       - str: Path to a CA bundle file or directory with certificates of trusted CAs
            timeout: Optional timeout in seconds forwarded to every HTTP request.
            session: Optional pre-configured ``requests.Session`` to use as transport,
                     for example one with custom adapters, proxies or certificate pinning.
                     Its cookie jar holds the controller session.
        """
        logger.debug(f"Initializing UnifiController with URL: {controller_url}")
        self.controller_url = controller_url.rstrip("/")
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

        self._unifi_os = False
        self._csrf_token: Optional[str] = None
        self._logged_in = False

        if not verify_ssl:
            logger.warning(
                "SSL certificate verification is disabled. This is not recommended for production use."
            )
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @property
    def is_unifi_os(self) -> bool:
        """True when :meth:`login` detected a UniFi OS (gateway-style) controller."""
        return self._unifi_os

    @property
    def is_logged_in(self) -> bool:
        return self._logged_in

    # --- Session ---

    def login(self, username: str, password: str) -> Any:
        """
        Authenticate with the Unifi Controller.

        The controller root is probed first without following redirects. A UniFi OS
        console answers the probe with HTTP 200 and is then authenticated through
        ``/api/auth/login``, with every later API call proxied below
        ``/proxy/network``. Legacy controllers redirect the probe and are
        authenticated through ``/api/login``.

        Args:
            username: Username for authentication. Must be a local account, not a cloud account.
            password: Password for authentication.

        Returns:
            The unwrapped login response data.

        Raises:
            UnifiAuthenticationError: If the controller cannot be reached or rejects the credentials.
        """
        self._clear_session()

        root_url = f"{self.controller_url}/"
        logger.debug(f"Probing {root_url} to detect the controller type")
        try:
            probe = self.session.get(
                root_url,
                allow_redirects=False,
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            error_msg = f"Authentication failed: controller probe failed: {e}"
            logger.error(error_msg)
            raise UnifiAuthenticationError(error_msg) from e

        if probe.status_code == 200:
            self._unifi_os = True
            self._update_csrf_token(probe)
            login_path = endpoints.UNIFI_OS_LOGIN
            logger.debug(f"UniFi OS controller detected, using {login_path}")
        else:
            login_path = endpoints.LOGIN
            logger.debug(
                f"Legacy controller detected (probe status {probe.status_code}), using {login_path}")

        logger.debug(f"Attempting authentication with username: {username}")
        try:
            result = self._request(
                login_path, {"username": username, "password": password})
        except UnifiAuthenticationError:
            self._clear_session()
            raise
        except UnifiControllerError as e:
            self._clear_session()
            error_msg = f"Authentication failed: {e}"
            logger.error(error_msg)
            raise UnifiAuthenticationError(error_msg) from e

        self._logged_in = True
        logger.info("Successfully connected to Unifi controller.")
        return result

    def logout(self) -> Any:
        """
        End the controller session.

        Calling this without an active session does nothing. The local session
        state (cookies, CSRF token, controller type) is cleared even when the
        logout request itself fails.

        Returns:
            The unwrapped logout response data, or None when there was no session.

        Raises:
            UnifiControllerError: If the logout request fails.
        """
        if not self._logged_in:
            logger.debug("logout() called without an active session")
            self._clear_session()
            return None

        logout_path = endpoints.UNIFI_OS_LOGOUT if self._unifi_os else endpoints.LOGOUT
        try:
            result = self._request(logout_path, {})
        finally:
            self._clear_session()

        logger.info("Logged out of Unifi controller.")
        return result

    def _clear_session(self):
        self.session.cookies.clear()
        self._csrf_token = None
        self._unifi_os = False
        self._logged_in = False

    def get_event_stream_config(self, site: str = "default") -> EventStreamConfig:
        """
        Build the parameters an external websocket client needs to follow a site's events.

        Args:
            site: Short name of the site to subscribe to.

        Returns:
            EventStreamConfig holding the websocket URL, session cookies and handshake headers.

        Raises:
            UnifiAuthenticationError: If there is no logged-in session to hand off.
        """
        if not self._logged_in:
            raise UnifiAuthenticationError(
                "Not logged in: call login() before subscribing to events")

        parts = urlsplit(self.controller_url)
        scheme = "wss" if parts.scheme == "https" else "ws"
        prefix = endpoints.UNIFI_OS_PROXY_PREFIX if self._unifi_os else ""
        path = render_path(endpoints.EVENTS_WS, trim_id(site))
        url = f"{scheme}://{parts.netloc}{parts.path}{prefix}{path}"

        headers = {}
        if self._unifi_os:
            token = self._csrf_token or self._extract_csrf_token()
            if token:
                headers["X-CSRF-Token"] = token

        return EventStreamConfig(
            url=url,
            cookies=requests.utils.dict_from_cookiejar(self.session.cookies),
            headers=headers,
            verify_ssl=self.verify_ssl,
        )

    # --- Request dispatch ---

    def _base_url(self, path: str) -> str:
        if self._unifi_os and path not in endpoints.AUTH_PATHS:
            return f"{self.controller_url}{endpoints.UNIFI_OS_PROXY_PREFIX}"
        return self.controller_url

    @staticmethod
    def _resolve_method(payload: Any, method: Optional[str]) -> str:
        if method is not None:
            verb = method.upper()
            if verb not in SUPPORTED_METHODS:
                raise UnifiValidationError(f"Unsupported HTTP method: {method}")
            return verb
        return "POST" if payload is not None else "GET"

    def _request(
        self,
        path: str,
        payload: Any = None,
        sites: SiteSelector = None,
        method: Optional[str] = None,
        require_login: bool = True,
    ) -> Any:
        """
        Send a request to one endpoint for every selected site and unwrap the responses.

        Args:
            path: Endpoint path template, with ``{site}`` for site-scoped endpoints.
            payload: Optional JSON payload. MAC address fields are lower-cased before sending.
            sites: None for controller-wide endpoints, a site name, or a sequence of site names.
            method: Optional HTTP verb override. Without it, requests carrying a payload
                    are sent as POST and all others as GET.
            require_login: Whether a logged-in session is required. Authentication
                           endpoints never require one.

        Returns:
            A list of per-site ``data`` values in site order, or the bare ``data``
            value when ``sites`` is None.

        Raises:
            UnifiAuthenticationError: If no session is established or the controller rejects it.
            UnifiAPIError: If the controller answers with ``meta.rc == "error"``.
            UnifiTransportError: If the HTTP request fails.
            UnifiDataError: If a successful response cannot be decoded.
            UnifiValidationError: If the method or site selector is invalid for the endpoint.
        """
        is_auth_path = path in endpoints.AUTH_PATHS
        if require_login and not is_auth_path and not self._logged_in:
            raise UnifiAuthenticationError(
                f"Not logged in: call login() before requesting {path}")

        http_method = self._resolve_method(payload, method)
        base_url = self._base_url(path)
        targets = [(site, f"{base_url}{render_path(path, site)}")
                   for site in expand_sites(sites)]
        body = lowercase_mac_fields(payload) if payload is not None else None

        results = []
        for site, url in targets:
            try:
                results.append(self._send(http_method, url, body, is_auth_path))
            except UnifiControllerError as e:
                e.partial_results = self._aggregate(results, sites)
                e.site = site
                if len(targets) > 1:
                    logger.warning(
                        f"Aborting {http_method} {path} at site {site!r} after "
                        f"{len(results)} of {len(targets)} sites: {e}")
                raise
        return self._aggregate(results, sites)

    @staticmethod
    def _aggregate(results: List[Any], sites: SiteSelector) -> Any:
        if sites is None:
            return results[0] if results else None
        return results

    def _send(self, method: str, url: str, payload: Any, is_auth_path: bool) -> Any:
        headers = {"Accept": "application/json"}
        if self._unifi_os and method != "GET":
            csrf_token = self._csrf_token or self._extract_csrf_token()
            if csrf_token:
                headers["X-CSRF-Token"] = csrf_token
            elif not is_auth_path:
                logger.warning(
                    "UniFi OS detected, but no CSRF token is available for non-GET request.")

        request_kwargs = {
            'headers': headers,
            'verify': self.verify_ssl,
            'timeout': self.timeout,
        }
        if payload is not None:
            request_kwargs['json'] = payload

        log_api_request(logger, method, url, payload)
        try:
            response = self.session.request(method, url, **request_kwargs)
        except requests.exceptions.RequestException as e:
            error_msg = f"API {method} request to {url} failed: {e}"
            logger.error(error_msg)
            raise UnifiTransportError(error_msg) from e

        self._update_csrf_token(response)
        return self._unwrap_response(response, method, url, is_auth_path)

    def _unwrap_response(
        self, response: requests.Response, method: str, url: str, is_auth_path: bool
    ) -> Any:
        """
        Extract the ``data`` of a response envelope or raise the matching error.

        Responses without an envelope (UniFi OS authentication, ``/v2/api``
        endpoints) are returned whole when their status is successful.
        """
        status = response.status_code
        decoded = True
        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                decoded = False

        if decoded:
            log_api_response(logger, url, body, status)

        meta = body.get("meta") if isinstance(body, dict) else None
        if isinstance(meta, dict):
            rc = meta.get("rc")
            if rc == "error":
                msg = meta.get("msg") or "Unknown API error"
                logger.error(f"API {method} request to {url} returned error: {msg}")
                if msg == LOGIN_REQUIRED_MSG:
                    raise UnifiAuthenticationError(msg)
                raise UnifiAPIError(msg)
            if rc == "ok" and 200 <= status < 400:
                return body.get("data")

        if status in (401, 403):
            error_msg = f"API {method} request to {url} was rejected (Status: {status})"
            logger.error(error_msg)
            raise UnifiAuthenticationError(error_msg)
        if not 200 <= status < 400:
            error_msg = f"API {method} request to {url} failed (Status: {status})"
            logger.error(error_msg)
            raise UnifiTransportError(error_msg, status_code=status)
        if isinstance(meta, dict):
            error_msg = f"Unexpected response envelope from {url}: {meta}"
            logger.error(error_msg)
            raise UnifiDataError(error_msg)
        if not decoded:
            if is_auth_path:
                return None
            error_msg = f"Failed to parse API response from {url}"
            logger.error(error_msg)
            raise UnifiDataError(error_msg)

        logger.debug(f"API {method} request to {url} returned a response without envelope")
        return body

    def _update_csrf_token(self, response: requests.Response):
        for header in CSRF_RESPONSE_HEADERS:
            token = response.headers.get(header)
            if token:
                self._csrf_token = token
                return

    def _extract_csrf_token(self) -> Optional[str]:
        """Extracts the CSRF token from the UniFi OS ``TOKEN`` session cookie if available."""
        unifi_cookie = None
        for cookie in self.session.cookies:
            if cookie.name == 'TOKEN':
                unifi_cookie = cookie.value
                break
        if not unifi_cookie:
            logger.debug("UniFi OS 'TOKEN' cookie not found in session.")
            return None

        parts = unifi_cookie.split('.')
        if len(parts) != 3:
            logger.warning("Invalid JWT structure found in TOKEN cookie.")
            return None

        try:
            payload_b64 = parts[1]
            payload_b64 += '=' * (-len(payload_b64) % 4)
            payload_json = base64.urlsafe_b64decode(
                payload_b64).decode('utf-8')
            payload_data = json.loads(payload_json)
        except (binascii.Error, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Error decoding JWT payload from TOKEN cookie: {e}")
            return None

        csrf_token = payload_data.get('csrfToken') if isinstance(payload_data, dict) else None
        if csrf_token:
            logger.debug("Extracted CSRF token from cookie.")
            self._csrf_token = csrf_token
        else:
            logger.warning("CSRF token not found within JWT payload.")
        return csrf_token

    def _map_models(self, raw_results: Any, model_class: Type, sites: SiteSelector) -> Any:
        """
        Map unwrapped results onto dataclasses, keeping the aggregation shape.

        For site selectors the result is a list with one list of models per site.
        """
        if sites is None:
            return self._map_items(raw_results, model_class, None)
        return [
            self._map_items(site_results, model_class, site)
            for site, site_results in zip(expand_sites(sites), raw_results)
        ]

    def _map_items(self, items: Any, model_class: Type, site: Optional[str]) -> List[Any]:
        mapped = []
        for item_data in items or []:
            model_fields, extra_fields = map_api_data_to_model(item_data, model_class)
            if site is not None and "site_name" in model_class.__dataclass_fields__:
                model_fields.setdefault("site_name", site)
            try:
                item = model_class(**model_fields)
            except TypeError as e:
                logger.error(
                    f"Error creating {model_class.__name__} model from data: {item_data}. Error: {e}")
                continue
            item._extra_fields = extra_fields
            log_extra_fields(
                logger, model_class.__name__,
                str(item_data.get("mac") or item_data.get("name") or item_data.get("_id")),
                extra_fields)
            mapped.append(item)
        logger.debug(f"Returning {len(mapped)} mapped {model_class.__name__} objects.")
        return mapped

    # --- Clients ---

    def authorize_guest(
        self,
        sites: SiteSelector,
        mac: str,
        minutes: int,
        up_kbps: Optional[int] = None,
        down_kbps: Optional[int] = None,
        megabytes: Optional[int] = None,
        ap_mac: Optional[str] = None
    ) -> List[Any]:
        """
        Authorize a guest client using the ``/cmd/stamgr`` endpoint.

        Grants network access to a guest client for a specified duration,
        optionally with bandwidth or data usage limits.

        Args:
            sites: Site name or list of site names.
            mac: Client MAC address to authorize.
            minutes: Duration in minutes until authorization expires.
            up_kbps: Optional upload speed limit in Kbps.
            down_kbps: Optional download speed limit in Kbps.
            megabytes: Optional data transfer limit in Megabytes (MB).
                       The API parameter name is 'bytes', but expects MB value.
            ap_mac: Optional MAC address of the AP the client is connected to.
                    Providing this might speed up authorization propagation.

        Returns:
            List[Any]: One entry per site, typically a list holding the authorized client.
        """
        payload = {
            'cmd': 'authorize-guest',
            'mac': normalize_mac(mac),
            'minutes': minutes
        }
        if up_kbps is not None:
            payload['up'] = up_kbps
        if down_kbps is not None:
            payload['down'] = down_kbps
        if megabytes is not None:
            payload['bytes'] = megabytes
        if ap_mac is not None:
            payload['ap_mac'] = normalize_mac(ap_mac)

        logger.info(f"Authorizing guest {mac} on site(s) {sites}")
        return self._request(endpoints.CMD_STAMGR, payload, sites)

    def unauthorize_guest(self, sites: SiteSelector, mac: str) -> List[Any]:
        """
        Revoke network access previously granted via guest authorization.

        Args:
            sites: Site name or list of site names.
            mac: Client MAC address to unauthorize.
        """
        payload = {'cmd': 'unauthorize-guest', 'mac': normalize_mac(mac)}
        logger.info(f"Unauthorizing guest {mac} on site(s) {sites}")
        return self._request(endpoints.CMD_STAMGR, payload, sites)

    def reconnect_client(self, sites: SiteSelector, mac: str) -> List[Any]:
        """Force a wireless client to reconnect (``kick-sta``)."""
        payload = {'cmd': 'kick-sta', 'mac': normalize_mac(mac)}
        logger.info(f"Reconnecting client {mac} on site(s) {sites}")
        return self._request(endpoints.CMD_STAMGR, payload, sites)

    def block_client(self, sites: SiteSelector, mac: str) -> List[Any]:
        """Block a client device from connecting to the network."""
        payload = {'cmd': 'block-sta', 'mac': normalize_mac(mac)}
        logger.info(f"Blocking client {mac} on site(s) {sites}")
        return self._request(endpoints.CMD_STAMGR, payload, sites)

    def unblock_client(self, sites: SiteSelector, mac: str) -> List[Any]:
        """Unblock a previously blocked client device."""
        payload = {'cmd': 'unblock-sta', 'mac': normalize_mac(mac)}
        logger.info(f"Unblocking client {mac} on site(s) {sites}")
        return self._request(endpoints.CMD_STAMGR, payload, sites)

    def forget_client(self, sites: SiteSelector, macs: Union[str, Sequence[str]]) -> List[Any]:
        """
        Forget one or more client devices.

        Removes the clients and their history from the controller. Supported on
        controller 5.9 and later; can take several minutes on large controllers.

        Args:
            sites: Site name or list of site names.
            macs: A single client MAC address or a list of MAC addresses.
        """
        payload = {'cmd': 'forget-sta', 'macs': normalize_macs(macs)}
        logger.info(f"Forgetting client(s) {payload['macs']} on site(s) {sites}")
        return self._request(endpoints.CMD_STAMGR, payload, sites)

    def create_user(
        self,
        sites: SiteSelector,
        mac: str,
        user_group_id: str,
        name: Optional[str] = None,
        note: Optional[str] = None,
        is_guest: Optional[bool] = None,
        is_wired: Optional[bool] = None,
    ) -> List[Any]:
        """
        Create a client device record.

        Args:
            sites: Site name or list of site names.
            mac: Client MAC address.
            user_group_id: ``_id`` of the user group the client should belong to
                           (see :meth:`get_user_groups`).
            name: Optional name for the client.
            note: Optional note; also marks the client as noted.
            is_guest: Optional guest flag.
            is_wired: Optional wired flag.

        Returns:
            One entry per site holding the created client object.
        """
        new_user: Dict[str, Any] = {
            'mac': normalize_mac(mac),
            'user_group_id': user_group_id,
        }
        if name is not None:
            new_user['name'] = name
        if note is not None:
            new_user['note'] = note
            new_user['noted'] = True
        if is_guest is not None:
            new_user['is_guest'] = is_guest
        if is_wired is not None:
            new_user['is_wired'] = is_wired

        return self._request(
            endpoints.GROUP_USER, {'objects': [{'data': new_user}]}, sites)

    def set_client_note(
        self, sites: SiteSelector, user_id: str, note: Optional[str] = None
    ) -> List[Any]:
        """
        Add, modify or remove the note of a client device.

        Args:
            sites: Site name or list of site names.
            user_id: ``_id`` of the client device.
            note: Note to apply. When omitted or empty the existing note is removed.
        """
        payload = {'note': note or '', 'noted': bool(note)}
        path = f"{endpoints.UPD_USER}/{trim_id(user_id)}"
        return self._request(path, payload, sites)

    def set_client_name(
        self, sites: SiteSelector, user_id: str, name: Optional[str] = None
    ) -> List[Any]:
        """
        Add, modify or remove the name of a client device.

        Args:
            sites: Site name or list of site names.
            user_id: ``_id`` of the client device.
            name: Name to apply. When omitted the existing name is removed.
        """
        path = f"{endpoints.UPD_USER}/{trim_id(user_id)}"
        return self._request(path, {'name': name or ''}, sites)

    def set_user_group(self, sites: SiteSelector, user_id: str, group_id: str) -> List[Any]:
        """Assign a client device to another user group."""
        path = f"{endpoints.UPD_USER}/{trim_id(user_id)}"
        return self._request(path, {'usergroup_id': group_id}, sites)

    def edit_client_fixed_ip(
        self,
        sites: SiteSelector,
        client_id: str,
        use_fixedip: bool,
        network_id: Optional[str] = None,
        fixed_ip: Optional[str] = None,
    ) -> List[Any]:
        """
        Enable or disable a fixed IP reservation for a client.

        Args:
            sites: Site name or list of site names.
            client_id: ``_id`` of the client device.
            use_fixedip: Whether the client should use a fixed IP.
            network_id: ``_id`` of the network the fixed IP belongs to. Only sent
                        when ``use_fixedip`` is True.
            fixed_ip: The IP address to reserve. Only sent when ``use_fixedip`` is True.
        """
        client_id = trim_id(client_id)
        payload: Dict[str, Any] = {'_id': client_id, 'use_fixedip': use_fixedip}
        if use_fixedip:
            if network_id is not None:
                payload['network_id'] = network_id
            if fixed_ip is not None:
                payload['fixed_ip'] = fixed_ip

        return self._request(f"{endpoints.REST_USER}/{client_id}", payload, sites)

    def get_clients(
        self, sites: SiteSelector, client_mac: Optional[str] = None, raw=True
    ) -> List[Any]:
        """
        Get the currently connected clients (stations), or a single one by MAC.

        Args:
            sites: Site name or list of site names.
            client_mac: Optional MAC address to fetch a single client.
            raw: If True (default), return the raw dictionaries. If False, map each
                 site's clients to :class:`UnifiClient` objects.

        Returns:
            One list of clients per site.
        """
        mac_segment = normalize_mac(client_mac) if client_mac is not None else None
        raw_results = self._request(
            with_optional_id(endpoints.STAT_STA, mac_segment), None, sites)
        if raw:
            return raw_results
        return self._map_models(raw_results, UnifiClient, sites)

    def get_client_details(self, sites: SiteSelector, client_mac: str) -> List[Any]:
        """Get the stored details of a known client device, connected or not."""
        path = f"{endpoints.STAT_USER}/{normalize_mac(client_mac)}"
        return self._request(path, None, sites)

    def get_users(self, sites: SiteSelector) -> List[Any]:
        """List the configured client devices (``list/user``)."""
        return self._request(endpoints.LIST_USER, None, sites)

    def get_all_users(self, sites: SiteSelector, within: int = 8760) -> List[Any]:
        """
        Fetch all client devices that connected within a time window.

        Args:
            sites: Site name or list of site names.
            within: Hours to go back. Defaults to 8760 (one year).
        """
        payload = {'type': 'all', 'conn': 'all', 'within': within}
        return self._request(endpoints.STAT_ALLUSER, payload, sites)

    def get_blocked_users(self, sites: SiteSelector, within: int = 8760) -> List[Any]:
        """Fetch blocked client devices seen within ``within`` hours (default one year)."""
        payload = {'type': 'blocked', 'conn': 'all', 'within': within}
        return self._request(endpoints.STAT_ALLUSER, payload, sites)

    def get_guests(self, sites: SiteSelector, within: int = 8760) -> List[Any]:
        """Fetch guest devices with valid access within ``within`` hours (default one year)."""
        return self._request(endpoints.STAT_GUEST, {'within': within}, sites)

    def get_sessions(
        self,
        sites: SiteSelector,
        start: Optional[int] = None,
        end: Optional[int] = None,
        mac: Optional[str] = None,
        session_type: str = 'all',
    ) -> List[Any]:
        """
        Fetch client login sessions.

        Args:
            sites: Site name or list of site names.
            start: Optional start as a Unix timestamp in **seconds**. Defaults to 7 days before ``end``.
            end: Optional end as a Unix timestamp in seconds. Defaults to now.
            mac: Optional client MAC address to filter by.
            session_type: One of ``all``, ``guest`` or ``user``.
        """
        if session_type not in ('all', 'guest', 'user'):
            raise UnifiValidationError(f"Invalid session type: {session_type}")
        if end is None:
            end = int(time.time())
        if start is None:
            start = end - 7 * 24 * 3600

        payload: Dict[str, Any] = {'type': session_type, 'start': start, 'end': end}
        if mac is not None:
            payload['mac'] = normalize_mac(mac)
        return self._request(endpoints.STAT_SESSION, payload, sites)

    def get_latest_sessions(self, sites: SiteSelector, mac: str, limit: int = 5) -> List[Any]:
        """Fetch the ``limit`` most recent sessions of one client, newest first."""
        payload = {'mac': normalize_mac(mac), '_limit': limit, '_sort': '-assoc_time'}
        return self._request(endpoints.STAT_SESSION, payload, sites)

    def get_authorizations(
        self, sites: SiteSelector, start: Optional[int] = None, end: Optional[int] = None
    ) -> List[Any]:
        """
        Fetch guest authorizations.

        Args:
            sites: Site name or list of site names.
            start: Optional start as a Unix timestamp in seconds. Defaults to 7 days before ``end``.
            end: Optional end as a Unix timestamp in seconds. Defaults to now.
        """
        if end is None:
            end = int(time.time())
        if start is None:
            start = end - 7 * 24 * 3600
        return self._request(
            endpoints.STAT_AUTHORIZATION, {'start': start, 'end': end}, sites)

    # --- User groups ---

    def get_user_groups(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.LIST_USERGROUP, None, sites)

    def create_user_group(
        self,
        sites: SiteSelector,
        group_name: str,
        group_dn: int = -1,
        group_up: int = -1,
    ) -> List[Any]:
        """
        Create a user group.

        Args:
            sites: Site name or list of site names.
            group_name: Name of the group.
            group_dn: Download rate limit in Kbps, -1 for unlimited.
            group_up: Upload rate limit in Kbps, -1 for unlimited.
        """
        payload = {
            'name': group_name,
            'qos_rate_max_down': group_dn,
            'qos_rate_max_up': group_up,
        }
        return self._request(endpoints.REST_USERGROUP, payload, sites)

    def edit_user_group(
        self,
        sites: SiteSelector,
        group_id: str,
        site_id: str,
        group_name: str,
        group_dn: int = -1,
        group_up: int = -1,
    ) -> List[Any]:
        """
        Update a user group.

        Args:
            sites: Site name or list of site names.
            group_id: ``_id`` of the group.
            site_id: ``_id`` of the site the group belongs to.
            group_name: New name of the group.
            group_dn: Download rate limit in Kbps, -1 for unlimited.
            group_up: Upload rate limit in Kbps, -1 for unlimited.
        """
        group_id = trim_id(group_id)
        payload = {
            '_id': group_id,
            'site_id': site_id,
            'name': group_name,
            'qos_rate_max_down': group_dn,
            'qos_rate_max_up': group_up,
        }
        return self._request(
            f"{endpoints.REST_USERGROUP}/{group_id}", payload, sites, method='PUT')

    def delete_user_group(self, sites: SiteSelector, group_id: str) -> List[Any]:
        """Delete a user group. Clients in it fall back to the default group."""
        path = f"{endpoints.REST_USERGROUP}/{trim_id(group_id)}"
        logger.info(f"Deleting user group {group_id} on site(s) {sites}")
        return self._request(path, None, sites, method='DELETE')

    # --- Statistics ---

    def _get_report(
        self,
        sites: SiteSelector,
        report: str,
        attrs: List[str],
        start: Optional[int],
        end: Optional[int],
        default_window_ms: int,
        mac: Optional[str] = None,
    ) -> List[Any]:
        """
        Fetch a ``stat/report/<report>`` time series.

        ``start`` and ``end`` are Unix timestamps in milliseconds; ``end`` defaults
        to now and ``start`` to ``default_window_ms`` before ``end``.
        """
        if end is None:
            end = _now_ms()
        if start is None:
            start = end - default_window_ms

        payload: Dict[str, Any] = {'attrs': attrs, 'start': start, 'end': end}
        if mac is not None:
            payload['mac'] = normalize_mac(mac)

        logger.debug(f"Fetching {report} report on site(s) {sites} from {start} to {end}")
        return self._request(f"{endpoints.STAT_REPORT}/{report}", payload, sites)

    def get_5min_site_stats(
        self, sites: SiteSelector, start: Optional[int] = None, end: Optional[int] = None
    ) -> List[Any]:
        """
        Fetch 5-minute site statistics.

        Defaults to the past 12 hours. Requires controller 5.5 or later and a
        5-minute stats retention policy.

        Args:
            sites: Site name or list of site names.
            start: Optional start as a Unix timestamp in milliseconds.
            end: Optional end as a Unix timestamp in milliseconds.
        """
        return self._get_report(
            sites, '5minutes.site', list(DEFAULT_SITE_ATTRIBUTES), start, end, 12 * HOUR_MS)

    def get_hourly_site_stats(
        self, sites: SiteSelector, start: Optional[int] = None, end: Optional[int] = None
    ) -> List[Any]:
        """Fetch hourly site statistics, defaulting to the past 7 days."""
        return self._get_report(
            sites, 'hourly.site', list(DEFAULT_SITE_ATTRIBUTES), start, end, 7 * DAY_MS)

    def get_daily_site_stats(
        self, sites: SiteSelector, start: Optional[int] = None, end: Optional[int] = None
    ) -> List[Any]:
        """Fetch daily site statistics, defaulting to the past 52 weeks."""
        return self._get_report(
            sites, 'daily.site', list(DEFAULT_SITE_ATTRIBUTES), start, end, 52 * 7 * DAY_MS)

    def get_5min_ap_stats(
        self,
        sites: SiteSelector,
        start: Optional[int] = None,
        end: Optional[int] = None,
        mac: Optional[str] = None,
    ) -> List[Any]:
        """
        Fetch 5-minute access point statistics, defaulting to the past 12 hours.

        Args:
            sites: Site name or list of site names.
            start: Optional start as a Unix timestamp in milliseconds.
            end: Optional end as a Unix timestamp in milliseconds.
            mac: Optional AP MAC address to restrict the report to.
        """
        return self._get_report(
            sites, '5minutes.ap', list(DEFAULT_AP_ATTRIBUTES), start, end, 12 * HOUR_MS, mac)

    def get_hourly_ap_stats(
        self,
        sites: SiteSelector,
        start: Optional[int] = None,
        end: Optional[int] = None,
        mac: Optional[str] = None,
    ) -> List[Any]:
        """Fetch hourly access point statistics, defaulting to the past 7 days."""
        return self._get_report(
            sites, 'hourly.ap', list(DEFAULT_AP_ATTRIBUTES), start, end, 7 * DAY_MS, mac)

    def get_daily_ap_stats(
        self,
        sites: SiteSelector,
        start: Optional[int] = None,
        end: Optional[int] = None,
        mac: Optional[str] = None,
    ) -> List[Any]:
        """Fetch daily access point statistics, defaulting to the past 7 days."""
        return self._get_report(
            sites, 'daily.ap', list(DEFAULT_AP_ATTRIBUTES), start, end, 7 * DAY_MS, mac)

    @staticmethod
    def _user_attributes(attribs: Optional[List[str]]) -> List[str]:
        return ['time'] + list(attribs if attribs is not None else DEFAULT_USER_ATTRIBUTES)

    def get_5min_user_stats(
        self,
        sites: SiteSelector,
        mac: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        attribs: Optional[List[str]] = None,
    ) -> List[Any]:
        """
        Fetch 5-minute statistics of a single client device.

        Defaults to the past 12 hours. Requires controller 5.8 or later with
        "Clients Historical Data" enabled.

        Args:
            sites: Site name or list of site names.
            mac: MAC address of the client device.
            start: Optional start as a Unix timestamp in milliseconds.
            end: Optional end as a Unix timestamp in milliseconds.
            attribs: Attributes to return, for example ``rx_bytes``, ``tx_bytes``, ``signal``,
                     ``rx_rate`` or ``tx_retries``. Defaults to ``rx_bytes`` and ``tx_bytes``;
                     ``time`` is always included.
        """
        return self._get_report(
            sites, '5minutes.user', self._user_attributes(attribs), start, end, 12 * HOUR_MS, mac)

    def get_hourly_user_stats(
        self,
        sites: SiteSelector,
        mac: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        attribs: Optional[List[str]] = None,
    ) -> List[Any]:
        """Fetch hourly statistics of a single client device, defaulting to the past 7 days."""
        return self._get_report(
            sites, 'hourly.user', self._user_attributes(attribs), start, end, 7 * DAY_MS, mac)

    def get_daily_user_stats(
        self,
        sites: SiteSelector,
        mac: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        attribs: Optional[List[str]] = None,
    ) -> List[Any]:
        """Fetch daily statistics of a single client device, defaulting to the past 7 days."""
        return self._get_report(
            sites, 'daily.user', self._user_attributes(attribs), start, end, 7 * DAY_MS, mac)

    @staticmethod
    def _gateway_attributes(attribs: Optional[List[str]]) -> List[str]:
        return ['time'] + list(attribs if attribs is not None else DEFAULT_GATEWAY_ATTRIBUTES)

    def get_5min_gateway_stats(
        self,
        sites: SiteSelector,
        start: Optional[int] = None,
        end: Optional[int] = None,
        attribs: Optional[List[str]] = None,
    ) -> List[Any]:
        """
        Fetch 5-minute statistics of the site's gateway. Requires a USG.

        Args:
            sites: Site name or list of site names.
            start: Optional start as a Unix timestamp in milliseconds. Defaults to 12 hours before ``end``.
            end: Optional end as a Unix timestamp in milliseconds.
            attribs: Attributes to return, for example ``mem``, ``cpu``, ``loadavg_5``,
                     ``lan-rx_bytes`` or ``lan-tx_dropped``. ``time`` is always included.
        """
        return self._get_report(
            sites, '5minutes.gw', self._gateway_attributes(attribs), start, end, 12 * HOUR_MS)

    def get_hourly_gateway_stats(
        self,
        sites: SiteSelector,
        start: Optional[int] = None,
        end: Optional[int] = None,
        attribs: Optional[List[str]] = None,
    ) -> List[Any]:
        """Fetch hourly gateway statistics, defaulting to the past 7 days."""
        return self._get_report(
            sites, 'hourly.gw', self._gateway_attributes(attribs), start, end, 7 * DAY_MS)

    def get_daily_gateway_stats(
        self,
        sites: SiteSelector,
        start: Optional[int] = None,
        end: Optional[int] = None,
        attribs: Optional[List[str]] = None,
    ) -> List[Any]:
        """Fetch daily gateway statistics, defaulting to the past 52 weeks."""
        return self._get_report(
            sites, 'daily.gw', self._gateway_attributes(attribs), start, end, 52 * 7 * DAY_MS)

    def get_speed_test_results(
        self, sites: SiteSelector, start: Optional[int] = None, end: Optional[int] = None
    ) -> List[Any]:
        """Fetch speed test results of the past 24 hours by default. Requires a USG."""
        return self._get_report(
            sites, 'archive.speedtest', list(SPEEDTEST_ATTRIBUTES), start, end, DAY_MS)

    def get_ips_events(
        self,
        sites: SiteSelector,
        start: Optional[int] = None,
        end: Optional[int] = None,
        limit: int = 10000,
    ) -> List[Any]:
        """
        Fetch IPS/IDS events.

        Args:
            sites: Site name or list of site names.
            start: Optional start as a Unix timestamp in milliseconds. Defaults to 24 hours before ``end``.
            end: Optional end as a Unix timestamp in milliseconds.
            limit: Maximum number of events to return.
        """
        if end is None:
            end = _now_ms()
        if start is None:
            start = end - DAY_MS
        payload = {'start': start, 'end': end, '_limit': limit}
        return self._request(endpoints.STAT_IPS_EVENT, payload, sites)

    def get_health(self, sites: SiteSelector) -> List[Any]:
        """Fetch the health metrics of each subsystem (wlan, wan, www, lan, vpn)."""
        return self._request(endpoints.STAT_HEALTH, None, sites)

    def get_dashboard(self, sites: SiteSelector, five_minutes: bool = False) -> List[Any]:
        """
        Fetch dashboard metrics.

        Args:
            sites: Site name or list of site names.
            five_minutes: Return 5-minute instead of hourly intervals (controller 5.5 or later).
        """
        path = endpoints.STAT_DASHBOARD
        if five_minutes:
            path += '?scale=5minutes'
        return self._request(path, None, sites)

    def get_dpi_stats(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.STAT_DPI, None, sites)

    def get_filtered_dpi_stats(
        self,
        sites: SiteSelector,
        stats_type: str = 'by_cat',
        cat_filter: Optional[List[int]] = None,
    ) -> List[Any]:
        """
        Fetch site DPI statistics grouped by category or application.

        Args:
            sites: Site name or list of site names.
            stats_type: ``by_cat`` or ``by_app``.
            cat_filter: Numeric category ids to filter by. Only used with ``by_app``.
        """
        if stats_type not in ('by_cat', 'by_app'):
            raise UnifiValidationError(f"Invalid DPI stats type: {stats_type}")
        payload: Dict[str, Any] = {'type': stats_type}
        if cat_filter is not None and stats_type == 'by_app':
            payload['cats'] = list(cat_filter)
        return self._request(endpoints.STAT_SITEDPI, payload, sites)

    def clear_dpi_stats(self, sites: SiteSelector) -> List[Any]:
        logger.info(f"Clearing DPI stats on site(s) {sites}")
        return self._request(endpoints.CMD_STAT, {'cmd': 'clear-dpi'}, sites)

    def get_port_forwarding_stats(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.STAT_PORTFORWARD, None, sites)

    def get_current_channels(self, sites: SiteSelector) -> List[Any]:
        """Fetch the currently allowed radio channels."""
        return self._request(endpoints.STAT_CURRENT_CHANNEL, None, sites)

    def get_country_codes(self, sites: SiteSelector) -> List[Any]:
        """Fetch the available ISO 3166-1 numeric country codes."""
        return self._request(endpoints.STAT_CCODE, None, sites)

    def get_site_sysinfo(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.STAT_SYSINFO, None, sites)

    def get_self(self, sites: SiteSelector) -> List[Any]:
        """Fetch information about the logged-in admin within each site."""
        return self._request(endpoints.SELF, None, sites)

    def get_events(
        self,
        sites: SiteSelector,
        history_hours: int = 720,
        start: int = 0,
        limit: int = 3000,
    ) -> List[Any]:
        """
        List events, newest first.

        Args:
            sites: Site name or list of site names.
            history_hours: Hours to go back.
            start: Event offset to start from, for paging.
            limit: Number of events to return.
        """
        payload = {
            '_sort': '-time',
            'type': None,
            'within': history_hours,
            '_start': start,
            '_limit': limit,
        }
        return self._request(endpoints.STAT_EVENT, payload, sites)

    def get_alarms(self, sites: SiteSelector, archived: Optional[bool] = None) -> List[Any]:
        """
        List alarms.

        Args:
            sites: Site name or list of site names.
            archived: When False, only active (non-archived) alarms are listed.
        """
        path = endpoints.STAT_ALARM
        if archived is False:
            path += '?archived=false'
        return self._request(path, None, sites)

    def count_alarms(self, sites: SiteSelector, archived: Optional[bool] = None) -> List[Any]:
        """Count alarms; only active ones when ``archived`` is False."""
        path = endpoints.CNT_ALARM
        if archived is False:
            path += '?archived=false'
        return self._request(path, None, sites)

    def archive_alarms(self, sites: SiteSelector, alarm_id: Optional[str] = None) -> List[Any]:
        """
        Archive one alarm, or every active alarm of the site when ``alarm_id`` is omitted.
        """
        if alarm_id is None:
            payload = {'cmd': 'archive-all-alarms'}
            logger.info(f"Archiving all alarms on site(s) {sites}")
        else:
            payload = {'cmd': 'archive-alarm', '_id': trim_id(alarm_id)}
            logger.info(f"Archiving alarm {alarm_id} on site(s) {sites}")
        return self._request(endpoints.CMD_EVTMGR, payload, sites)

    def get_rogue_aps(self, sites: SiteSelector, within: int = 24) -> List[Any]:
        """List neighboring ("rogue") access points seen within ``within`` hours."""
        return self._request(endpoints.STAT_ROGUEAP, {'within': within}, sites)

    def get_known_rogue_aps(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.REST_ROGUEKNOWN, None, sites)

    # --- Devices ---

    def get_access_devices(
        self, sites: SiteSelector, device_mac: Optional[str] = None, raw=True
    ) -> List[Any]:
        """
        List the devices (access points, switches, gateways) adopted by each site.

        Args:
            sites: Site name or list of site names.
            device_mac: Optional MAC address to fetch a single device.
            raw: If True (default), return the raw dictionaries. If False, map each
                 site's devices to :class:`UnifiDevice` objects.

        Returns:
            One list of devices per site.

        Note:
            The raw device objects are large (often hundreds of fields), and which fields
            are present depends heavily on the device type and firmware.
        """
        mac_segment = normalize_mac(device_mac) if device_mac is not None else None
        raw_results = self._request(
            with_optional_id(endpoints.STAT_DEVICE, mac_segment), None, sites)
        if raw:
            return raw_results
        return self._map_models(raw_results, UnifiDevice, sites)

    def _devmgr(self, sites: SiteSelector, cmd: str, **fields) -> List[Any]:
        payload = {'cmd': cmd}
        payload.update(fields)
        return self._request(endpoints.CMD_DEVMGR, payload, sites)

    def adopt_device(self, sites: SiteSelector, mac: str) -> List[Any]:
        logger.info(f"Adopting device {mac} on site(s) {sites}")
        return self._devmgr(sites, 'adopt', mac=normalize_mac(mac))

    def restart_device(self, sites: SiteSelector, mac: str, reboot_type: str = 'soft') -> List[Any]:
        """
        Reboot a device.

        Args:
            sites: Site name or list of site names.
            mac: Device MAC address.
            reboot_type: ``soft`` requests a plain restart and works for all devices.
                         ``hard`` is for PoE switches and also power-cycles all PoE
                         ports; it does not reset the device to factory defaults.
        """
        reboot_type = reboot_type.lower()
        if reboot_type not in ('soft', 'hard'):
            raise UnifiValidationError(f"Invalid reboot type: {reboot_type}")
        logger.info(f"Restarting device {mac} ({reboot_type}) on site(s) {sites}")
        return self._devmgr(sites, 'restart', mac=normalize_mac(mac), type=reboot_type)

    def force_provision(self, sites: SiteSelector, mac: str) -> List[Any]:
        logger.info(f"Forcing provision of device {mac} on site(s) {sites}")
        return self._devmgr(sites, 'force-provision', mac=normalize_mac(mac))

    def reboot_cloudkey(self, sites: SiteSelector) -> List[Any]:
        """Reboot the Cloud Key hosting the controller. Does nothing on other hosts."""
        logger.info(f"Rebooting cloud key via site(s) {sites}")
        return self._request(endpoints.CMD_SYSTEM, {'cmd': 'reboot'}, sites)

    def disable_access_point(self, sites: SiteSelector, ap_id: str, disable: bool) -> List[Any]:
        """
        Disable or re-enable an access point.

        A disabled device is excluded from the dashboard status and device counts
        and its LED and WLANs are turned off.

        Args:
            sites: Site name or list of site names.
            ap_id: ``_id`` of the access point.
            disable: True disables the device, False enables it again.
        """
        path = f"{endpoints.REST_DEVICE}/{trim_id(ap_id)}"
        return self._request(path, {'disabled': disable}, sites, method='PUT')

    def set_led_override(self, sites: SiteSelector, device_id: str, override_mode: str) -> List[Any]:
        """
        Override the LED mode of a device.

        Args:
            sites: Site name or list of site names.
            device_id: ``_id`` of the device.
            override_mode: ``on``, ``off`` or ``default`` (follow the site setting).
        """
        if override_mode not in ('on', 'off', 'default'):
            raise UnifiValidationError(f"Invalid LED override mode: {override_mode}")
        path = f"{endpoints.REST_DEVICE}/{trim_id(device_id)}"
        return self._request(path, {'led_override': override_mode}, sites, method='PUT')

    def set_locate_access_point(self, sites: SiteSelector, mac: str, enable: bool) -> List[Any]:
        """Start or stop flashing the LED of a device so it can be located."""
        cmd = 'set-locate' if enable else 'unset-locate'
        return self._devmgr(sites, cmd, mac=normalize_mac(mac))

    def set_site_leds(self, sites: SiteSelector, enable: bool) -> List[Any]:
        """Switch the LEDs of all access points of the site on or off."""
        return self._request(
            f"{endpoints.SET_SETTING}/mgmt", {'led_enabled': enable}, sites)

    def set_access_point_radio_settings(
        self,
        sites: SiteSelector,
        ap_id: str,
        radio: str,
        channel: Union[int, str],
        ht: int,
        tx_power_mode: str,
        tx_power: int,
    ) -> List[Any]:
        """
        Update the radio settings of an access point.

        Only supported on controllers older than 5.x.

        Args:
            sites: Site name or list of site names.
            ap_id: ``_id`` of the access point.
            radio: Radio name, for example ``ng`` or ``na``.
            channel: Channel number.
            ht: Channel width, for example 20 or 40.
            tx_power_mode: Transmit power mode, for example ``auto`` or ``custom``.
            tx_power: Transmit power, used with the ``custom`` mode.
        """
        payload = {
            'radio_table': [{
                'radio': radio,
                'channel': channel,
                'ht': ht,
                'tx_power_mode': tx_power_mode,
                'tx_power': tx_power,
            }]
        }
        return self._request(f"{endpoints.UPD_DEVICE}/{trim_id(ap_id)}", payload, sites)

    def set_access_point_wlan_group(
        self, sites: SiteSelector, type_id: str, device_id: str, group_id: str
    ) -> List[Any]:
        """
        Assign an access point to another WLAN group.

        Args:
            sites: Site name or list of site names.
            type_id: ``ng`` for the 2.4 GHz WLANs or ``na`` for the 5 GHz WLANs.
            device_id: ``_id`` of the access point.
            group_id: ``_id`` of the WLAN group.
        """
        if type_id not in ('ng', 'na'):
            raise UnifiValidationError(f"Invalid WLAN type: {type_id}")
        payload = {'wlan_overrides': {}, f'wlangroup_id_{type_id}': group_id}
        return self._request(f"{endpoints.UPD_DEVICE}/{trim_id(device_id)}", payload, sites)

    def rename_access_point(self, sites: SiteSelector, ap_id: str, ap_name: str) -> List[Any]:
        return self._request(
            f"{endpoints.UPD_DEVICE}/{trim_id(ap_id)}", {'name': ap_name}, sites)

    def move_device(self, sites: SiteSelector, mac: str, site_id: str) -> List[Any]:
        """
        Move a device to another site.

        Args:
            sites: Site name or list of site names the device currently belongs to.
            mac: Device MAC address.
            site_id: ``_id`` (not the short name) of the destination site.
        """
        payload = {'cmd': 'move-device', 'site': site_id, 'mac': normalize_mac(mac)}
        logger.info(f"Moving device {mac} from site(s) {sites} to site {site_id}")
        return self._request(endpoints.CMD_SITEMGR, payload, sites)

    def delete_device(self, sites: SiteSelector, mac: str) -> List[Any]:
        """Remove a device from the site."""
        payload = {'cmd': 'delete-device', 'mac': normalize_mac(mac)}
        logger.info(f"Deleting device {mac} from site(s) {sites}")
        return self._request(endpoints.CMD_SITEMGR, payload, sites)

    def upgrade_device(self, sites: SiteSelector, device_mac: str) -> List[Any]:
        """Upgrade a device to the latest firmware known to the controller."""
        logger.info(f"Upgrading device {device_mac} on site(s) {sites}")
        return self._request(
            endpoints.CMD_DEVMGR_UPGRADE, {'mac': normalize_mac(device_mac)}, sites)

    def upgrade_device_external(
        self, sites: SiteSelector, firmware_url: str, device_mac: str
    ) -> List[Any]:
        """
        Upgrade a device to the firmware image found at a URL.

        Args:
            sites: Site name or list of site names.
            firmware_url: URL of the firmware image, which must match the device model.
            device_mac: Device MAC address.
        """
        payload = {'url': firmware_url, 'mac': normalize_mac(device_mac)}
        logger.info(f"Upgrading device {device_mac} from {firmware_url} on site(s) {sites}")
        return self._request(endpoints.CMD_DEVMGR_UPGRADE_EXTERNAL, payload, sites)

    def start_rolling_upgrade(self, sites: SiteSelector) -> List[Any]:
        """Start a rolling upgrade of the site's devices. Runs in the background on the controller."""
        return self._devmgr(sites, 'set-rollupgrade')

    def cancel_rolling_upgrade(self, sites: SiteSelector) -> List[Any]:
        return self._devmgr(sites, 'unset-rollupgrade')

    def get_firmware(self, sites: SiteSelector, firmware_type: str = 'available') -> List[Any]:
        """
        List firmware versions.

        Args:
            sites: Site name or list of site names.
            firmware_type: ``available`` or ``cached``.
        """
        if firmware_type not in ('available', 'cached'):
            raise UnifiValidationError(f"Invalid firmware type: {firmware_type}")
        return self._request(endpoints.CMD_FIRMWARE, {'cmd': firmware_type}, sites)

    def power_cycle_switch_port(self, sites: SiteSelector, switch_mac: str, port_idx: int) -> List[Any]:
        """
        Power-cycle the PoE output of a switch port.

        The port must currently be providing power.

        Args:
            sites: Site name or list of site names.
            switch_mac: Main MAC address of the switch.
            port_idx: 1-based index of the port.
        """
        if not isinstance(port_idx, int) or isinstance(port_idx, bool) or port_idx < 1:
            raise UnifiValidationError(f"Invalid port index: {port_idx}")
        logger.info(f"Power-cycling port {port_idx} of switch {switch_mac} on site(s) {sites}")
        return self._devmgr(sites, 'power-cycle', mac=normalize_mac(switch_mac), port_idx=port_idx)

    def run_spectrum_scan(self, sites: SiteSelector, ap_mac: str) -> List[Any]:
        """Trigger an RF spectrum scan on an access point."""
        return self._devmgr(sites, 'spectrum-scan', mac=normalize_mac(ap_mac))

    def get_spectrum_scan_state(self, sites: SiteSelector, ap_mac: str) -> List[Any]:
        path = f"{endpoints.STAT_SPECTRUM_SCAN}/{normalize_mac(ap_mac)}"
        return self._request(path, None, sites)

    def run_speed_test(self, sites: SiteSelector) -> List[Any]:
        """Start a speed test on the site's gateway. Requires a USG."""
        return self._devmgr(sites, 'speedtest')

    def get_speed_test_status(self, sites: SiteSelector) -> List[Any]:
        return self._devmgr(sites, 'speedtest-status')

    def set_device_settings_base(
        self, sites: SiteSelector, device_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        """
        Update a device's settings.

        Args:
            sites: Site name or list of site names.
            device_id: ``_id`` of the device.
            payload: Device fields to update, as found in the device objects returned
                     by :meth:`get_access_devices`.
        """
        path = f"{endpoints.REST_DEVICE}/{trim_id(device_id)}"
        return self._request(path, payload, sites, method='PUT')

    def set_switch_port_poe_mode(
        self, site: str, switch_mac: str, port: int, mode: str
    ) -> Any:
        """
        Set the PoE mode of one switch port.

        Fetches the switch, edits its port overrides with :class:`AccessDevice`
        and sends the changed overrides back.

        Args:
            site: Site short name the switch belongs to.
            switch_mac: MAC address of the switch.
            port: 1-based port index.
            mode: ``off``, ``passv24`` or ``auto``.

        Returns:
            The unwrapped response of the device update.

        Raises:
            UnifiValidationError: If the device is not a switch, the port does not
                                  exist or does not support PoE, or the mode is invalid.
        """
        devices = self.get_access_devices(site, switch_mac)
        switch = AccessDevice(devices)
        switch.set_poe(port, mode)
        if not switch.device_id:
            raise UnifiDataError(f"Switch {switch_mac} has no _id in the controller response")
        logger.info(f"Setting PoE mode of port {port} on switch {switch_mac} to {mode}")
        return self.set_device_settings_base(site, switch.device_id, switch.get_changes())[0]

    # --- Sites and settings ---

    def get_sites(self, raw=True) -> Union[List[Dict[str, Any]], List[UnifiSite]]:
        """
        List the sites the logged-in admin has access to.

        Args:
            raw: If True (default), return the raw dictionaries. If False, map them to
                 :class:`UnifiSite` objects.

        Returns:
            The list of sites (controller-wide, so not wrapped per site).
        """
        raw_results = self._request(endpoints.SELF_SITES)
        if raw:
            return raw_results
        return self._map_models(raw_results, UnifiSite, None)

    def get_sites_stats(self, raw=True) -> Union[List[Dict[str, Any]], List[UnifiSite]]:
        """
        List all sites with their health and device counts.

        Args:
            raw: If True (default), return the raw dictionaries. If False, map them to
                 :class:`UnifiSite` objects; the subsystem health list is kept in ``health``.
        """
        raw_results = self._request(endpoints.STAT_SITES)
        if raw:
            return raw_results
        return self._map_models(raw_results, UnifiSite, None)

    def create_site(self, sites: SiteSelector, description: str = '') -> List[Any]:
        """
        Create a new site.

        The request is issued in the context of an existing site; the new site
        appears in :meth:`get_sites` immediately after creation.

        Args:
            sites: Existing site name(s) to issue the request through.
            description: Long name of the new site.
        """
        logger.info(f"Creating site '{description}'")
        return self._request(
            endpoints.CMD_SITEMGR, {'cmd': 'add-site', 'desc': description}, sites)

    def delete_site(self, site_id: str) -> Any:
        """
        Delete a site.

        Args:
            site_id: ``_id`` or short name of the site to delete.

        Returns:
            The unwrapped response of the delete command.

        Raises:
            UnifiValidationError: If no site with that ``_id`` or name exists.
        """
        site_id = trim_id(site_id)
        for site in self.get_sites() or []:
            if site.get('_id') == site_id or site.get('name') == site_id:
                logger.info(f"Deleting site {site.get('name')} ({site.get('_id')})")
                payload = {'cmd': 'delete-site', 'site': site['_id']}
                return self._request(endpoints.CMD_SITEMGR, payload, site['name'])[0]
        raise UnifiValidationError(f"Site not found: {site_id}")

    def set_site_name(self, sites: SiteSelector, site_name: str) -> List[Any]:
        """Change the long name (description) of a site."""
        return self._request(
            endpoints.CMD_SITEMGR, {'cmd': 'update-site', 'desc': site_name}, sites)

    def _set_rest_setting(
        self, sites: SiteSelector, key: str, setting_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        path = f"{endpoints.REST_SETTING}/{key}/{trim_id(setting_id)}"
        return self._request(path, payload, sites, method='PUT')

    def set_site_country(
        self, sites: SiteSelector, country_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        """
        Update the country settings of a site.

        Args:
            sites: Site name or list of site names.
            country_id: ``_id`` of the ``country`` settings section (see :meth:`get_site_settings`).
            payload: (Partial) ``country`` settings object. Valid codes are listed by
                     :meth:`get_country_codes`.
        """
        return self._set_rest_setting(sites, 'country', country_id, payload)

    def set_site_locale(
        self, sites: SiteSelector, locale_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        """Update the locale (timezone) settings of a site."""
        return self._set_rest_setting(sites, 'locale', locale_id, payload)

    def set_site_snmp(self, sites: SiteSelector, snmp_id: str, payload: Dict[str, Any]) -> List[Any]:
        return self._set_rest_setting(sites, 'snmp', snmp_id, payload)

    def set_site_mgmt(self, sites: SiteSelector, mgmt_id: str, payload: Dict[str, Any]) -> List[Any]:
        return self._set_rest_setting(sites, 'mgmt', mgmt_id, payload)

    def set_site_guest_access(
        self, sites: SiteSelector, guest_access_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        return self._set_rest_setting(sites, 'guest_access', guest_access_id, payload)

    def set_site_ntp(self, sites: SiteSelector, ntp_id: str, payload: Dict[str, Any]) -> List[Any]:
        return self._set_rest_setting(sites, 'ntp', ntp_id, payload)

    def set_site_connectivity(
        self, sites: SiteSelector, connectivity_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        return self._set_rest_setting(sites, 'connectivity', connectivity_id, payload)

    def get_site_settings(self, sites: SiteSelector) -> List[Any]:
        """
        List the settings sections of each site.

        Each section is an object with a ``key`` (``mgmt``, ``country``, ``guest_access``, ...)
        and an ``_id`` used by the ``set_site_*`` methods.
        """
        return self._request(endpoints.GET_SETTING, None, sites)

    def set_guest_login_settings(
        self,
        sites: SiteSelector,
        portal_enabled: bool,
        portal_customized: bool,
        redirect_enabled: bool,
        redirect_url: str,
        x_password: str,
        expire_number: int,
        expire_unit: int,
        section_id: str,
    ) -> List[Any]:
        """
        Update the guest login (captive portal) settings.

        Args:
            sites: Site name or list of site names.
            portal_enabled: Enable the guest portal.
            portal_customized: Use the customized portal.
            redirect_enabled: Redirect guests after login.
            redirect_url: URL to redirect to, including the scheme and without a trailing slash.
            x_password: Captive portal password.
            expire_number: Number of units until the authorization expires.
            expire_unit: Minutes per unit, for example 60 for hours.
            section_id: ``_id`` of the ``guest_access`` settings section.
        """
        payload = {
            'portal_enabled': portal_enabled,
            'portal_customized': portal_customized,
            'redirect_enabled': redirect_enabled,
            'redirect_url': redirect_url,
            'x_password': x_password,
            'expire_number': expire_number,
            'expire_unit': expire_unit,
            '_id': section_id,
        }
        return self._request(f"{endpoints.SET_SETTING}/guest_access", payload, sites)

    def set_guest_login_settings_base(
        self, sites: SiteSelector, payload: Dict[str, Any]
    ) -> List[Any]:
        return self._request(f"{endpoints.SET_SETTING}/guest_access", payload, sites)

    def set_ips_settings_base(self, sites: SiteSelector, payload: Dict[str, Any]) -> List[Any]:
        """Update the IPS/IDS settings. Requires a USG."""
        return self._request(f"{endpoints.SET_SETTING}/ips", payload, sites)

    def set_super_mgmt_settings_base(
        self, sites: SiteSelector, settings_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        path = f"{endpoints.SET_SETTING}/super_mgmt/{trim_id(settings_id)}"
        return self._request(path, payload, sites)

    def set_super_smtp_settings_base(
        self, sites: SiteSelector, settings_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        path = f"{endpoints.SET_SETTING}/super_smtp/{trim_id(settings_id)}"
        return self._request(path, payload, sites)

    def set_super_identity_settings_base(
        self, sites: SiteSelector, settings_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        path = f"{endpoints.SET_SETTING}/super_identity/{trim_id(settings_id)}"
        return self._request(path, payload, sites)

    # --- Admins ---

    def list_admins(self, sites: SiteSelector) -> List[Any]:
        """List the admins with access to each site."""
        return self._request(endpoints.CMD_SITEMGR, {'cmd': 'get-admins'}, sites)

    def list_all_admins(self) -> Any:
        """List all admins of the controller. Controller-wide, requires super admin rights."""
        return self._request(endpoints.ALL_ADMINS)

    @staticmethod
    def _admin_role(payload: Dict[str, Any], readonly: bool, device_adopt: bool, device_restart: bool):
        payload['role'] = 'readonly' if readonly else 'admin'
        permissions = []
        if device_adopt:
            permissions.append(ADMIN_PERMISSION_ADOPT)
        if device_restart:
            permissions.append(ADMIN_PERMISSION_RESTART)
        payload['permissions'] = permissions

    def invite_admin(
        self,
        sites: SiteSelector,
        name: str,
        email: str,
        enable_sso: bool = True,
        readonly: bool = False,
        device_adopt: bool = False,
        device_restart: bool = False,
    ) -> List[Any]:
        """
        Invite a new admin to a site.

        An invitation is sent to ``email``; inviting an existing admin triggers a re-invite.

        Args:
            sites: Site name or list of site names.
            name: Name of the new admin.
            email: Email address the invitation is sent to.
            enable_sso: Allow the admin to sign in with single sign-on.
            readonly: Grant read-only instead of administrator rights.
            device_adopt: Grant permission to adopt devices.
            device_restart: Grant permission to restart devices.
        """
        payload: Dict[str, Any] = {
            'cmd': 'invite-admin',
            'name': name.strip(),
            'email': email.strip(),
            'for_sso': enable_sso,
        }
        self._admin_role(payload, readonly, device_adopt, device_restart)
        logger.info(f"Inviting admin {payload['email']} to site(s) {sites}")
        return self._request(endpoints.CMD_SITEMGR, payload, sites)

    def assign_existing_admin(
        self,
        sites: SiteSelector,
        admin_id: str,
        readonly: bool = False,
        device_adopt: bool = False,
        device_restart: bool = False,
    ) -> List[Any]:
        """
        Grant an existing admin (see :meth:`list_all_admins`) access to a site.

        Args:
            sites: Site name or list of site names.
            admin_id: ``_id`` of the admin.
            readonly: Grant read-only instead of administrator rights.
            device_adopt: Grant permission to adopt devices.
            device_restart: Grant permission to restart devices.
        """
        payload: Dict[str, Any] = {'cmd': 'grant-admin', 'admin': trim_id(admin_id)}
        self._admin_role(payload, readonly, device_adopt, device_restart)
        return self._request(endpoints.CMD_SITEMGR, payload, sites)

    def revoke_admin(self, sites: SiteSelector, admin_id: str) -> List[Any]:
        """Revoke an admin's access to a site. Super admins cannot be revoked."""
        payload = {'cmd': 'revoke-admin', 'admin': trim_id(admin_id)}
        logger.info(f"Revoking admin {admin_id} from site(s) {sites}")
        return self._request(endpoints.CMD_SITEMGR, payload, sites)

    # --- Network configuration ---

    def get_firewall_groups(self, sites: SiteSelector, group_id: Optional[str] = None) -> List[Any]:
        """List firewall groups, or fetch a single one by ``_id``."""
        return self._request(
            with_optional_id(endpoints.REST_FIREWALLGROUP, group_id), None, sites)

    def create_firewall_group(
        self,
        sites: SiteSelector,
        group_name: str,
        group_type: str,
        group_members: Optional[List[str]] = None,
    ) -> List[Any]:
        """
        Create a firewall group.

        Args:
            sites: Site name or list of site names.
            group_name: Name of the group.
            group_type: ``address-group``, ``ipv6-address-group`` or ``port-group``.
            group_members: IPv4 addresses, IPv6 addresses or port numbers. Defaults to empty.
        """
        payload = {
            'name': group_name,
            'group_type': group_type,
            'group_members': list(group_members or []),
        }
        return self._request(endpoints.REST_FIREWALLGROUP, payload, sites)

    def edit_firewall_group(
        self,
        sites: SiteSelector,
        group_id: str,
        site_id: str,
        group_name: str,
        group_type: str,
        group_members: Optional[List[str]] = None,
    ) -> List[Any]:
        """
        Update a firewall group. ``group_members`` replaces the existing members.

        The group type of an existing group cannot be changed.
        """
        group_id = trim_id(group_id)
        payload = {
            '_id': group_id,
            'name': group_name,
            'group_type': group_type,
            'group_members': list(group_members or []),
            'site_id': site_id,
        }
        return self._request(
            f"{endpoints.REST_FIREWALLGROUP}/{group_id}", payload, sites, method='PUT')

    def delete_firewall_group(self, sites: SiteSelector, group_id: str) -> List[Any]:
        path = f"{endpoints.REST_FIREWALLGROUP}/{trim_id(group_id)}"
        logger.info(f"Deleting firewall group {group_id} on site(s) {sites}")
        return self._request(path, None, sites, method='DELETE')

    def get_firewall_rules(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.REST_FIREWALLRULE, None, sites)

    def get_routing(self, sites: SiteSelector, route_id: Optional[str] = None) -> List[Any]:
        """List static routes, or fetch a single one by ``_id``."""
        return self._request(with_optional_id(endpoints.REST_ROUTING, route_id), None, sites)

    def get_port_forwarding(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.LIST_PORTFORWARD, None, sites)

    def get_dynamic_dns(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.LIST_DYNAMICDNS, None, sites)

    def get_port_config(self, sites: SiteSelector) -> List[Any]:
        """List the switch port profiles."""
        return self._request(endpoints.LIST_PORTCONF, None, sites)

    def get_voip_extensions(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.LIST_EXTENSION, None, sites)

    def get_tags(self, sites: SiteSelector) -> List[Any]:
        """List device tags. Requires controller 5.5 or later."""
        return self._request(endpoints.REST_TAG, None, sites)

    def get_network_conf(self, sites: SiteSelector, network_id: Optional[str] = None) -> List[Any]:
        """List the configured networks (LANs, VLANs, WANs, VPNs), or a single one by ``_id``."""
        return self._request(
            with_optional_id(endpoints.REST_NETWORKCONF, network_id), None, sites)

    def create_network(self, sites: SiteSelector, payload: Dict[str, Any]) -> List[Any]:
        """
        Create a network.

        Args:
            sites: Site name or list of site names.
            payload: Network object structured like the ones returned by
                     :meth:`get_network_conf`, without ``_id``.
        """
        logger.info(f"Creating network '{payload.get('name')}' on site(s) {sites}")
        return self._request(endpoints.REST_NETWORKCONF, payload, sites)

    def set_network_settings_base(
        self, sites: SiteSelector, network_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        path = f"{endpoints.REST_NETWORKCONF}/{trim_id(network_id)}"
        return self._request(path, payload, sites, method='PUT')

    def delete_network(self, sites: SiteSelector, network_id: str) -> List[Any]:
        path = f"{endpoints.REST_NETWORKCONF}/{trim_id(network_id)}"
        logger.info(f"Deleting network {network_id} on site(s) {sites}")
        return self._request(path, None, sites, method='DELETE')

    def get_wlan_settings(self, sites: SiteSelector, wlan_id: Optional[str] = None) -> List[Any]:
        """List the WLAN configurations, or fetch a single one by ``_id``."""
        return self._request(with_optional_id(endpoints.REST_WLANCONF, wlan_id), None, sites)

    def create_wlan(
        self,
        sites: SiteSelector,
        name: str,
        x_passphrase: Optional[str],
        usergroup_id: str,
        wlangroup_id: str,
        enabled: bool = True,
        hide_ssid: bool = False,
        is_guest: bool = False,
        security: str = 'open',
        wpa_mode: str = 'wpa2',
        wpa_enc: str = 'ccmp',
        vlan_enabled: bool = False,
        vlan: Optional[Union[int, str]] = None,
        uapsd_enabled: bool = False,
        schedule_enabled: bool = False,
        schedule: Optional[Any] = None,
    ) -> List[Any]:
        """
        Create a WLAN.

        Args:
            sites: Site name or list of site names.
            name: SSID.
            x_passphrase: Pre-shared key of 8 to 63 characters. Ignored for ``open`` security.
            usergroup_id: ``_id`` of the user group (see :meth:`get_user_groups`).
            wlangroup_id: ``_id`` of the WLAN group (see :meth:`get_wlan_groups`).
            enabled: Enable the WLAN.
            hide_ssid: Hide the SSID.
            is_guest: Apply guest policies.
            security: ``open``, ``wep``, ``wpapsk`` or ``wpaeap``.
            wpa_mode: WPA mode, for example ``wpa2``.
            wpa_enc: Encryption, ``auto`` or ``ccmp``.
            vlan_enabled: Tag the WLAN with a VLAN.
            vlan: VLAN id. Only sent when ``vlan_enabled`` is True.
            uapsd_enabled: Enable Unscheduled Automatic Power Save Delivery.
            schedule_enabled: Enable the WLAN schedule.
            schedule: Schedule rules.
        """
        payload: Dict[str, Any] = {
            'name': name,
            'usergroup_id': usergroup_id,
            'wlangroup_id': wlangroup_id,
            'enabled': enabled,
            'hide_ssid': hide_ssid,
            'is_guest': is_guest,
            'security': security,
            'wpa_mode': wpa_mode,
            'wpa_enc': wpa_enc,
            'vlan_enabled': vlan_enabled,
            'uapsd_enabled': uapsd_enabled,
            'schedule_enabled': schedule_enabled,
            'schedule': schedule if schedule is not None else {},
        }
        if vlan_enabled and vlan is not None:
            payload['vlan'] = vlan
        if x_passphrase and security != 'open':
            payload['x_passphrase'] = x_passphrase

        logger.info(f"Creating WLAN '{name}' on site(s) {sites}")
        return self._request(endpoints.ADD_WLANCONF, payload, sites)

    def set_wlan_settings_base(
        self, sites: SiteSelector, wlan_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        """
        Update a WLAN configuration.

        Args:
            sites: Site name or list of site names.
            wlan_id: ``_id`` of the WLAN.
            payload: (Partial) WLAN object structured like the ones returned by
                     :meth:`get_wlan_settings`.
        """
        path = f"{endpoints.REST_WLANCONF}/{trim_id(wlan_id)}"
        return self._request(path, payload, sites, method='PUT')

    def set_wlan_settings(
        self,
        sites: SiteSelector,
        wlan_id: str,
        x_passphrase: Optional[str] = None,
        name: Optional[str] = None,
    ) -> List[Any]:
        """Change the pre-shared key and/or SSID of a WLAN. Omitted values are left unchanged."""
        payload = {}
        if x_passphrase is not None:
            payload['x_passphrase'] = x_passphrase.strip()
        if name is not None:
            payload['name'] = name.strip()
        return self.set_wlan_settings_base(sites, wlan_id, payload)

    def disable_wlan(self, sites: SiteSelector, wlan_id: str, disable: bool) -> List[Any]:
        return self.set_wlan_settings_base(sites, wlan_id, {'enabled': not disable})

    def delete_wlan(self, sites: SiteSelector, wlan_id: str) -> List[Any]:
        path = f"{endpoints.REST_WLANCONF}/{trim_id(wlan_id)}"
        logger.info(f"Deleting WLAN {wlan_id} on site(s) {sites}")
        return self._request(path, {}, sites, method='DELETE')

    def set_wlan_mac_filter(
        self,
        sites: SiteSelector,
        wlan_id: str,
        mac_filter_policy: str,
        mac_filter_enabled: bool,
        macs: Sequence[str],
    ) -> List[Any]:
        """
        Replace the MAC filter of a WLAN.

        Args:
            sites: Site name or list of site names.
            wlan_id: ``_id`` of the WLAN.
            mac_filter_policy: ``allow`` or ``deny``.
            mac_filter_enabled: Enable the filter.
            macs: MAC addresses replacing the current filter list.
        """
        if mac_filter_policy not in ('allow', 'deny'):
            raise UnifiValidationError(f"Invalid MAC filter policy: {mac_filter_policy}")
        payload = {
            'mac_filter_enabled': mac_filter_enabled,
            'mac_filter_policy': mac_filter_policy,
            'mac_filter_list': normalize_macs(macs),
        }
        return self.set_wlan_settings_base(sites, wlan_id, payload)

    def get_wlan_groups(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.LIST_WLANGROUP, None, sites)

    def get_radius_profiles(self, sites: SiteSelector) -> List[Any]:
        """List RADIUS profiles. Requires controller 5.5.19 or later."""
        return self._request(endpoints.REST_RADIUSPROFILE, None, sites)

    def get_radius_accounts(self, sites: SiteSelector) -> List[Any]:
        """List RADIUS accounts. Requires controller 5.5.19 or later."""
        return self._request(endpoints.REST_ACCOUNT, None, sites)

    def create_radius_account(
        self,
        sites: SiteSelector,
        name: str,
        x_password: str,
        tunnel_type: Optional[int] = None,
        tunnel_medium_type: Optional[int] = None,
        vlan: Optional[int] = None,
    ) -> List[Any]:
        """
        Create a RADIUS account.

        Args:
            sites: Site name or list of site names.
            name: Account name.
            x_password: Account password.
            tunnel_type: RFC 2868 tunnel type, for example 3 (L2TP) or 13 (VLAN).
            tunnel_medium_type: RFC 2868 tunnel medium type, for example 1 (IPv4) or 6 (802).
            vlan: VLAN to assign to the account.
        """
        payload: Dict[str, Any] = {'name': name, 'x_password': x_password}
        if tunnel_type is not None:
            payload['tunnel_type'] = tunnel_type
        if tunnel_medium_type is not None:
            payload['tunnel_medium_type'] = tunnel_medium_type
        if vlan is not None:
            payload['vlan'] = vlan
        return self._request(endpoints.REST_ACCOUNT, payload, sites)

    def set_radius_account_base(
        self, sites: SiteSelector, account_id: str, payload: Dict[str, Any]
    ) -> List[Any]:
        path = f"{endpoints.REST_ACCOUNT}/{trim_id(account_id)}"
        return self._request(path, payload, sites, method='PUT')

    def delete_radius_account(self, sites: SiteSelector, account_id: str) -> List[Any]:
        path = f"{endpoints.REST_ACCOUNT}/{trim_id(account_id)}"
        return self._request(path, None, sites, method='DELETE')

    # --- Hotspot ---

    def get_vouchers(self, sites: SiteSelector, create_time: Optional[int] = None) -> List[Any]:
        """
        List hotspot vouchers.

        Args:
            sites: Site name or list of site names.
            create_time: Optional Unix timestamp in seconds; only vouchers created at that
                         time are listed (as returned by :meth:`create_vouchers`).
        """
        payload = {'create_time': create_time} if create_time is not None else {}
        return self._request(endpoints.STAT_VOUCHER, payload, sites)

    def get_payments(self, sites: SiteSelector, within: Optional[int] = None) -> List[Any]:
        """List hotspot payments, optionally only those of the past ``within`` hours."""
        path = endpoints.STAT_PAYMENT
        if within is not None:
            path += f"?within={within}"
        return self._request(path, None, sites)

    def create_hotspot_operator(
        self, sites: SiteSelector, name: str, x_password: str, note: Optional[str] = None
    ) -> List[Any]:
        payload = {'name': name, 'x_password': x_password}
        if note is not None:
            payload['note'] = note
        return self._request(endpoints.REST_HOTSPOTOP, payload, sites)

    def get_hotspot_operators(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.REST_HOTSPOTOP, None, sites)

    def create_vouchers(
        self,
        sites: SiteSelector,
        minutes: int,
        count: int = 1,
        quota: int = 0,
        note: Optional[str] = None,
        up_kbps: Optional[int] = None,
        down_kbps: Optional[int] = None,
        megabytes: Optional[int] = None,
    ) -> List[Any]:
        """
        Create hotspot vouchers.

        Args:
            sites: Site name or list of site names.
            minutes: Minutes a voucher stays valid after activation.
            count: Number of vouchers to create.
            quota: 0 for multi-use, 1 for single-use, n for n uses.
            note: Note printed on the vouchers.
            up_kbps: Upload speed limit in Kbps.
            down_kbps: Download speed limit in Kbps.
            megabytes: Data transfer limit in MB.

        Returns:
            One entry per site holding the ``create_time`` of the new vouchers, which
            can be passed to :meth:`get_vouchers`.
        """
        payload: Dict[str, Any] = {
            'cmd': 'create-voucher',
            'expire': minutes,
            'n': count,
            'quota': quota,
        }
        if note is not None:
            payload['note'] = note
        if up_kbps is not None:
            payload['up'] = up_kbps
        if down_kbps is not None:
            payload['down'] = down_kbps
        if megabytes is not None:
            payload['bytes'] = megabytes

        logger.info(f"Creating {count} voucher(s) on site(s) {sites}")
        return self._request(endpoints.CMD_HOTSPOT, payload, sites)

    def revoke_voucher(self, sites: SiteSelector, voucher_id: str) -> List[Any]:
        payload = {'cmd': 'delete-voucher', '_id': trim_id(voucher_id)}
        return self._request(endpoints.CMD_HOTSPOT, payload, sites)

    def extend_guest_validity(self, sites: SiteSelector, guest_id: str) -> List[Any]:
        payload = {'cmd': 'extend', '_id': trim_id(guest_id)}
        return self._request(endpoints.CMD_HOTSPOT, payload, sites)

    # --- System ---

    def generate_backup(self, sites: SiteSelector) -> List[Any]:
        """Generate a controller backup. The response holds the download URL of the file."""
        logger.info(f"Generating backup via site(s) {sites}")
        return self._request(endpoints.CMD_BACKUP, {'cmd': 'backup'}, sites)

    def get_backups(self, sites: SiteSelector) -> List[Any]:
        return self._request(endpoints.CMD_BACKUP, {'cmd': 'list-backups'}, sites)

    def delete_backup(self, sites: SiteSelector, filename: str) -> List[Any]:
        payload = {'cmd': 'delete-backup', 'filename': filename}
        logger.info(f"Deleting backup {filename} via site(s) {sites}")
        return self._request(endpoints.CMD_BACKUP, payload, sites)

    def get_status(self) -> Any:
        """
        Fetch the controller status (server version, uptime).

        Works without logging in.
        """
        return self._request(endpoints.STATUS, require_login=False)

    def cmd_stat(self, sites: SiteSelector, command: str) -> List[Any]:
        """Run a ``cmd/stat`` command, for example ``reset-dpi``."""
        return self._request(endpoints.CMD_STAT, {'cmd': command.strip()}, sites)

    def custom_api_request(
        self,
        sites: SiteSelector,
        path: str,
        method: Optional[str] = None,
        payload: Any = None,
    ) -> Any:
        """
        Send a request to an arbitrary endpoint through the dispatcher.

        No payload validation is done; only use this with a good understanding of
        the controller API.

        Args:
            sites: None for controller-wide paths, otherwise a site name or list of site names.
            path: Path relative to the controller, starting with ``/``. Use ``{site}``
                  where the site name belongs, e.g. ``/api/s/{site}/stat/widget/warnings``.
            method: ``GET``, ``POST``, ``PUT`` or ``DELETE``. When omitted, POST is
                    used if a payload is given and GET otherwise.
            payload: Optional JSON payload.

        Returns:
            The unwrapped data, aggregated like every other method.
        """
        if not isinstance(path, str) or not path.startswith('/'):
            raise UnifiValidationError(f"Path must start with '/': {path!r}")
        return self._request(path, payload, sites, method=method)
