"""
Hand-off of an authenticated session to an external event stream listener.

The controller pushes asynchronous notifications (client connects, device
state changes, alarms) over a websocket. This package does not implement the
listener; it only packages what a websocket client needs to authenticate with
the session established by :meth:`UnifiController.login`.
"""

from dataclasses import dataclass, field
from typing import Dict, Union


@dataclass(frozen=True)
class EventStreamConfig:
    """
    Connection parameters for a controller event stream.

    Attributes:
        url: ``wss://`` (or ``ws://``) URL of the site's event stream.
        cookies: Session cookies of the logged-in controller session.
        headers: Extra headers to send with the websocket handshake
                 (the CSRF token on UniFi OS controllers).
        verify_ssl: TLS verification setting of the originating controller client.
    """
    url: str
    cookies: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    verify_ssl: Union[bool, str] = True

    @property
    def cookie_header(self) -> str:
        """The cookies rendered as a single ``Cookie`` header value."""
        return "; ".join(f"{name}={value}" for name, value in self.cookies.items())

    def handshake_headers(self) -> Dict[str, str]:
        """All headers to send with the websocket handshake, including ``Cookie``."""
        headers = dict(self.headers)
        if self.cookies:
            headers["Cookie"] = self.cookie_header
        return headers
