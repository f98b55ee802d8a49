from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class UnifiClient:
    """Represents a client (station) known to a UniFi site.

    Attributes:
        mac: MAC address of the client.
        _id: Unique identifier of the client record; used by the ``upd/user`` and ``rest/user`` endpoints.
        site_id: Identifier for the site the client belongs to.
        oui: Organizationally Unique Identifier.
        first_seen: Timestamp of when the client was first seen.
        last_seen: Timestamp of when the client was last seen.
        ip: IP address assigned to the client.
        is_guest: Indicates if the client is a guest.
        is_wired: Indicates if the client is connected via wired connection.
        hostname: Hostname of the client.
        name: Alias given to the client on the controller.
        noted: Indicates if the client has a note.
        note: Note attached to the client.
        usergroup_id: Identifier for the user group.
        network_id: Identifier for the network.
        use_fixedip: Whether a fixed IP is configured.
        fixed_ip: Fixed IP address assigned to the client.
        blocked: Whether the client is blocked.
        ap_mac: MAC of the access point a wireless client is associated with.
    """
    mac: str
    _id: Optional[str] = None
    site_id: Optional[str] = None
    oui: Optional[str] = None
    first_seen: Optional[int] = None
    last_seen: Optional[int] = None
    ip: Optional[str] = None
    is_guest: Optional[bool] = None
    is_wired: Optional[bool] = None
    hostname: Optional[str] = None
    name: Optional[str] = None
    noted: Optional[bool] = None
    note: Optional[str] = None
    usergroup_id: Optional[str] = None
    network_id: Optional[str] = None
    use_fixedip: Optional[bool] = None
    fixed_ip: Optional[str] = None
    blocked: Optional[bool] = None
    ap_mac: Optional[str] = None

    _extra_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def display_name(self) -> str:
        return self.name or self.hostname or self.mac
