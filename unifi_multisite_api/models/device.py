"""
Models for UniFi devices and their switch ports.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..logging import get_logger
from ..utils import map_api_data_to_model

logger = get_logger(__name__)


@dataclass
class SwitchPort:
    """
    One entry of a switch's ``port_table``.

    ``port_idx`` is 1-based, matching the numbering used by ``port_overrides``
    and the ``power-cycle`` device command.
    """
    port_idx: int
    name: Optional[str] = None
    up: Optional[bool] = None
    enable: Optional[bool] = None
    speed: Optional[int] = None
    full_duplex: Optional[bool] = None
    is_uplink: Optional[bool] = None
    portconf_id: Optional[str] = None
    port_poe: Optional[bool] = None
    poe_mode: Optional[str] = None
    poe_enable: Optional[bool] = None
    poe_power: Optional[str] = None
    rx_bytes_r: Optional[float] = field(default=None, metadata={"unifi_api_field": "rx_bytes-r"})
    tx_bytes_r: Optional[float] = field(default=None, metadata={"unifi_api_field": "tx_bytes-r"})

    _extra_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def supports_poe(self) -> bool:
        return self.port_poe is not False


@dataclass
class UnifiDevice:
    """
    Represents a UniFi network device.

    This class models a device managed by a UniFi controller, such as an access point
    (``type == "uap"``), switch (``"usw"``) or gateway (``"ugw"``/``"udm"``).
    """
    mac: str
    name: Optional[str] = None
    ip: Optional[str] = None
    model: Optional[str] = None
    type: Optional[str] = None
    serial: Optional[str] = None

    _id: Optional[str] = None
    site_id: Optional[str] = None

    version: Optional[str] = None
    adopted: Optional[bool] = None
    state: Optional[int] = None
    uptime: Optional[int] = None
    last_seen: Optional[int] = None
    disabled: Optional[bool] = None
    led_override: Optional[str] = None
    upgradable: Optional[bool] = None
    inform_url: Optional[str] = None

    user_num_sta: Optional[int] = field(default=None, metadata={"unifi_api_field": "user-num_sta"})
    guest_num_sta: Optional[int] = field(default=None, metadata={"unifi_api_field": "guest-num_sta"})
    rx_bytes_r: Optional[int] = field(default=None, metadata={"unifi_api_field": "rx_bytes-r"})
    tx_bytes_r: Optional[int] = field(default=None, metadata={"unifi_api_field": "tx_bytes-r"})

    port_table: List[Dict[str, Any]] = field(default_factory=list, repr=False)
    port_overrides: List[Dict[str, Any]] = field(default_factory=list, repr=False)
    radio_table: Optional[List[Dict[str, Any]]] = field(default=None, repr=False)
    uplink: Optional[Dict[str, Any]] = field(default=None, repr=False)

    # Site the device was fetched from; not part of the API object.
    site_name: Optional[str] = None

    _extra_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def device_id(self) -> Optional[str]:
        """The ``_id`` used by the ``rest/device`` and ``upd/device`` endpoints."""
        return self._id

    @property
    def is_switch(self) -> bool:
        return self.type == "usw"

    @property
    def ports(self) -> List[SwitchPort]:
        """Typed view of ``port_table``."""
        ports = []
        for entry in self.port_table:
            model_fields, extra_fields = map_api_data_to_model(entry, SwitchPort)
            try:
                port = SwitchPort(**model_fields)
            except TypeError as e:
                logger.warning(
                    f"Skipping port_table entry of {self.mac}: {entry}. Error: {e}")
                continue
            port._extra_fields = extra_fields
            ports.append(port)
        return ports

    def get_port(self, port_idx: int) -> Optional[SwitchPort]:
        """Return the port with the given 1-based index, if present."""
        for port in self.ports:
            if port.port_idx == port_idx:
                return port
        return None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the UnifiDevice to a dictionary.

        Returns:
            Dictionary representation of the device, with unrecognised API fields merged
            back in. The local ``site_name`` is left out.
        """
        result = {k: v for k, v in self.__dict__.items()
                  if k not in ('_extra_fields', 'site_name')}
        result.update(self._extra_fields)
        return result
