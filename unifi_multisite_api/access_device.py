"""
Client-side editing of switch port overrides.

A switch's per-port settings live in the ``port_overrides`` list of its device
object. :class:`AccessDevice` edits a local copy of that object and reports the
changed top-level fields, which can be sent back with
:meth:`UnifiController.set_device_settings_base`.
"""

import copy
from typing import Any, Dict, List, Optional, Union

from .exceptions import UnifiValidationError
from .logging import get_logger
from .models.device import UnifiDevice

logger = get_logger(__name__)

POE_MODES = ("off", "passv24", "auto")


class AccessDevice:
    """
    Editable view of a UniFi switch.

    Args:
        device: A raw device dictionary, a :class:`UnifiDevice`, or the list
                (possibly nested, as returned for a site selector) wrapping one.

    Raises:
        UnifiValidationError: If the device is not a switch (``type != "usw"``).
    """

    def __init__(self, device: Union[Dict[str, Any], UnifiDevice, List[Any]]):
        unwrapped = self._drop_array(device)
        if isinstance(unwrapped, UnifiDevice):
            unwrapped = unwrapped.to_dict()
        if not isinstance(unwrapped, dict):
            raise UnifiValidationError(
                f"Expected a device object, got {type(unwrapped).__name__}")

        self._device = copy.deepcopy(unwrapped)
        self._dirty: List[str] = []
        self.validate()

    @staticmethod
    def _drop_array(obj: Any) -> Any:
        while isinstance(obj, list):
            if not obj:
                raise UnifiValidationError("Empty device list")
            obj = obj[0]
        return obj

    def validate(self) -> None:
        if self._device.get("type") != "usw":
            raise UnifiValidationError(
                f"Device {self._device.get('mac')} is not a switch "
                f"(type: {self._device.get('type')})")

    @property
    def device_id(self) -> Optional[str]:
        return self._device.get("_id")

    @property
    def mac(self) -> Optional[str]:
        return self._device.get("mac")

    @property
    def port_overrides(self) -> List[Dict[str, Any]]:
        return self._device.setdefault("port_overrides", [])

    def _mark_dirty(self, field_name: str) -> None:
        if field_name not in self._dirty:
            self._dirty.append(field_name)

    def set_poe(self, port: int, mode: str) -> None:
        """
        Set the PoE mode of a switch port.

        Updates the existing override for the port, or adds one that keeps the
        port's current port profile.

        Args:
            port: 1-based port index.
            mode: One of ``off``, ``passv24`` or ``auto``.

        Raises:
            UnifiValidationError: If the mode is unknown, the port does not exist
                                  on this switch, or the port does not support PoE.
        """
        if mode not in POE_MODES:
            raise UnifiValidationError(f"{mode} is not a valid POE mode")

        port_table = self._device.get("port_table") or []
        if not isinstance(port, int) or isinstance(port, bool) or not 1 <= port <= len(port_table):
            raise UnifiValidationError(f"port '{port}' does not exist on this switch")
        port_entry = port_table[port - 1]
        if port_entry.get("port_poe") is False:
            raise UnifiValidationError(f"port '{port}' does not support poe")

        self._mark_dirty("port_overrides")

        for override in self.port_overrides:
            if override.get("port_idx") == port:
                override["poe_mode"] = mode
                logger.debug(f"Updated PoE override on port {port} of {self.mac}: {mode}")
                return

        self.port_overrides.append({
            "port_idx": port,
            "portconf_id": port_entry.get("portconf_id"),
            "poe_mode": mode,
        })
        logger.debug(f"Added PoE override on port {port} of {self.mac}: {mode}")

    def get_changes(self) -> Dict[str, Any]:
        """Return the modified top-level fields, ready to be sent as a settings payload."""
        return {name: copy.deepcopy(self._device[name]) for name in self._dirty}

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._device)
