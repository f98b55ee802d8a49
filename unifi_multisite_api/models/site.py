"""
Models for UniFi sites and related objects.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class UnifiSite:
    """
    Represents a UniFi site.

    A site is the logical partition of managed infrastructure that most
    endpoints are scoped to. Its short ``name`` (e.g. ``default``) is the token
    substituted into ``/api/s/<site>/...`` paths; ``desc`` is the display name.
    """
    name: str
    desc: Optional[str] = None
    health: Optional[List[Dict[str, Any]]] = None

    _id: Optional[str] = None
    anonymous_id: Optional[str] = None
    attr_hidden_id: Optional[str] = None
    attr_no_delete: Optional[bool] = None
    num_new_alarms: Optional[int] = None
    role: Optional[str] = None
    device_count: Optional[int] = None

    _extra_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def site_id(self) -> Optional[str]:
        """The controller's internal ``_id`` for this site."""
        return self._id

    def get_subsystem(self, subsystem_name: str) -> Optional[Dict[str, Any]]:
        """
        Get health data for a specific subsystem by name.

        Only populated when the site was fetched through ``get_sites_stats``.

        Args:
            subsystem_name: Name of the subsystem to retrieve (``wlan``, ``lan``, ``wan``, ...)

        Returns:
            Subsystem data dictionary if found, None otherwise
        """
        for subsystem_data in self.health or []:
            if isinstance(subsystem_data, dict) and subsystem_data.get('subsystem') == subsystem_name:
                return subsystem_data
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the site back to a dictionary, including unrecognised fields."""
        result = {k: v for k, v in self.__dict__.items()
                  if v is not None and k != '_extra_fields'}
        result.update(self._extra_fields)
        return result
