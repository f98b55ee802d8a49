"""
Data models for UniFi Controller API responses.

.. warning::
    The dataclasses defined in this module represent commonly observed fields in the
    UniFi Controller's **undocumented** private API responses. The actual data returned
    varies with controller version, device model and firmware, so the models should be
    treated as **suggestions** rather than strict schemas.

    When using API client methods with ``raw=False``:

    *   Missing fields leave the dataclass attribute at its default (usually ``None``).
    *   Unexpected or undocumented fields are kept in the ``_extra_fields`` dictionary
        attribute of each instance.

    For guaranteed access to the exact data returned by the controller, use the default
    ``raw=True``, which returns the unwrapped dictionaries unchanged.
"""

from .device import UnifiDevice, SwitchPort
from .site import UnifiSite
from .client import UnifiClient

__all__ = [
    "UnifiDevice",
    "SwitchPort",
    "UnifiSite",
    "UnifiClient",
]
