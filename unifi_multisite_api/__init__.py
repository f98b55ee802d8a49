"""
Multi-site client for the UniFi Controller management API.

This package provides a Python interface to the UniFi Controller API for both
legacy controllers and UniFi OS consoles. Site-scoped calls accept a single
site name or a list of site names and return one result per site.
"""

from .api_client import UnifiController
from .access_device import AccessDevice
from .events import EventStreamConfig
from .models import UnifiSite, UnifiDevice, SwitchPort, UnifiClient
from .exceptions import (
    UnifiControllerError,
    UnifiAuthenticationError,
    UnifiAPIError,
    UnifiTransportError,
    UnifiValidationError,
    UnifiDataError,
)

__version__ = "0.1.0"

__all__ = [
    "UnifiController",
    "AccessDevice",
    "EventStreamConfig",
    "UnifiSite",
    "UnifiDevice",
    "SwitchPort",
    "UnifiClient",
    "UnifiControllerError",
    "UnifiAuthenticationError",
    "UnifiAPIError",
    "UnifiTransportError",
    "UnifiValidationError",
    "UnifiDataError",
]
