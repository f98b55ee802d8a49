from typing import Any, Optional


class UnifiControllerError(Exception):
    """
    Base exception for UnifiController errors.

    Attributes:
        partial_results: Results collected from the sites processed before the
                         failing one. For calls without a site context this is
                         the bare value (or None), mirroring the successful
                         return shape.
        site: The site token whose request failed, if any.
    """

    def __init__(
        self,
        message: str = "",
        partial_results: Any = None,
        site: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.partial_results = partial_results
        self.site = site


class UnifiAuthenticationError(UnifiControllerError):
    """Raised when authentication with the UniFi Controller fails or no valid session exists."""

    pass


class UnifiAPIError(UnifiControllerError):
    """Raised when the UniFi Controller answers a call with ``meta.rc == "error"``."""

    pass


class UnifiTransportError(UnifiControllerError):
    """
    Raised when the HTTP transport fails or the controller answers an HTTP
    error status without a response envelope.
    """

    def __init__(
        self,
        message: str = "",
        partial_results: Any = None,
        site: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, partial_results=partial_results, site=site)
        self.status_code = status_code


class UnifiValidationError(UnifiControllerError, ValueError):
    """Raised when a caller-supplied parameter is rejected before any network call."""

    pass


class UnifiDataError(UnifiControllerError):
    """Raised when there is an error parsing data from the UniFi Controller."""

    pass
