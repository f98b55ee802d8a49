import logging
import json
from typing import Any, Dict, Optional

_ROOT_LOGGER = "unifi_multisite_api"

# Payload keys whose values never reach the log output.
_SECRET_KEYS = {"password", "x_password", "x_passphrase"}


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger namespaced under the package logger.

    Args:
        name: Optional specific logger name. If not provided, the package logger is returned.

    Returns:
        A logger instance for the specified name
    """
    if name is None:
        return logging.getLogger(_ROOT_LOGGER)
    elif name.startswith(_ROOT_LOGGER):
        return logging.getLogger(name)
    else:
        return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


def _truncate(text: str, max_length: int) -> str:
    if len(text) > max_length:
        return text[:max_length] + "... [truncated]"
    return text


def redact_payload(payload: Any) -> Any:
    """
    Return a copy of a request payload with secret values masked.

    Args:
        payload: JSON-serialisable request payload.

    Returns:
        The payload with values under password-like keys replaced by ``"***"``.
    """
    if isinstance(payload, dict):
        return {
            k: "***" if k in _SECRET_KEYS else redact_payload(v)
            for k, v in payload.items()
        }
    if isinstance(payload, list):
        return [redact_payload(item) for item in payload]
    return payload


def log_api_request(
    logger: logging.Logger,
    method: str,
    url: str,
    payload: Any = None,
    max_length: int = 300,
):
    """
    Log an outgoing API request at debug level.

    Args:
        logger: Logger to use
        method: HTTP verb.
        url: Fully resolved request URL.
        payload: Optional JSON payload; secrets are redacted before logging.
        max_length: Maximum length of the serialised payload in the log. Default is 300.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if payload is None:
        logger.debug(f"API {method} {url}")
        return
    try:
        payload_str = _truncate(json.dumps(redact_payload(payload)), max_length)
    except (TypeError, ValueError):
        payload_str = f"<unserialisable payload: {type(payload).__name__}>"
    logger.debug(f"API {method} {url} payload={payload_str}")


def log_api_response(
    logger: logging.Logger,
    url: str,
    response_data: Any,
    status_code: int,
    truncate: bool = True,
    max_length: int = 500,
):
    """
    Log API response data using the provided logger.

    Args:
        logger: Logger to use
        url: The API URL that was called.
        response_data: The decoded JSON response body.
        status_code: HTTP status code.
        truncate: Whether to truncate large response values. Default is True.
        max_length: Maximum length for response in the log if truncated. Default is 500.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    try:
        response_str = json.dumps(response_data)
        if truncate:
            response_str = _truncate(response_str, max_length)

        logger.debug(
            f"API Response from {url} (Status: {status_code}):\n{response_str}"
        )
    except (TypeError, ValueError) as e:
        logger.debug(
            f"API Response from {url} (Status: {status_code}) - Error serializing: {e}"
        )


def log_extra_fields(
    logger: logging.Logger,
    obj_name: str,
    obj_id: str,
    extra_fields: Dict[str, Any],
    max_length: int = 300,
):
    """
    Log fields a model did not recognise.

    Args:
        logger: Logger to use
        obj_name: Name of the object type (e.g., 'Device', 'Site').
        obj_id: Identifier for the specific object (e.g., MAC address, site name).
        extra_fields: Dictionary of extra fields.
        max_length: Maximum length for the serialised fields. Default is 300.
    """
    if not extra_fields:
        logger.debug(f"No extra fields for {obj_name} {obj_id}")
        return
    try:
        fields_str = _truncate(json.dumps(sorted(extra_fields)), max_length)
    except (TypeError, ValueError):
        fields_str = f"<{len(extra_fields)} fields>"
    logger.debug(f"Extra fields for {obj_name} {obj_id}: {fields_str}")
