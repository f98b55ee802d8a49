"""
Utility functions for the UniFi multi-site API package.
"""

import inspect
import dataclasses
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

from .logging import get_logger
from .exceptions import UnifiValidationError

logger = get_logger(__name__)

#: Placeholder substituted with the site name in endpoint path templates.
SITE_PLACEHOLDER = "{site}"

#: Payload keys whose values are MAC addresses (or lists of them).
MAC_FIELDS = frozenset({
    "mac",
    "macs",
    "ap_mac",
    "client_mac",
    "device_mac",
    "switch_mac",
    "mac_filter_list",
})

SiteSelector = Optional[Union[str, Sequence[str]]]

#: Characters that would let a site name escape its path segment.
SITE_FORBIDDEN_CHARS = frozenset("/?#%\\")


def normalize_mac(mac_address: str) -> str:
    """
    Normalize MAC address to lower-case colon-separated format.

    Args:
        mac_address: MAC address string in any format (with or without separators).

    Returns:
        str: MAC address with colons between each pair of characters.
    """
    mac_clean = (
        mac_address.strip().replace(":", "").replace(
            "-", "").replace(".", "").lower()
    )

    return ":".join(mac_clean[i: i + 2] for i in range(0, len(mac_clean), 2))


def normalize_macs(macs: Union[str, Sequence[str]]) -> List[str]:
    """Normalize a single MAC address or a sequence of them into a list."""
    if isinstance(macs, str):
        return [normalize_mac(macs)]
    return [normalize_mac(m) for m in macs]


def lowercase_mac_fields(payload: Any) -> Any:
    """
    Return a copy of a request payload with every MAC-bearing field lower-cased.

    Walks nested dictionaries and lists, so fields such as
    ``{"objects": [{"data": {"mac": ...}}]}`` are covered as well.

    Args:
        payload: JSON-serialisable request payload.

    Returns:
        A new payload; the caller's object is left untouched.
    """
    if isinstance(payload, dict):
        result = {}
        for key, value in payload.items():
            if key in MAC_FIELDS:
                result[key] = _lower(value)
            else:
                result[key] = lowercase_mac_fields(value)
        return result
    if isinstance(payload, list):
        return [lowercase_mac_fields(item) for item in payload]
    return payload


def _lower(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    if isinstance(value, list):
        return [_lower(v) for v in value]
    return value


def trim_id(identifier: str) -> str:
    """
    Prepare an identifier for substitution into an endpoint path.

    Raises:
        UnifiValidationError: If the identifier is empty after trimming.
    """
    trimmed = str(identifier).strip()
    if not trimmed:
        raise UnifiValidationError("Identifier must not be empty")
    return trimmed


def with_optional_id(path: str, identifier: Optional[str]) -> str:
    """Append ``/<identifier>`` to a path template only when an identifier is given."""
    if identifier is None:
        return path
    return f"{path}/{trim_id(identifier)}"


def expand_sites(sites: SiteSelector) -> List[Optional[str]]:
    """
    Expand a site selector into the ordered list of site tokens to request.

    Args:
        sites: ``None`` for controller-wide calls, a single site name, or a
               sequence of site names.

    Returns:
        ``[None]`` for the no-site variant, otherwise the site names in the
        order supplied.

    Raises:
        UnifiValidationError: If a site name is not a non-empty string.
    """
    if sites is None:
        return [None]
    if isinstance(sites, str):
        site_list = [sites]
    else:
        site_list = list(sites)

    for site in site_list:
        if not isinstance(site, str) or not site.strip():
            raise UnifiValidationError(f"Invalid site name: {site!r}")
    return [site.strip() for site in site_list]


def render_path(template: str, site: Optional[str]) -> str:
    """
    Substitute a site token into an endpoint path template.

    Controller-wide templates are returned unchanged whatever the site token.

    Raises:
        UnifiValidationError: If the template is site-scoped but no site was given,
            or the site name is not a single path segment.
    """
    if site is None:
        if SITE_PLACEHOLDER in template:
            raise UnifiValidationError(
                f"Endpoint {template} requires a site name")
        return template
    if SITE_PLACEHOLDER not in template:
        return template
    if SITE_FORBIDDEN_CHARS.intersection(site) or site in (".", ".."):
        raise UnifiValidationError(
            f"Site name must be a single path segment: {site!r}")
    return template.replace(SITE_PLACEHOLDER, site)


def get_api_field_mapping(model_class: Type) -> Dict[str, str]:
    """
    Create a mapping between API field names and model attribute names.

    Examines dataclass fields with metadata to find mappings between
    API field names (like 'user-num_sta') and Python attribute names (like 'user_num_sta').

    Args:
        model_class: The dataclass model to examine for field mappings

    Returns:
        Dictionary mapping UniFi API field names to Python model attribute names
    """
    if not dataclasses.is_dataclass(model_class):
        return {}

    field_mapping = {}

    for field in dataclasses.fields(model_class):
        if "unifi_api_field" in field.metadata:
            field_mapping[field.metadata["unifi_api_field"]] = field.name

    return field_mapping


def map_api_data_to_model(
    data: Dict[str, Any], model_class: Type
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Split an API object into constructor arguments for a model and leftover fields.

    Args:
        data: Input dictionary from API response
        model_class: The dataclass model to map data to

    Returns:
        Tuple containing (model_fields, extra_fields) where:
            - model_fields: Dictionary of fields that map to the model's attributes
            - extra_fields: Dictionary of extra fields that don't directly map to the model
    """
    signature = inspect.signature(model_class.__init__)
    valid_params = set(signature.parameters.keys())
    valid_params.discard("self")
    valid_params.discard("_extra_fields")

    field_map = get_api_field_mapping(model_class)

    model_fields = {}
    extra_fields = {}

    for api_key, value in data.items():
        mapped_key = None

        if api_key in valid_params:
            mapped_key = api_key
        elif api_key in field_map and field_map[api_key] in valid_params:
            mapped_key = field_map[api_key]

        if mapped_key is not None:
            model_fields[mapped_key] = value
        else:
            extra_fields[api_key] = value

    return model_fields, extra_fields
