"""
Common utilities shared across the spec, status and planning modules
"""

# Standard
from datetime import datetime, timedelta
from typing import Any, Optional, Union
import ipaddress
import re

# Third Party
import dateutil.parser

# First Party
import alog

# Local
from . import constants
from .exceptions import assert_valid

log = alog.use_channel("UTILS")

# Sentinel for missing dict values
__MISSING__ = "__MISSING__"

## Dicts #######################################################################


def nested_get(dct: dict, key: str, dflt=None) -> Any:
    """Helper to get values from a dict using 'foo.bar' key notation

    Args:
        dct:  dict
            The dict from which the key will be read
        key:  str
            Key that may contain '.' notation indicating dict nesting

    Returns:
        val:  Any
            Whatever is found at the given key or dflt if the key is not found.
            This includes missing intermediate dicts.
    """
    parts = key.split(constants.NESTED_DICT_DELIM)
    for i, part in enumerate(parts[:-1]):
        dct = dct.get(part, __MISSING__)
        if dct is __MISSING__ or dct is None:
            return dflt
        if not isinstance(dct, dict):
            intermediate = constants.NESTED_DICT_DELIM.join(parts[: i + 1])
            raise TypeError(f"Intermediate key {intermediate} is not a dict")
    return dct.get(parts[-1], dflt)


def prune_none(dct: dict) -> dict:
    """Drop keys whose value is None so that unset optional fields are absent
    from the serialized form
    """
    return {key: val for key, val in dct.items() if val is not None}


## Names #######################################################################

_RESOURCE_NAME_RE = re.compile(r"^[0-9a-z\-\.]+$")
_DNS_LABEL_RE = re.compile(r"^[a-zA-Z0-9_]([a-zA-Z0-9_\-]{0,61}[a-zA-Z0-9_])?$")
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~\-]+@([^@\s]+)$")


def validate_resource_name(name: str):
    """Make sure the given name can be used as the name of a resource in the
    cluster

    Args:
        name:  str
            The candidate resource name

    Raises:
        ValidationError: If the name is empty, too long or holds characters
            other than lowercase alphanumerics, '-' and '.'
    """
    assert_valid(
        isinstance(name, str) and len(name) <= constants.MAX_RESOURCE_NAME_LENGTH,
        f"Name '{name}' is too long. Expected at most "
        f"{constants.MAX_RESOURCE_NAME_LENGTH} characters",
    )
    assert_valid(
        _RESOURCE_NAME_RE.match(name) is not None,
        f"Name '{name}' is not a valid resource name",
    )


def is_dns_name(value: str) -> bool:
    """Check whether the given value is a syntactically valid DNS name"""
    if not value or len(value) > 253:
        return False
    labels = value[:-1].split(".") if value.endswith(".") else value.split(".")
    return all(_DNS_LABEL_RE.match(label) for label in labels)


def is_ip_address(value: str) -> bool:
    """Check whether the given value is an IPv4 or IPv6 literal"""
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_email_address(value: str) -> bool:
    """Check whether the given value looks like an email address"""
    match = _EMAIL_RE.match(value or "")
    return match is not None and is_dns_name(match.group(1))


## Durations ###################################################################

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Union[str, int, float, timedelta]) -> timedelta:
    """Parse a duration in the wire format used by deployment specs (for
    example "2160h" or "1h30m"). Plain numbers are taken as seconds.

    Args:
        value:  Union[str, int, float, timedelta]
            The duration to parse

    Returns:
        duration:  timedelta
            The parsed duration

    Raises:
        ValidationError: If the string is not a valid duration
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    assert_valid(isinstance(value, str) and value, f"Invalid duration '{value}'")
    text = value.strip()
    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta()
    total = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(text):
        assert_valid(match.start() == pos, f"Invalid duration '{value}'")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    assert_valid(pos == len(text) and pos > 0, f"Invalid duration '{value}'")
    return timedelta(seconds=sign * total)


def format_duration(duration: timedelta) -> str:
    """Format a duration in the same wire format accepted by parse_duration"""
    total_seconds = duration.total_seconds()
    sign = "-" if total_seconds < 0 else ""
    total_seconds = abs(total_seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if seconds == int(seconds):
        seconds = int(seconds)
    return f"{sign}{int(hours)}h{int(minutes)}m{seconds}s"


## Timestamps ##################################################################


def parse_timestamp(value: Optional[Union[str, datetime]]) -> Optional[datetime]:
    """Parse an RFC3339 timestamp as found in status documents. Timestamps
    with a zone are converted to naive local time so they compare with
    datetime.now().
    """
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = dateutil.parser.isoparse(value)
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Format a timestamp for a status document"""
    if value is None:
        return None
    return value.isoformat()
