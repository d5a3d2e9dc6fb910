"""Field matchers turning one line of command output into a typed value.

Every matcher raises :class:`NoMatchError` carrying the offending line when
the line does not end in a value of the expected shape. Callers decide
whether a failed match is fatal for the record or simply leaves the field
out.
"""

from __future__ import annotations

import re

from qstar_agent.exceptions import NoMatchError

_RE_NUMBER = re.compile(r"\d+$")
_RE_PAGES = re.compile(r"(\d+)(\s*pages)?$")
_RE_SIZE = re.compile(r"(.*)(?:\s|:|^)([\d.]+)\s*([TGMK])iB$")
_RE_STRING = re.compile(r":\s*(\S.*)$")

# Binary prefixes
_SIZE_MULTIPLIERS = {
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
}


def get_int(line: str) -> int:
    """Return the run of digits at the end of the line."""
    match = _RE_NUMBER.search(line)
    if match is None:
        raise NoMatchError("No match for int", line)
    return int(match.group(0))


def get_size(line: str) -> tuple[str, int]:
    """Read a trailing size token such as ``12.5 GiB``.

    Args:
        line: Line ending in ``<float><K|M|G|T>iB``.

    Returns:
        Tuple of (remainder, size_bytes) where remainder is the stripped
        text in front of the size token and size_bytes is the size
        truncated to a whole number of bytes.

    Raises:
        NoMatchError: If the line does not end in a size token.

    """
    match = _RE_SIZE.match(line)
    if match is None:
        raise NoMatchError("No match for size", line)
    remainder, number, unit = match.groups()
    try:
        value = float(number)
    except ValueError as err:
        raise NoMatchError(f"Invalid size number {number!r}", line) from err
    return remainder.strip(), int(value * _SIZE_MULTIPLIERS[unit])


def get_bytes(line: str) -> int:
    """Return only the byte count of a trailing size token."""
    _, size_bytes = get_size(line)
    return size_bytes


def get_pages(line: str) -> int:
    """Return a page count, ignoring a trailing size token if present.

    Accepts lines like ``Present pages: 1024 pages 64.00 MiB`` as well as
    ``Present pages: 1024``.
    """
    try:
        line, _ = get_size(line)
    except NoMatchError:
        pass
    match = _RE_PAGES.search(line)
    if match is None:
        raise NoMatchError("No match for pages", line)
    return int(match.group(1))


def get_bool(line: str) -> bool:
    """Return True for lines ending in Yes/On, False for No/Off."""
    if line.endswith(("Yes", "On")):
        return True
    if line.endswith(("No", "Off")):
        return False
    raise NoMatchError("Failed to read boolean Yes/No", line)


def get_string(line: str) -> str:
    """Return the trimmed text following the first colon."""
    match = _RE_STRING.search(line)
    if match is None:
        raise NoMatchError("No match for string", line)
    return match.group(1).strip()
