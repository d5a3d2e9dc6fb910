"""Parsers for the QStar mount listing and per-filesystem detail dump."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any, NamedTuple

from qstar_agent.const import (
    LABEL_PAGE_SIZE,
    LABEL_REPLICAS,
    MOUNT_LISTING_HEADER,
    REPLICA_STATUS_IN_SYNC,
    REPLICA_STATUS_ONLINE,
    REPLICA_STATUS_READ,
)
from qstar_agent.exceptions import (
    MalformedInputError,
    MissingRequiredError,
    NoMatchError,
    ReplicaIndexError,
)
from qstar_agent.matchers import get_bool, get_bytes, get_int, get_pages, get_string
from qstar_agent.models import FilesystemRecord, ParsedFilesystem, ReplicaRecord

_LOGGER = logging.getLogger(__name__)

RE_SPLIT = re.compile(r"\r?\n")
RE_REPLICA = re.compile(r"^Replica\s(\d+)\s*:(.*)$")


class FieldRule(NamedTuple):
    """Maps a line label to the record field it fills.

    Attributes:
        label: Prefix the trimmed line must start with.
        field: Name of the record field receiving the value.
        matcher: Function reading the value from the line.
        required: If False a value that fails to parse is left out
            instead of aborting the filesystem.
        bytes_field: For page counts, the field receiving the count
            multiplied by the page size.

    """

    label: str
    field: str
    matcher: Callable[[str], Any]
    required: bool = True
    bytes_field: str | None = None


# Order matters: the first rule whose label matches consumes the line.
FILESYSTEM_RULES: tuple[FieldRule, ...] = (
    FieldRule("Cache root:", "cache_root", get_string),
    FieldRule("Mount point:", "mount_point", get_string),
    FieldRule(
        "Max number of pages:",
        "max_number_of_pages",
        get_pages,
        bytes_field="max_number_of_bytes",
    ),
    FieldRule(
        "Low primary capacity:",
        "low_primary_capacity_pages",
        get_pages,
        bytes_field="low_primary_capacity_bytes",
    ),
    FieldRule(
        "High primary capacity:",
        "high_primary_capacity_pages",
        get_pages,
        bytes_field="high_primary_capacity_bytes",
    ),
    FieldRule(
        "Read reserved capacity:",
        "read_reserved_capacity_pages",
        get_pages,
        bytes_field="read_reserved_capacity_bytes",
    ),
    FieldRule("Prefetch priority period:", "prefetch_priority_period", get_bool),
    FieldRule("Prefetching mode:", "prefetching_mode", get_string),
    FieldRule("Cold prefetching:", "cold_prefetching", get_bool),
    FieldRule("Cache write throttling:", "cache_write_throttling", get_bool),
    FieldRule("Automatic keep in cache:", "automatic_keep_in_cache", get_bool),
    FieldRule(
        "Present pages:", "present_pages", get_pages, bytes_field="present_bytes"
    ),
    FieldRule(
        "Primary pages:", "primary_pages", get_pages, bytes_field="primary_bytes"
    ),
    FieldRule(
        "Replicated pages:",
        "replicated_pages",
        get_pages,
        required=False,
        bytes_field="replicated_bytes",
    ),
    FieldRule(
        "Archived pages:",
        "archived_pages",
        get_pages,
        required=False,
        bytes_field="archived_bytes",
    ),
    FieldRule("Keep in cache:", "keep_in_cache", get_int),
    FieldRule(
        "Archived since mount:", "archived_since_mount", get_bytes, required=False
    ),
    FieldRule(
        "Replicated since mount:",
        "replicated_since_mount",
        get_bytes,
        required=False,
    ),
    FieldRule("Files in cache:", "files_in_cache", get_int),
    FieldRule("Directories:", "directories", get_int),
    FieldRule("Streams:", "streams", get_int),
    FieldRule("Number of delayed events:", "number_of_delayed_events", get_int),
    FieldRule("Read/write access:", "read_write_access", get_string),
    FieldRule("Archiving:", "archiving", get_string),
)

# Only consulted once a replica header has been seen.
REPLICA_RULES: tuple[FieldRule, ...] = (
    FieldRule("Migrator:", "migrator", get_string),
    FieldRule("Medium drive type:", "medium_drive_type", get_string),
    FieldRule("Extent size:", "extent_size", get_bytes),
    FieldRule("Write pool count:", "write_pool_count", get_int),
    FieldRule("Last write on:", "last_write_on", get_string),
    FieldRule(
        "Free space on current partition:",
        "free_space_on_current_partition",
        get_bytes,
    ),
    FieldRule("Compression:", "compression", get_bool),
)


def apply_rules(
    rules: tuple[FieldRule, ...],
    line: str,
    target: dict[str, Any],
    page_size: int,
) -> bool:
    """Fill ``target`` from the first rule whose label starts the line.

    Args:
        rules: Rules in priority order.
        line: Trimmed input line.
        target: Field mapping of the record being built.
        page_size: Bytes per page, used for ``bytes_field`` rules.

    Returns:
        True if a rule claimed the line, even when an optional value
        was dropped; False if no label matched.

    Raises:
        MalformedInputError: If a required value fails to parse.

    """
    for rule in rules:
        if not line.startswith(rule.label):
            continue
        try:
            value = rule.matcher(line)
        except NoMatchError as err:
            if rule.required:
                raise MalformedInputError(
                    f"Failed to read {rule.field}", line
                ) from err
            _LOGGER.debug("Skipping optional %s: %s", rule.field, err)
            return True
        target[rule.field] = value
        if rule.bytes_field is not None:
            target[rule.bytes_field] = value * page_size
        return True
    return False


def _read_required(line: str, field: str, matcher: Callable[[str], int]) -> int:
    try:
        return matcher(line)
    except NoMatchError as err:
        raise MalformedInputError(f"Failed to read {field}", line) from err


def _read_header(name: str, lines: list[str]) -> tuple[int, int]:
    """Find page size and replica count anywhere in the dump."""
    page_size: int | None = None
    replicas: int | None = None

    for raw in lines:
        line = raw.strip()
        if line.startswith(LABEL_PAGE_SIZE):
            page_size = _read_required(line, "page_size", get_bytes)
        elif line.startswith(LABEL_REPLICAS):
            replicas = _read_required(line, "replicas", get_int)

    if not page_size:
        raise MissingRequiredError(f"Missing required page size for {name}")
    if replicas is None:
        raise MissingRequiredError(f"Missing required replica count for {name}")
    return page_size, replicas


def _open_replica(
    match: re.Match[str], line: str, replicas: list[dict[str, Any]]
) -> int:
    """Apply a ``Replica <N>: ...`` header and return its index."""
    index = int(match.group(1))
    if index >= len(replicas):
        raise ReplicaIndexError(
            f"Replica {index} out of range ({len(replicas)} declared)", line
        )
    replica = replicas[index]

    tokens = [token.strip() for token in match.group(2).strip().split(", ")]
    key = tokens[0]
    replica["key"] = key
    parts = key.split("-")
    if len(parts) == 3:
        replica["location"], replica["share"], replica["local_integral_volume"] = parts
    elif len(parts) == 2:
        replica["location"], replica["local_integral_volume"] = parts

    replica["online"] = REPLICA_STATUS_ONLINE in tokens
    replica["in_sync"] = REPLICA_STATUS_IN_SYNC in tokens
    replica["read"] = REPLICA_STATUS_READ in tokens
    return index


def parse_filesystem(name: str, text: str) -> ParsedFilesystem:
    """Parse the detail dump of one filesystem.

    The dump is scanned twice: first for page size and replica count,
    which may appear anywhere but are needed to convert pages to bytes and
    to size the replica list, then for every other field.

    Args:
        name: Filesystem identifier from the mount listing.
        text: Raw output of the detail command.

    Returns:
        The filesystem record and one record per declared replica.

    Raises:
        MalformedInputError: If a recognised label carries an unreadable
            value.
        MissingRequiredError: If page size or replica count is missing.
        ReplicaIndexError: If a replica header exceeds the declared count.

    """
    lines = RE_SPLIT.split(text)
    page_size, replica_count = _read_header(name, lines)

    item: dict[str, Any] = {
        "name": name,
        "page_size": page_size,
        "replicas": replica_count,
    }
    replicas = [
        ReplicaRecord.placeholder(name, index).to_item()
        for index in range(replica_count)
    ]
    current: int | None = None

    for raw in lines:
        line = raw.strip()

        if apply_rules(FILESYSTEM_RULES, line, item, page_size):
            continue

        match = RE_REPLICA.match(line)
        if match is not None:
            current = _open_replica(match, line, replicas)
            continue

        if current is None:
            continue  # Remaining labels belong to a replica

        apply_rules(REPLICA_RULES, line, replicas[current], page_size)

    max_pages = item.get("max_number_of_pages")
    present_pages = item.get("present_pages")
    if max_pages is not None and present_pages is not None:
        free_pages = max_pages - present_pages
        if free_pages >= 0:
            item["free_pages"] = free_pages
            item["free_bytes"] = free_pages * page_size

    _LOGGER.debug(
        "Parsed filesystem %s (page size %d, %d replicas)",
        name,
        page_size,
        replica_count,
    )
    return ParsedFilesystem(
        filesystem=FilesystemRecord(**item),
        replicas=[ReplicaRecord(**replica) for replica in replicas],
    )


def parse_mount_listing(text: str) -> list[str]:
    """Return the filesystem names from a ``df`` style mount listing."""
    names = []
    for raw in RE_SPLIT.split(text):
        line = raw.strip()
        if not line or line.startswith(MOUNT_LISTING_HEADER):
            continue
        names.append(line.split()[0])
    return names
