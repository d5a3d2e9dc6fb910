"""Pydantic models for records extracted from QStar output and logs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QStarBaseModel(BaseModel):
    """Base model for immutable extraction records."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    def to_item(self) -> dict[str, Any]:
        """Return the record as a plain mapping without unset fields."""
        return self.model_dump(exclude_none=True)


# =============================================================================
# Command Output
# =============================================================================


class CommandOutput(QStarBaseModel):
    """Raw result of running an external command."""

    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def ok(self) -> bool:
        """Return True if the command exited successfully."""
        return self.returncode == 0


# =============================================================================
# Filesystem Models
# =============================================================================


class FilesystemRecord(QStarBaseModel):
    """Cache filesystem parameters and occupancy.

    Capacity and occupancy counters come in pairs: the page count as
    printed and the same value converted to bytes using ``page_size``.
    """

    name: str
    page_size: int = Field(gt=0)
    replicas: int = Field(ge=0)
    cache_root: str | None = None
    mount_point: str | None = None

    # Capacity
    max_number_of_pages: int | None = None
    max_number_of_bytes: int | None = None
    low_primary_capacity_pages: int | None = None
    low_primary_capacity_bytes: int | None = None
    high_primary_capacity_pages: int | None = None
    high_primary_capacity_bytes: int | None = None
    read_reserved_capacity_pages: int | None = None
    read_reserved_capacity_bytes: int | None = None

    # Features
    prefetch_priority_period: bool | None = None
    prefetching_mode: str | None = None
    cold_prefetching: bool | None = None
    cache_write_throttling: bool | None = None
    automatic_keep_in_cache: bool | None = None

    # Occupancy
    present_pages: int | None = None
    present_bytes: int | None = None
    primary_pages: int | None = None
    primary_bytes: int | None = None
    replicated_pages: int | None = None
    replicated_bytes: int | None = None
    archived_pages: int | None = None
    archived_bytes: int | None = None
    archived_since_mount: int | None = None  # Bytes
    replicated_since_mount: int | None = None  # Bytes
    free_pages: int | None = None
    free_bytes: int | None = None

    keep_in_cache: int | None = None
    files_in_cache: int | None = None
    directories: int | None = None
    streams: int | None = None
    number_of_delayed_events: int | None = None
    read_write_access: str | None = None
    archiving: str | None = None


class ReplicaRecord(QStarBaseModel):
    """Storage replica of a cache filesystem.

    The key printed in the replica header usually has the shape
    ``location-share-volume`` or ``location-volume``; other shapes leave
    the decomposed fields unset.
    """

    name: str
    replica: str
    filesystem: str
    key: str | None = None
    location: str | None = None
    share: str | None = None
    local_integral_volume: str | None = None
    online: bool | None = None
    in_sync: bool | None = None
    read: bool | None = None
    migrator: str | None = None
    medium_drive_type: str | None = None
    extent_size: int | None = None  # Bytes
    write_pool_count: int | None = None
    last_write_on: str | None = None
    free_space_on_current_partition: int | None = None  # Bytes
    compression: bool | None = None

    @classmethod
    def placeholder(cls, filesystem: str, index: int) -> ReplicaRecord:
        """Create the empty record for a declared replica index."""
        return cls(
            name=f"{filesystem}-replica-{index}",
            replica=f"Replica {index}",
            filesystem=filesystem,
        )


class ParsedFilesystem(QStarBaseModel):
    """One filesystem together with its replicas."""

    filesystem: FilesystemRecord
    replicas: list[ReplicaRecord] = []


class AgentRecord(QStarBaseModel):
    """Collector name and version reported next to the filesystems."""

    name: str
    version: str


# =============================================================================
# Log Models
# =============================================================================


class LogEntry(QStarBaseModel):
    """Single log entry, possibly folded from several physical lines."""

    name: str  # Nanoseconds since epoch as text
    timestamp: float  # Seconds since epoch, millisecond precision
    datestr: str
    message: str
