"""Shared pytest fixtures for QStar agent tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from qstar_agent import LogConfig

DETAIL_TEXT = """\
Filesystem: qfs1
Cache root: /cache/qfs1
Mount point: /mnt/qfs1
Page size: 64 KiB
Replicas: 2
Max number of pages: 1000 pages 62.50 MiB
Low primary capacity: 800 pages 50.00 MiB
High primary capacity: 900 pages 56.25 MiB
Read reserved capacity: 100 pages 6.25 MiB
Prefetch priority period: On
Prefetching mode: Normal
Cold prefetching: Off
Cache write throttling: Yes
Automatic keep in cache: No
Present pages: 600 pages 37.50 MiB
Primary pages: 400 pages 25.00 MiB
Replicated pages: 150 pages 9.38 MiB
Archived pages: 50 pages 3.12 MiB
Keep in cache: 12
Archived since mount: 1.5 GiB
Replicated since mount: 512 MiB
Files in cache: 3456
Directories: 78
Streams: 4
Number of delayed events: 0
Read/write access: Read/Write
Archiving: Enabled

Replica 0: siteA-shareB-vol1, online, in sync, read
    Migrator: tape-migrator
    Medium drive type: LTO-8
    Extent size: 256 MiB
    Write pool count: 3
    Last write on: 2024-01-15 10:30:00
    Free space on current partition: 1.25 TiB
    Compression: Yes
Replica 1: siteC-vol2, offline
    Migrator: disk-migrator
    Compression: Off
"""

MOUNT_LISTING = """\
Filesystem     1K-blocks      Used Available Use% Mounted on
qfs1          1048576000 524288000 524288000  50% /mnt/qfs1
qfs2          1048576000 104857600 943718400  10% /mnt/qfs2
"""


@pytest.fixture
def detail_text() -> str:
    """Return a complete filesystem detail dump with two replicas."""
    return DETAIL_TEXT


@pytest.fixture
def mount_listing() -> str:
    """Return a mount listing with two QStar filesystems."""
    return MOUNT_LISTING


@pytest.fixture
def log_config() -> LogConfig:
    """Return the default log configuration."""
    return LogConfig()


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Return the path of an empty log file."""
    path = tmp_path / "syslog"
    path.write_text("")
    return path
