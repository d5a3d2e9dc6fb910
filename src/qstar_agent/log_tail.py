"""Extract timestamped entries from the tail of a log file."""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from typing import Any

from qstar_agent.config import LogConfig
from qstar_agent.exceptions import SourceUnavailableError, TimestampParseError
from qstar_agent.models import LogEntry

_LOGGER = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class _ParseFailures:
    """Timestamp parse failures seen while scanning one window."""

    def __init__(self) -> None:
        self.count = 0
        self.first_line: str | None = None

    def record(self, index: int, prefix: str, date_format: str) -> None:
        """Count a failure, logging only the first one of the window."""
        if self.count == 0:
            _LOGGER.warning(
                "Failed to read date from line %d (line: %s, layout: %s)",
                index,
                prefix,
                date_format,
            )
            self.first_line = prefix
        self.count += 1


def _unix_nanos(value: datetime) -> int:
    """Return nanoseconds since epoch, reading naive times as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    delta = value - _EPOCH
    seconds = delta.days * 86400 + delta.seconds
    return seconds * 1_000_000_000 + delta.microseconds * 1000


def read_tail(path: str, window: int) -> tuple[bytes, int]:
    """Read at most ``window`` bytes from the end of a file.

    Args:
        path: File to read.
        window: Maximum number of bytes to return.

    Returns:
        Tuple of (data, start) where start is the file offset of the
        first returned byte.

    Raises:
        SourceUnavailableError: If the file cannot be opened or read.

    """
    try:
        with open(path, "rb") as fp:
            size = os.fstat(fp.fileno()).st_size
            start = max(size - window, 0)
            fp.seek(start)
            data = fp.read(window)
    except OSError as err:
        raise SourceUnavailableError(f"Failed to read {path}: {err}") from err
    return data, start


def parse_log_window(
    data: bytes | str, config: LogConfig, *, truncated: bool = False
) -> list[LogEntry]:
    """Split a window of log text into entries.

    Lines whose prefix is not a timestamp are folded into the entry before
    them. A line carrying the same timestamp as the previous entry is
    dropped as a duplicate.

    Args:
        data: Raw window contents.
        config: Log layout settings.
        truncated: True if the window does not start at the beginning of
            the file, in which case the first (partial) line is skipped.

    Returns:
        Entries in file order.

    Raises:
        TimestampParseError: If no entry was found and at least one line
            had an unreadable timestamp.

    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    lines = data.replace("\r\n", "\n").split("\n")

    prefix_length = config.prefix_length
    failures = _ParseFailures()
    entries: list[dict[str, Any]] = []
    prev_name: str | None = None

    for index, line in enumerate(lines):
        if (truncated and index == 0) or len(line) < prefix_length:
            continue

        datestr = line[:prefix_length]
        try:
            parsed = datetime.strptime(datestr, config.date_format)
        except ValueError:
            if not entries:
                failures.record(index, datestr, config.date_format)
                continue
            continuation = line.strip()
            if continuation:
                entry = entries[-1]
                entry["message"] = (
                    f"{entry['message']}\n{continuation}"
                    if entry["message"]
                    else continuation
                )
            continue

        nanos = _unix_nanos(parsed)
        name = str(nanos)
        if name == prev_name:
            continue  # Duplicate timestamp
        prev_name = name

        entries.append(
            {
                "name": name,
                "timestamp": (nanos // 1_000_000) / 1000,
                "datestr": datestr,
                "message": line[prefix_length:].strip(),
            }
        )

    if not entries and failures.count:
        raise TimestampParseError(
            f"Failed to read date from {failures.count} line(s)",
            failures.first_line,
            failures.count,
        )
    if failures.count > 1:
        _LOGGER.debug("Suppressed %d more date failures", failures.count - 1)

    return [LogEntry(**entry) for entry in entries]


def extract_log(config: LogConfig) -> list[LogEntry]:
    """Read the configured log file tail and parse it."""
    data, start = read_tail(config.file_path, config.window)
    return parse_log_window(data, config, truncated=start != 0)
