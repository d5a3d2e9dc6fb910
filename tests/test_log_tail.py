"""Tests for the log tail extractor."""

from __future__ import annotations

from datetime import UTC, datetime
import logging
from pathlib import Path

import pytest

from qstar_agent import LogConfig
from qstar_agent.exceptions import SourceUnavailableError, TimestampParseError
from qstar_agent.log_tail import extract_log, parse_log_window, read_tail

BASE_SECONDS = int(datetime(2024, 1, 15, 10, 30, tzinfo=UTC).timestamp())


def _nanos(micros: int) -> str:
    return str(BASE_SECONDS * 1_000_000_000 + micros * 1000)


class TestParseLogWindow:
    """Tests for parse_log_window."""

    def test_entry_fields(self, log_config: LogConfig) -> None:
        """Test name, timestamp, datestr and message of an entry."""
        entries = parse_log_window(
            b"01/15/2024 10:30:00.250000   Cache filesystem mounted  \n",
            log_config,
        )

        assert len(entries) == 1
        entry = entries[0]
        assert entry.name == _nanos(250000)
        assert entry.timestamp == pytest.approx(BASE_SECONDS + 0.25)
        assert entry.datestr == "01/15/2024 10:30:00.250000"
        assert entry.message == "Cache filesystem mounted"

    def test_continuation_lines(self, log_config: LogConfig) -> None:
        """Test lines without timestamp fold into the previous entry."""
        data = "\n".join(
            [
                "01/15/2024 10:30:00.100000 first",
                "01/15/2024 10:30:00.200000 second",
                "01/15/2024 10:30:00.300000 third",
                "    at com.qstar.Module.run(Module.java:42)",
                "    at com.qstar.Main.main(Main.java:7)",
            ]
        )
        entries = parse_log_window(data, log_config)

        assert [entry.name for entry in entries] == [
            _nanos(100000),
            _nanos(200000),
            _nanos(300000),
        ]
        assert entries[0].message == "first"
        assert entries[1].message == "second"
        assert entries[2].message == (
            "third\n"
            "at com.qstar.Module.run(Module.java:42)\n"
            "at com.qstar.Main.main(Main.java:7)"
        )

    def test_duplicate_timestamp(self, log_config: LogConfig) -> None:
        """Test identical consecutive timestamps produce one entry."""
        data = (
            "01/15/2024 10:30:00.100000 original\n"
            "01/15/2024 10:30:00.100000 repeated\n"
        )
        entries = parse_log_window(data, log_config)

        assert len(entries) == 1
        assert entries[0].message == "original"

    def test_duplicate_keeps_continuation_target(self, log_config: LogConfig) -> None:
        """Test lines after a dropped duplicate fold into the kept entry."""
        data = "\n".join(
            [
                "01/15/2024 10:30:00.100000 original",
                "continuation of the original entry",
                "01/15/2024 10:30:00.100000 repeated",
                "continuation after the duplicate line",
            ]
        )
        entries = parse_log_window(data, log_config)

        assert len(entries) == 1
        assert entries[0].message == (
            "original\n"
            "continuation of the original entry\n"
            "continuation after the duplicate line"
        )

    def test_non_adjacent_duplicate_kept(self, log_config: LogConfig) -> None:
        """Test duplicates are only detected against the previous entry."""
        data = "\n".join(
            [
                "01/15/2024 10:30:00.100000 a",
                "01/15/2024 10:30:00.200000 b",
                "01/15/2024 10:30:00.100000 a again",
            ]
        )
        entries = parse_log_window(data, log_config)

        assert [entry.message for entry in entries] == ["a", "b", "a again"]

    def test_truncated_first_line_skipped(self, log_config: LogConfig) -> None:
        """Test the first line of a truncated window is never an entry."""
        data = (
            "01/15/2024 10:30:00.100000 partial\n"
            "01/15/2024 10:30:00.200000 complete\n"
        )
        entries = parse_log_window(data, log_config, truncated=True)

        assert [entry.message for entry in entries] == ["complete"]

    def test_short_lines_skipped(self, log_config: LogConfig) -> None:
        """Test lines shorter than the timestamp are dropped."""
        data = "01/15/2024 10:30:00.100000 first\nshort\n\n"
        entries = parse_log_window(data, log_config)

        assert len(entries) == 1
        assert entries[0].message == "first"

    def test_crlf(self, log_config: LogConfig) -> None:
        """Test CRLF line endings are normalized."""
        data = (
            b"01/15/2024 10:30:00.100000 first\r\n"
            b"01/15/2024 10:30:00.200000 second\r\n"
        )
        entries = parse_log_window(data, log_config)

        assert [entry.message for entry in entries] == ["first", "second"]

    def test_failures_masked_by_entries(self, log_config: LogConfig) -> None:
        """Test leading unparseable lines are dropped once an entry exists."""
        data = "\n".join(
            [
                "garbage line without any timestamp",
                "more garbage line without a timestamp",
                "01/15/2024 10:30:00.100000 first",
            ]
        )
        entries = parse_log_window(data, log_config)

        assert len(entries) == 1
        assert entries[0].message == "first"

    def test_only_failures(self, log_config: LogConfig) -> None:
        """Test a window without any timestamp raises."""
        data = "\n".join(
            [
                "garbage line without any timestamp",
                "more garbage line without a timestamp",
            ]
        )
        with pytest.raises(TimestampParseError) as exc_info:
            parse_log_window(data, log_config)

        assert exc_info.value.failures == 2
        assert exc_info.value.line == "garbage line without any t"

    def test_only_first_failure_logged(
        self, log_config: LogConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test repeated date failures log a single warning."""
        data = "\n".join(
            [
                "garbage line without any timestamp",
                "more garbage line without a timestamp",
                "01/15/2024 10:30:00.100000 first",
            ]
        )
        with caplog.at_level(logging.DEBUG, logger="qstar_agent.log_tail"):
            entries = parse_log_window(data, log_config)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "line 0" in warnings[0].getMessage()
        assert len(entries) == 1

    def test_empty_window(self, log_config: LogConfig) -> None:
        """Test an empty window gives no entries and no error."""
        assert parse_log_window(b"", log_config) == []

    def test_custom_layout(self) -> None:
        """Test a configured date layout."""
        config = LogConfig(date_format="%Y-%m-%d %H:%M:%S")
        entries = parse_log_window("2024-01-15 10:30:00 started\n", config)

        assert entries[0].name == str(BASE_SECONDS * 1_000_000_000)
        assert entries[0].timestamp == float(BASE_SECONDS)
        assert entries[0].message == "started"


class TestReadTail:
    """Tests for read_tail and extract_log."""

    def test_short_file(self, log_file: Path) -> None:
        """Test a file shorter than the window is read whole."""
        log_file.write_bytes(b"hello\n")

        assert read_tail(str(log_file), 8192) == (b"hello\n", 0)

    def test_window(self, log_file: Path) -> None:
        """Test only the last window bytes are returned."""
        log_file.write_bytes(b"0123456789")

        assert read_tail(str(log_file), 4) == (b"6789", 6)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises SourceUnavailableError."""
        with pytest.raises(SourceUnavailableError):
            read_tail(str(tmp_path / "missing"), 8192)

    def test_extract_cut_mid_line(self, log_file: Path) -> None:
        """Test a window starting mid-line yields only complete entries."""
        lines = [
            "01/15/2024 10:30:00.100000 alpha message here",
            "01/15/2024 10:30:00.200000 beta message here",
            "01/15/2024 10:30:00.300000 gamma message here",
        ]
        content = "\n".join(lines) + "\n"
        log_file.write_text(content)
        config = LogConfig(file_path=str(log_file), window=len(content) - 10)

        entries = extract_log(config)

        assert [entry.message for entry in entries] == [
            "beta message here",
            "gamma message here",
        ]

    def test_extract_whole_file(self, log_file: Path) -> None:
        """Test the first line is kept when the window covers the file."""
        log_file.write_text("01/15/2024 10:30:00.100000 alpha\n")
        config = LogConfig(file_path=str(log_file))

        assert [entry.message for entry in extract_log(config)] == ["alpha"]
