"""QStar agent - extraction engine for QStar cache filesystems and logs."""

from qstar_agent.collector import QStarCollector, run_command
from qstar_agent.config import LogConfig
from qstar_agent.const import AGENT_VERSION
from qstar_agent.exceptions import (
    ConfigError,
    MalformedInputError,
    MissingRequiredError,
    NoMatchError,
    QStarError,
    ReplicaIndexError,
    SourceUnavailableError,
    TimestampParseError,
)
from qstar_agent.filesystem import parse_filesystem, parse_mount_listing
from qstar_agent.log_tail import extract_log, parse_log_window, read_tail
from qstar_agent.models import (
    AgentRecord,
    CommandOutput,
    FilesystemRecord,
    LogEntry,
    ParsedFilesystem,
    ReplicaRecord,
)

__all__ = [
    "AgentRecord",
    "CommandOutput",
    "ConfigError",
    "FilesystemRecord",
    "LogConfig",
    "LogEntry",
    "MalformedInputError",
    "MissingRequiredError",
    "NoMatchError",
    "ParsedFilesystem",
    "QStarCollector",
    "QStarError",
    "ReplicaIndexError",
    "ReplicaRecord",
    "SourceUnavailableError",
    "TimestampParseError",
    "extract_log",
    "parse_filesystem",
    "parse_log_window",
    "parse_mount_listing",
    "read_tail",
    "run_command",
]

__version__ = AGENT_VERSION
