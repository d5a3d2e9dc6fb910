"""Constants for QStar command output, log defaults and record kinds."""

from __future__ import annotations

# =============================================================================
# Commands
# =============================================================================

MOUNT_LISTING_COMMAND = ("df", "-t", "fuse.mcfs")
FILESYSTEM_DETAIL_COMMAND = "mmparam"
MOUNT_LISTING_HEADER = "Filesystem"

# =============================================================================
# Filesystem Detail Labels
# =============================================================================

LABEL_PAGE_SIZE = "Page size:"
LABEL_REPLICAS = "Replicas:"

REPLICA_STATUS_ONLINE = "online"
REPLICA_STATUS_READ = "read"
REPLICA_STATUS_IN_SYNC = "in sync"

# =============================================================================
# Log Defaults
# =============================================================================

DEFAULT_LOG_DATE_FMT = "%m/%d/%Y %H:%M:%S.%f"
DEFAULT_LOG_FILE_PATH = "/opt/QStar/log/syslog"
DEFAULT_LOG_BUF_SIZE = 8192

ENV_LOG_DATE_FMT = "LOG_DATE_FMT"
ENV_LOG_FILE_PATH = "LOG_FILE_PATH"
ENV_LOG_BUF_SIZE = "LOG_BUF_SIZE"

# =============================================================================
# Record Kinds
# =============================================================================

KIND_FILESYSTEMS = "filesystems"
KIND_REPLICAS = "replicas"
KIND_AGENT = "agent"
KIND_LOG = "log"

AGENT_NAME = "qstar"
AGENT_VERSION = "0.1.0"
