"""Collector facade running the QStar filesystem and log checks."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from qstar_agent.config import LogConfig
from qstar_agent.const import (
    AGENT_NAME,
    AGENT_VERSION,
    FILESYSTEM_DETAIL_COMMAND,
    KIND_AGENT,
    KIND_FILESYSTEMS,
    KIND_LOG,
    KIND_REPLICAS,
    MOUNT_LISTING_COMMAND,
)
from qstar_agent.exceptions import SourceUnavailableError
from qstar_agent.filesystem import parse_filesystem, parse_mount_listing
from qstar_agent.log_tail import extract_log
from qstar_agent.models import AgentRecord, CommandOutput, ParsedFilesystem

_LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[..., Awaitable[CommandOutput]]
CheckState = dict[str, list[dict[str, Any]]]


async def run_command(*args: str) -> CommandOutput:
    """Run a command and capture its output.

    Args:
        *args: Program and arguments, executed without a shell.

    Returns:
        Decoded stdout/stderr and the exit status.

    Raises:
        SourceUnavailableError: If the program cannot be started.

    """
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as err:
        raise SourceUnavailableError(
            f"Failed to execute `{' '.join(args)}`: {err}"
        ) from err

    return CommandOutput(
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
        returncode=process.returncode or 0,
    )


class QStarCollector:
    """Runs the periodic QStar checks and returns plain record mappings.

    The scheduler calls :meth:`check_qstar` and :meth:`check_log`
    independently; neither keeps state between calls.

    Example:
        collector = QStarCollector(LogConfig.from_env())
        state = await collector.check_qstar()

    """

    def __init__(
        self,
        config: LogConfig | None = None,
        *,
        runner: CommandRunner = run_command,
    ) -> None:
        """Initialize the collector.

        Args:
            config: Log tail settings (defaults when omitted).
            runner: Coroutine executing external commands.

        """
        self.config = config or LogConfig()
        self._runner = runner

    async def _run(self, *args: str) -> CommandOutput:
        output = await self._runner(*args)
        if not output.ok:
            raise SourceUnavailableError(
                f"Failed to execute `{' '.join(args)}` "
                f"(exit status {output.returncode}): {output.stderr.strip()}"
            )
        return output

    async def get_filesystem_names(self) -> list[str]:
        """Return the mounted QStar filesystems.

        A failing listing command means no QStar filesystem is mounted and
        yields an empty list.
        """
        try:
            output = await self._run(*MOUNT_LISTING_COMMAND)
        except SourceUnavailableError as err:
            _LOGGER.warning("No QStar filesystems found: %s", err)
            return []
        return parse_mount_listing(output.stdout)

    async def get_filesystem(self, name: str) -> ParsedFilesystem:
        """Read and parse the detail dump of one filesystem.

        Raises:
            SourceUnavailableError: If the detail command fails.
            QStarError: If the dump cannot be parsed.

        """
        output = await self._run(FILESYSTEM_DETAIL_COMMAND, name)
        return parse_filesystem(name, output.stdout)

    async def check_qstar(self) -> CheckState:
        """Collect filesystem and replica records for every mount.

        Any failure for a single filesystem aborts the whole check so no
        partial result is reported.
        """
        filesystems: list[dict[str, Any]] = []
        replicas: list[dict[str, Any]] = []

        for name in await self.get_filesystem_names():
            _LOGGER.debug("Reading filesystem %s", name)
            parsed = await self.get_filesystem(name)
            filesystems.append(parsed.filesystem.to_item())
            replicas.extend(replica.to_item() for replica in parsed.replicas)

        agent = AgentRecord(name=AGENT_NAME, version=AGENT_VERSION)
        return {
            KIND_FILESYSTEMS: filesystems,
            KIND_REPLICAS: replicas,
            KIND_AGENT: [agent.to_item()],
        }

    async def check_log(self) -> CheckState:
        """Collect the entries found in the tail of the log file.

        Raises:
            SourceUnavailableError: If the log file cannot be read.
            TimestampParseError: If no line of the window has a timestamp.

        """
        entries = await asyncio.to_thread(extract_log, self.config)
        return {KIND_LOG: [entry.to_item() for entry in entries]}
