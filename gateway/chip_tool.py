"""
chip-tool runner: invokes the CHIP SDK's command-line controller.

chip-tool is a one-shot process: every call spawns it with positional
arguments, waits for it to exit and returns its exit status and captured
output. Scraping that output is left to gateway.chip_output.

Install (Linux):
    snap install chip-tool
or build from connectedhomeip/examples/chip-tool.
"""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Optional

from .errors import ExecutionError

logger = logging.getLogger("gateway.chip_tool")

DEFAULT_BINARY = "chip-tool"
DISCOVERY_ENDPOINT = 1


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a chip-tool process that ran to completion."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostics(self) -> str:
        """Failure text for callers; chip-tool logs most errors to stdout."""
        return (self.stderr.strip() or self.stdout.strip())


class ChipTool:
    """
    Spawns chip-tool once per call.

    No retries. ``timeout`` is None by default, so a hung chip-tool blocks
    the calling request until it exits; set it in config to bound latency.
    """

    def __init__(self, binary: str = DEFAULT_BINARY, timeout: Optional[float] = None):
        self.binary = binary
        self.timeout = timeout

    @property
    def is_available(self) -> bool:
        """Check if the chip-tool binary can be found."""
        return shutil.which(self.binary) is not None

    async def run(self, *args) -> ToolResult:
        """
        Run chip-tool with positional ``args`` and wait for it to exit.

        Raises ExecutionError if the process cannot be started or exceeds
        the configured timeout.
        """
        cmd = [self.binary] + [str(a) for a in args]
        logger.info(f"Running: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            # ValueError: argv rejected before exec (e.g. embedded NUL byte)
            logger.error(f"Failed to start {self.binary}: {e}")
            raise ExecutionError(f"Failed to execute command: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"{self.binary} timed out after {self.timeout}s (PID {process.pid}), killing")
            try:
                process.kill()
            except ProcessLookupError:
                pass  # Already exited
            await process.wait()
            raise ExecutionError(f"Command timed out after {self.timeout}s: {' '.join(cmd)}")

        result = ToolResult(
            returncode=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

        for line in result.stdout.splitlines():
            if line.strip():
                logger.debug(f"[chip-tool] {line}")

        if result.ok:
            logger.debug(f"{' '.join(cmd[1:3])} exited 0")
        else:
            logger.warning(f"{' '.join(cmd)} exited with code {result.returncode}")
        return result

    # =========================================================================
    # FIXED INVOCATION FORMS
    # =========================================================================

    async def pair_on_network(self, node_id: int, pairing_code: int) -> ToolResult:
        return await self.run("pairing", "onnetwork", node_id, pairing_code)

    async def read_server_list(self, node_id: int, endpoint_id: int = DISCOVERY_ENDPOINT) -> ToolResult:
        return await self.run("descriptor", "read", "server-list", node_id, endpoint_id)

    async def read_accepted_commands(self, cluster: str, node_id: int,
                                     endpoint_id: int = DISCOVERY_ENDPOINT) -> ToolResult:
        return await self.run(cluster, "read", "accepted-command-list", node_id, endpoint_id)

    async def invoke(self, cluster: str, command: str, args, node_id: int, endpoint_id: int) -> ToolResult:
        """Cluster command. chip-tool is positional: the order here is fixed."""
        return await self.run(cluster, command, *args, node_id, endpoint_id)
