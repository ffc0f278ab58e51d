"""
Command dispatcher: capability-gated relay of cluster commands to chip-tool.

The device's stored capability map is authoritative: a command missing from
it is refused without touching the network, even if the device might accept
it. Each accepted command is sent exactly once.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from .errors import CommandFailed, UnsupportedCluster, UnsupportedCommand
from .models import Device

logger = logging.getLogger("gateway.dispatcher")


@dataclass(frozen=True)
class CommandResult:
    """A command chip-tool accepted (exit status 0)."""
    device: Device
    cluster: str
    command: str
    output: str = ""

    @property
    def message(self) -> str:
        return f"Command '{self.command}' executed successfully on device '{self.device.name}'"


class CommandDispatcher:
    """Validates (cluster, command) against a device and executes it."""

    def __init__(self, tool):
        self.tool = tool

    @staticmethod
    def validate(device: Device, cluster: str, command: str):
        """
        Raise UnsupportedCluster / UnsupportedCommand, in that order.
        Never mutates ``device``.
        """
        commands = device.capabilities.get(cluster)
        if commands is None:
            raise UnsupportedCluster(cluster, device.name)
        if command not in commands:
            raise UnsupportedCommand(command, cluster, device.name)

    async def execute(self, device: Device, cluster: str, command: str,
                      args: Sequence[str] = ()) -> CommandResult:
        """
        Validate then run ``chip-tool <cluster> <command> [args...] <node> <endpoint>``.

        Raises:
            UnsupportedCluster / UnsupportedCommand: not in the capability map
            ExecutionError: chip-tool could not be started
            CommandFailed: chip-tool exited non-zero
        """
        self.validate(device, cluster, command)

        result = await self.tool.invoke(cluster, command, list(args), device.node_id, device.endpoint_id)
        if not result.ok:
            logger.warning(f"[node {device.node_id}] {cluster} {command} failed (exit {result.returncode})")
            raise CommandFailed("Command execution failed", result.returncode, result.diagnostics)

        logger.info(f"[node {device.node_id}] {cluster} {command} OK")
        return CommandResult(device=device, cluster=cluster, command=command, output=result.stdout)
