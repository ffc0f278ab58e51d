"""
Gateway service: ties the device directory to discovery and dispatch.

One instance is shared by all requests. It holds no per-request state and
never holds a lock across a chip-tool invocation.
"""

import logging
from typing import Sequence

from .chip_tool import ChipTool
from .device_store import DeviceStore
from .discovery import DiscoveryOrchestrator
from .dispatcher import CommandDispatcher, CommandResult
from .errors import GatewayError
from .models import Device, classify_device

logger = logging.getLogger("gateway.service")

DEFAULT_ENDPOINT = 1


class GatewayService:

    def __init__(self, store: DeviceStore, tool: ChipTool):
        self.store = store
        self.tool = tool
        self.discovery = DiscoveryOrchestrator(tool)
        self.dispatcher = CommandDispatcher(tool)

    async def send_command(self, node_id: int, endpoint_id: int, cluster: str,
                           command: str, args: Sequence[str] = ()) -> CommandResult:
        """Look up the device and dispatch a validated command to it."""
        device = self.store.get_device(node_id, endpoint_id)
        return await self.dispatcher.execute(device, cluster, command, args)

    async def commission(self, pairing_code: int, name: str) -> Device:
        """
        Commission a device and persist its capability map.

        The node ID reservation is released if any step fails, so a failed
        commission leaves no device record behind.
        """
        node_id = self.store.reserve_node_id()
        logger.info(f"Commissioning '{name}' as node {node_id}")

        try:
            capabilities = await self.discovery.commission(node_id, pairing_code)
            return self.store.add_device(
                node_id=node_id,
                endpoint_id=DEFAULT_ENDPOINT,
                name=name,
                capabilities=capabilities,
                device_type=classify_device(capabilities),
            )
        except BaseException as e:
            logger.error(f"Commissioning node {node_id} failed: {e!r}")
            self._release(node_id)
            raise

    def _release(self, node_id: int):
        try:
            self.store.release_node_id(node_id)
        except GatewayError as e:
            # Leaves a stale reservation; the ID is skipped, never reused
            logger.warning(f"Could not release node id {node_id}: {e}")

    def get_status(self) -> dict:
        """Return status for API/UI."""
        return {
            "chip_tool": self.tool.binary,
            "chip_tool_available": self.tool.is_available,
            "timeout": self.tool.timeout,
            "database": self.store.db_path,
        }
