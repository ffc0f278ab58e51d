"""
Commissioning and capability discovery.

Drives chip-tool through a linear sequence for a newly allocated node:

    1. pairing onnetwork <node_id> <code>
    2. descriptor read server-list <node_id> 1
    3. <cluster> read accepted-command-list <node_id> 1   (per known cluster)
    4. assemble {cluster_name: [command_name, ...]}

Unknown cluster and command IDs are dropped. Any invocation failure aborts
the whole attempt; nothing is persisted here.
"""

import logging
from typing import Dict, List, Tuple

from . import clusters
from .chip_output import parse_ids
from .errors import CommandFailed

logger = logging.getLogger("gateway.discovery")


class DiscoveryOrchestrator:
    """Builds a device's capability map by interrogating it with chip-tool."""

    def __init__(self, tool):
        """
        Args:
            tool: ChipTool (or anything with the same coroutine methods)
        """
        self.tool = tool

    async def commission(self, node_id: int, pairing_code: int) -> Dict[str, List[str]]:
        """Pair the device under ``node_id`` and return its capability map."""
        await self.pair(node_id, pairing_code)
        return await self.discover(node_id)

    async def pair(self, node_id: int, pairing_code: int):
        """
        Step 1. Raises ExecutionError if chip-tool can't start and
        CommandFailed if pairing exits non-zero.
        """
        logger.info(f"[node {node_id}] Pairing on network...")
        result = await self.tool.pair_on_network(node_id, pairing_code)
        if not result.ok:
            raise CommandFailed("Commissioning command failed", result.returncode, result.diagnostics)
        logger.info(f"[node {node_id}] ✅ Paired")

    async def discover(self, node_id: int) -> Dict[str, List[str]]:
        """Steps 2-4: clusters, then accepted commands per known cluster."""
        known = await self._discover_clusters(node_id)

        capabilities: Dict[str, List[str]] = {}
        for cluster_id, name in known:
            capabilities[name] = await self._discover_commands(node_id, cluster_id, name)

        total = sum(len(cmds) for cmds in capabilities.values())
        logger.info(f"[node {node_id}] Discovery complete: {len(capabilities)} clusters, {total} commands")
        return capabilities

    async def _discover_clusters(self, node_id: int) -> List[Tuple[int, str]]:
        """Known (cluster_id, name) pairs from the endpoint 1 server list."""
        result = await self.tool.read_server_list(node_id)
        if not result.ok:
            logger.warning(f"[node {node_id}] server-list read exited {result.returncode}, parsing output anyway")

        known = []
        for raw_id in parse_ids(result.stdout):
            name = clusters.cluster_name(raw_id)
            if name is None:
                logger.debug(f"[node {node_id}] Ignoring unknown cluster {raw_id} (0x{raw_id:04X})")
                continue
            known.append((raw_id, name))
        return known

    async def _discover_commands(self, node_id: int, cluster_id: int, name: str) -> List[str]:
        result = await self.tool.read_accepted_commands(name, node_id)
        if not result.ok:
            logger.warning(f"[node {node_id}] {name} accepted-command-list read exited "
                           f"{result.returncode}, parsing output anyway")

        commands = []
        for raw_id in parse_ids(result.stdout):
            command = clusters.command_name(cluster_id, raw_id)
            if command is None:
                logger.debug(f"[node {node_id}] Ignoring unknown {name} command {raw_id}")
                continue
            commands.append(command)
        return commands
