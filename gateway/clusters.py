"""
Capability registry: numeric cluster/command IDs to chip-tool names.

Tables are frozen once at import from the registered cluster handlers.
Lookups never raise; unknown IDs resolve to None.
"""
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .handlers import HANDLER_REGISTRY

CLUSTER_NAMES: Mapping[int, str] = MappingProxyType(
    {cluster_id: handler.NAME for cluster_id, handler in HANDLER_REGISTRY.items()}
)

COMMAND_NAMES: Mapping[Tuple[int, int], str] = MappingProxyType({
    (cluster_id, command_id): name
    for cluster_id, handler in HANDLER_REGISTRY.items()
    for command_id, name in handler.COMMANDS.items()
})


def cluster_name(cluster_id: int) -> Optional[str]:
    """Return the chip-tool name for a cluster ID, or None if unknown."""
    return CLUSTER_NAMES.get(cluster_id)


def command_name(cluster_id: int, command_id: int) -> Optional[str]:
    """Return the chip-tool name for a command of a cluster, or None if unknown."""
    return COMMAND_NAMES.get((cluster_id, command_id))


def known_clusters() -> Dict[str, List[str]]:
    """All registered clusters and their commands, ordered by command ID."""
    return {
        handler.NAME: [handler.COMMANDS[cmd_id] for cmd_id in sorted(handler.COMMANDS)]
        for _, handler in sorted(HANDLER_REGISTRY.items())
    }
