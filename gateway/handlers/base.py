"""
Cluster handler base and registration.

Each supported cluster is declared as a ClusterHandler subclass and
registered against its numeric cluster ID. gateway.clusters freezes the
registrations into the lookup tables used by discovery.
"""
import logging
from typing import Dict, Type

logger = logging.getLogger("handlers.base")

HANDLER_REGISTRY: Dict[int, Type["ClusterHandler"]] = {}


def register_handler(cluster_id: int):
    """Class decorator registering a handler for ``cluster_id``."""
    def decorator(cls):
        if cluster_id in HANDLER_REGISTRY:
            raise ValueError(
                f"Cluster 0x{cluster_id:04X} already handled by {HANDLER_REGISTRY[cluster_id].__name__}"
            )
        cls.CLUSTER_ID = cluster_id
        HANDLER_REGISTRY[cluster_id] = cls
        logger.debug(f"Registered {cls.__name__} for cluster 0x{cluster_id:04X}")
        return cls
    return decorator


class ClusterHandler:
    """
    Static description of one cluster as chip-tool names it.

    NAME is the chip-tool cluster argument, COMMANDS maps command IDs to
    chip-tool command arguments.
    """
    CLUSTER_ID: int = -1
    NAME: str = ""
    COMMANDS: Dict[int, str] = {}
