"""
Cluster handlers. Importing this package registers every handler.
"""
from .base import HANDLER_REGISTRY, ClusterHandler, register_handler
from . import general, lighting  # noqa: F401

__all__ = ["HANDLER_REGISTRY", "ClusterHandler", "register_handler"]
