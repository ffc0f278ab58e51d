"""
FastAPI application factory.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .chip_tool import ChipTool
from .config import GatewayConfig
from .device_store import DeviceStore
from .devices_api import register_device_routes
from .service import GatewayService

logger = logging.getLogger(__name__)


def build_service(config: GatewayConfig) -> GatewayService:
    """Create the store (tables included) and chip-tool runner from config."""
    store = DeviceStore(config.database)
    store.init_tables()

    tool = ChipTool(config.chip_tool, timeout=config.chip_tool_timeout)
    if not tool.is_available:
        logger.warning(f"chip-tool binary '{config.chip_tool}' not found on PATH; commands will fail")

    return GatewayService(store, tool)


def create_app(service: Optional[GatewayService] = None,
               config: Optional[GatewayConfig] = None) -> FastAPI:
    """Build the app around ``service``, or one built from ``config``."""
    if service is None:
        service = build_service(config or GatewayConfig())

    app = FastAPI(title="Matter Command Gateway", version=__version__)
    app.state.service = service
    register_device_routes(app, lambda: app.state.service)
    return app
