"""
gateway/config.py

Loads config.yaml and applies environment overrides. Missing file or
missing keys fall back to defaults.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./config/config.yaml"

# DATABASE_URL may be a plain path or sqlite:path / sqlite://path
SQLITE_URL_PREFIXES = ("sqlite://", "sqlite:")


@dataclass
class GatewayConfig:
    host: str = "127.0.0.1"
    port: int = 3000
    database: str = "gateway.db"
    chip_tool: str = "chip-tool"
    chip_tool_timeout: Optional[float] = None
    log_level: str = "info"


def _database_path(url: str) -> str:
    """Strip sqlite URL prefixes, leaving a filesystem path."""
    for prefix in SQLITE_URL_PREFIXES:
        if url.startswith(prefix):
            return url[len(prefix):].split("?", 1)[0]
    return url


def load_config(config_path: Optional[str] = None) -> GatewayConfig:
    """
    Read config.yaml (path from arg, $GATEWAY_CONFIG, or default) and apply
    DATABASE_URL / CHIP_TOOL_PATH overrides.
    """
    config_path = config_path or os.environ.get("GATEWAY_CONFIG", DEFAULT_CONFIG_PATH)
    raw = {}

    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Config not found at {config_path}, using defaults")

    server = raw.get("server") or {}
    database = raw.get("database") or {}
    chip_tool = raw.get("chip_tool") or {}
    logging_cfg = raw.get("logging") or {}

    config = GatewayConfig()
    config.host = server.get("host", config.host)
    config.port = int(server.get("port", config.port))
    config.database = database.get("path", config.database)
    config.chip_tool = chip_tool.get("binary", config.chip_tool)
    timeout = chip_tool.get("timeout")
    config.chip_tool_timeout = float(timeout) if timeout else None
    config.log_level = str(logging_cfg.get("level", config.log_level)).lower()

    if os.environ.get("DATABASE_URL"):
        config.database = os.environ["DATABASE_URL"]
    if os.environ.get("CHIP_TOOL_PATH"):
        config.chip_tool = os.environ["CHIP_TOOL_PATH"]

    config.database = _database_path(config.database)
    return config
