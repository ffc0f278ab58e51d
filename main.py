"""
Matter Command Gateway - HTTP front end for chip-tool.

Usage:
    python main.py [--config ./config/config.yaml] [--host 0.0.0.0] [--port 3000]
"""
import argparse
import logging

import uvicorn

from gateway.app import create_app
from gateway.config import DEFAULT_CONFIG_PATH, load_config

logger = logging.getLogger("main")


def main():
    parser = argparse.ArgumentParser(description="Capability-gated chip-tool command gateway")
    parser.add_argument("--config", default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--host", default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Bind port")
    parser.add_argument("--log-level", default=None, choices=["debug", "info", "warning", "error"])
    args = parser.parse_args()

    config = load_config(args.config)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.log_level:
        config.log_level = args.log_level

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    app = create_app(config=config)
    logger.info(f"Server running on http://{config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level)


if __name__ == "__main__":
    main()
