"""
General cluster handlers.
Handles: OnOff (0x0006)
"""
from .base import ClusterHandler, register_handler


@register_handler(0x0006)
class OnOffHandler(ClusterHandler):
    NAME = "onoff"
    COMMANDS = {
        0x00: "off",
        0x01: "on",
        0x02: "toggle",
    }
