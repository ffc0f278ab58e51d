"""
Lighting cluster handlers.
Handles: LevelControl (0x0008), ColorControl (0x0300)
"""
from .base import ClusterHandler, register_handler


# ============================================================
# LEVEL CONTROL CLUSTER (0x0008)
# ============================================================
@register_handler(0x0008)
class LevelControlHandler(ClusterHandler):
    NAME = "levelcontrol"
    COMMANDS = {
        0x00: "move-to-level",
        0x01: "move",
        0x02: "step",
        0x03: "stop",
        0x04: "move-to-level-with-on-off",
        0x05: "move-with-on-off",
        0x06: "step-with-on-off",
        0x07: "stop-with-on-off",
        0x08: "move-to-closest-frequency",
    }


# ============================================================
# COLOR CONTROL CLUSTER (0x0300)
# ============================================================
@register_handler(0x0300)
class ColorControlHandler(ClusterHandler):
    NAME = "colorcontrol"
    COMMANDS = {
        0x00: "move-to-hue",
        0x01: "move-hue",
        0x02: "step-hue",
        0x03: "move-to-saturation",
        0x04: "move-saturation",
        0x05: "step-saturation",
        0x06: "move-to-hue-and-saturation",
        0x07: "move-to-color",
        0x08: "move-color",
        0x09: "step-color",
        0x0A: "move-to-color-temperature",
        0x40: "enhanced-move-to-hue",
        0x41: "enhanced-move-hue",
        0x42: "enhanced-step-hue",
        0x43: "enhanced-move-to-hue-and-saturation",
        0x44: "color-loop-set",
        0x47: "stop-move-set",
        0x4B: "move-color-temperature",
        0x4C: "step-color-temperature",
    }
