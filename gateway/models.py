"""Data models and dataclasses."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

# Capability map: cluster name -> ordered chip-tool command names
Capabilities = Dict[str, List[str]]

LIGHT_CLUSTERS = ("levelcontrol", "colorcontrol")


@dataclass(frozen=True)
class Device:
    """A commissioned device. Records are never mutated after insert."""
    id: int
    node_id: int
    endpoint_id: int
    name: str
    device_type: str = "unknown"
    capabilities: Capabilities = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "id": self.id,
            "node_id": self.node_id,
            "endpoint_id": self.endpoint_id,
            "name": self.name,
            "type": self.device_type,
            "capabilities": {cluster: list(cmds) for cluster, cmds in self.capabilities.items()},
        }


def classify_device(capabilities: Capabilities) -> str:
    """Determine device type from discovered clusters."""
    if any(cluster in capabilities for cluster in LIGHT_CLUSTERS):
        return "light"
    if "onoff" in capabilities:
        return "switch"
    return "unknown"
