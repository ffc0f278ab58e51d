"""Shared pytest fixtures: a scripted chip-tool and a throwaway device store."""

import pytest

from gateway.chip_tool import ToolResult
from gateway.device_store import DeviceStore
from gateway.service import GatewayService
from tests.helpers import FakeChipTool, list_output


@pytest.fixture
def store(tmp_path) -> DeviceStore:
    s = DeviceStore(str(tmp_path / "devices.db"))
    s.init_tables()
    return s


@pytest.fixture
def light_tool() -> FakeChipTool:
    """A device exposing onoff (all), levelcontrol (some) and unknown clusters."""
    return FakeChipTool({
        ("pairing", "onnetwork"): ToolResult(0, "[CTL] Device commissioning completed with success"),
        ("descriptor", "read", "server-list"): ToolResult(0, list_output(29, 6, 8, 64)),
        ("onoff", "read", "accepted-command-list"): ToolResult(0, list_output(0, 1, 2, 64)),
        ("levelcontrol", "read", "accepted-command-list"): ToolResult(0, list_output(0, 4)),
    })


@pytest.fixture
def service(store, light_tool) -> GatewayService:
    return GatewayService(store, light_tool)
