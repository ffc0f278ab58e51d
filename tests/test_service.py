"""Tests for the commissioning/command workflow over the real store."""

import asyncio

import pytest

from gateway.chip_tool import ToolResult
from gateway.errors import CommandFailed, DeviceNotFound, ExecutionError, UnsupportedCommand
from gateway.service import GatewayService
from tests.helpers import FakeChipTool, list_output


@pytest.mark.asyncio
async def test_commission_persists_discovered_capabilities(service, store, light_tool):
    device = await service.commission(20202021, "Living Room Light")

    assert device.node_id == 1
    assert device.endpoint_id == 1
    assert device.device_type == "light"
    assert device.capabilities == {
        "onoff": ["off", "on", "toggle"],
        "levelcontrol": ["move-to-level", "move-to-level-with-on-off"],
    }
    assert store.get_device(1) == device
    assert light_tool.calls[0] == ["pairing", "onnetwork", "1", "20202021"]


@pytest.mark.asyncio
async def test_node_ids_increment(service):
    first = await service.commission(1111, "One")
    second = await service.commission(2222, "Two")
    assert (first.node_id, second.node_id) == (1, 2)


@pytest.mark.asyncio
async def test_failed_pairing_persists_nothing(store):
    tool = FakeChipTool({("pairing",): ToolResult(1, stderr="Secure pairing failed")})
    service = GatewayService(store, tool)

    with pytest.raises(CommandFailed):
        await service.commission(1234, "Broken")

    assert store.list_devices() == []
    # Reservation released: next commission gets the same id
    assert store.reserve_node_id() == 1


@pytest.mark.asyncio
async def test_failed_discovery_persists_nothing(store):
    tool = FakeChipTool({
        ("descriptor",): ToolResult(0, list_output(6)),
        ("onoff",): ExecutionError("Failed to execute command"),
    })
    service = GatewayService(store, tool)

    with pytest.raises(ExecutionError):
        await service.commission(1234, "Broken")
    assert store.list_devices() == []


@pytest.mark.asyncio
async def test_unexpected_error_releases_reservation(store):
    tool = FakeChipTool({("pairing",): RuntimeError("boom")})
    service = GatewayService(store, tool)

    with pytest.raises(RuntimeError):
        await service.commission(1234, "Broken")

    assert store.list_devices() == []
    assert store.reserve_node_id() == 1


@pytest.mark.asyncio
async def test_concurrent_commissions_get_unique_node_ids(store, light_tool):
    light_tool.delay = 0.01  # interleave the tool calls
    service = GatewayService(store, light_tool)

    devices = await asyncio.gather(*(service.commission(1000 + i, f"Light {i}") for i in range(6)))

    node_ids = [d.node_id for d in devices]
    assert len(set(node_ids)) == 6
    assert sorted(d.node_id for d in store.list_devices()) == sorted(node_ids)


@pytest.mark.asyncio
async def test_send_command(service, light_tool):
    await service.commission(20202021, "Lamp")
    light_tool.calls.clear()

    result = await service.send_command(1, 1, "onoff", "toggle", [])

    assert result.device.name == "Lamp"
    assert light_tool.calls == [["onoff", "toggle", "1", "1"]]


@pytest.mark.asyncio
async def test_send_command_unknown_device(service, light_tool):
    with pytest.raises(DeviceNotFound):
        await service.send_command(99, 1, "onoff", "on", [])
    assert light_tool.calls == []


@pytest.mark.asyncio
async def test_send_command_not_in_capabilities(service, light_tool):
    await service.commission(20202021, "Lamp")
    light_tool.calls.clear()

    with pytest.raises(UnsupportedCommand):
        await service.send_command(1, 1, "levelcontrol", "step", [])
    assert light_tool.calls == []


def test_status(service):
    status = service.get_status()
    assert status["chip_tool"] == "chip-tool"
    assert status["chip_tool_available"] is True
