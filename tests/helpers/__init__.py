"""Test helpers: scripted chip-tool and chip-tool output rendering."""

from .fake_chip_tool import FakeChipTool, list_output

__all__ = ["FakeChipTool", "list_output"]
