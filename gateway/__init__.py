"""
Matter command gateway.

Validates device commands against capability maps learned at commissioning
time and relays them to chip-tool.
"""

__version__ = "0.1.0"
