"""
Dispatch component - command gateway with an explicit handler registry.
"""

from .component import CommandGateway
from .ports import CommandHandlerPort, CommandPort

__all__ = [
    "CommandGateway",
    "CommandHandlerPort",
    "CommandPort",
]
