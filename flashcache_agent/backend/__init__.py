"""
Host command backends for the flashcache resource agent.
"""
from typing import TYPE_CHECKING

from .base import CommandError, HostCommands
from .system import SystemHost

if TYPE_CHECKING:
    from ..models import AgentSettings


def make_host_backend(settings: "AgentSettings") -> HostCommands:
    """
    Factory function to create the host command backend.
    Args:
        settings: Agent settings naming binaries and kernel paths
    Returns:
        HostCommands instance talking to the local system
    """
    return SystemHost(settings)


__all__ = [
    "CommandError",
    "HostCommands",
    "SystemHost",
    "make_host_backend",
]
