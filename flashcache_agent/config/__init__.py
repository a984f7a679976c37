"""
Configuration module for the flashcache resource agent.
"""

from .manager import ConfigManager

__all__ = ["ConfigManager"]
