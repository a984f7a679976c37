#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Validation utilities for the flashcache resource agent.
Every action except meta-data/usage passes through validate() first.
"""
import logging
import re

from ..backend import HostCommands
from ..models import AgentSettings, ConfigError, InstalledError, ResourceConfig

logger = logging.getLogger("flashcache-agent")

_DM_NAME_RE = re.compile(r"^[A-Za-z0-9_.+:-]{1,127}$")


def validate_name(name: str) -> None:
    """Validate a device-mapper name. Raise ConfigError on error."""
    if not _DM_NAME_RE.match(name or "") or name in {".", ".."}:
        raise ConfigError(
            f"Invalid resource name '{name}'. Only A-Z, a-z, 0-9 and '_.+:-' allowed (max 127 characters)"
        )


def validate(config: ResourceConfig, settings: AgentSettings, host: HostCommands, is_probe: bool = False) -> None:
    """Check parameters, binaries and devices; raise ConfigError or InstalledError."""
    if not config.device:
        raise ConfigError("Required parameter 'device' is not set")
    if not config.cache_device:
        raise ConfigError("Required parameter 'cache_device' is not set")
    validate_name(config.name)

    for binary in (settings.dmsetup_bin, settings.flashcache_load_bin):
        if not host.has_binary(binary):
            raise InstalledError(f"Required binary '{binary}' not found")

    # Devices may legitimately be absent while the cluster is still probing.
    if is_probe:
        return
    for label, path in (("device", config.device), ("cache_device", config.cache_device)):
        try:
            node = host.stat_node(path)
        except OSError as e:
            raise InstalledError(f"Cannot stat {label} {path}: {e}") from e
        if node is None:
            raise InstalledError(f"{label} {path} does not exist")
        if not node.is_block:
            raise InstalledError(f"{label} {path} is not a block device")
    logger.debug("Configuration for %s is valid", config.name)
