#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Probe module for the flashcache resource agent.
Derives the resource state from the mapped device node and the
device-mapper table. Never changes host state.
"""
import logging

from ..backend import HostCommands
from ..models import AgentSettings, ResourceConfig, ResourceState

logger = logging.getLogger("flashcache-agent")


class ProbeOracle:
    """Answers "is the resource active?" from host-visible state only."""

    def __init__(self, settings: AgentSettings, host: HostCommands):
        self.settings = settings
        self.host = host

    def observe(self, config: ResourceConfig) -> ResourceState:
        """Report RUNNING, STOPPED or CONFLICTING for the configured mapping."""
        path = str(config.mapped_path(self.settings.mapper_dir))
        node = self.host.stat_node(path)
        if node is None:
            return ResourceState.STOPPED
        if not node.is_block:
            logger.warning("%s exists but is not a block device", path)
            return ResourceState.STOPPED
        if node.major not in self.host.device_mapper_majors():
            logger.error("%s exists but is not a device-mapper device (major %s)", path, node.major)
            return ResourceState.CONFLICTING
        if config.name in self.host.dm_names():
            return ResourceState.RUNNING
        return ResourceState.STOPPED
