#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Lifecycle module for the flashcache resource agent.
This module drives start, stop, monitor and reload of the cached mapping.
"""
import logging
import time
from typing import Callable, Optional

from ..backend import CommandError, HostCommands
from ..models import (
    AgentSettings,
    GenericError,
    InstalledError,
    OcfStatus,
    ResourceConfig,
    ResourceState,
)
from ..utils.polling import wait_until
from ..utils.validation import validate
from .probe import ProbeOracle

logger = logging.getLogger("flashcache-agent")


class LifecycleController:
    """State machine for one flashcache mapping."""

    def __init__(
        self,
        settings: AgentSettings,
        host: HostCommands,
        oracle: Optional[ProbeOracle] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.host = host
        self.oracle = oracle or ProbeOracle(settings, host)
        self.sleep = sleep

    def validate(self, config: ResourceConfig, is_probe: bool = False) -> OcfStatus:
        validate(config, self.settings, self.host, is_probe=is_probe)
        return OcfStatus.SUCCESS

    def _observe(self, config: ResourceConfig) -> ResourceState:
        state = self.oracle.observe(config)
        if state is ResourceState.CONFLICTING:
            raise InstalledError(
                f"{config.mapped_path(self.settings.mapper_dir)} is owned by another driver, refusing to touch it"
            )
        return state

    def _converged(self, config: ResourceConfig, target: ResourceState) -> bool:
        try:
            return self._observe(config) is target
        except CommandError as e:
            logger.warning("Cannot observe %s yet, retrying: %s", config.name, e)
            return False

    def _wait_for(self, config: ResourceConfig, target: ResourceState) -> None:
        wait_until(
            lambda: self._converged(config, target),
            self.settings.poll_interval,
            f"{config.name} ({target.value})",
            sleep=self.sleep,
        )

    def start(self, config: ResourceConfig) -> OcfStatus:
        """Bring the mapping up. A no-op when it is already running."""
        self.validate(config)
        if self._observe(config) is ResourceState.RUNNING:
            logger.info("Resource %s is already running", config.name)
            return OcfStatus.SUCCESS

        if not self.host.module_loaded():
            try:
                self.host.load_module()
            except CommandError as e:
                raise InstalledError(f"Failed to load kernel module {self.settings.module_name}: {e}") from e

        try:
            self.host.cache_load(config.cache_device, config.name)
        except CommandError as e:
            raise GenericError(f"Failed to load flashcache {config.name}: {e}") from e

        self._wait_for(config, ResourceState.RUNNING)
        logger.info("Resource %s started", config.name)
        return OcfStatus.SUCCESS

    def stop(self, config: ResourceConfig) -> OcfStatus:
        """Tear the mapping down; the engine flushes dirty blocks on removal."""
        self.validate(config)
        if self._observe(config) is ResourceState.STOPPED:
            logger.info("Resource %s is already stopped", config.name)
            return OcfStatus.SUCCESS

        try:
            self.host.dm_remove(config.name)
        except CommandError as e:
            raise GenericError(f"Failed to remove mapping {config.name}: {e}") from e

        self._wait_for(config, ResourceState.STOPPED)
        logger.info("Resource %s stopped", config.name)
        return OcfStatus.SUCCESS

    def monitor(self, config: ResourceConfig, is_probe: bool = False) -> OcfStatus:
        """Report liveness without touching host state."""
        self.validate(config, is_probe=is_probe)
        if self._observe(config) is ResourceState.RUNNING:
            return OcfStatus.SUCCESS
        return OcfStatus.NOT_RUNNING

    def reload(self, config: ResourceConfig) -> OcfStatus:
        """Re-assert the running state without tearing down first."""
        return self.start(config)
