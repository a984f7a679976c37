#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data models for the flashcache resource agent.
This module contains the data classes, status codes and error types used
throughout the application.
"""
import dataclasses
import enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_RESOURCE_NAME = "flashcache"


class OcfStatus(enum.IntEnum):
    """Exit codes understood by the cluster resource manager."""

    SUCCESS = 0
    ERR_GENERIC = 1
    ERR_ARGS = 2
    ERR_UNIMPLEMENTED = 3
    ERR_PERM = 4
    ERR_INSTALLED = 5
    ERR_CONFIGURED = 6
    NOT_RUNNING = 7


class ResourceState(enum.Enum):
    """Observed state of the cached mapping. Computed fresh on every query."""

    RUNNING = "running"
    STOPPED = "stopped"
    CONFLICTING = "conflicting"


class AgentError(Exception):
    """Base error carrying the exit status reported to the cluster manager."""

    status = OcfStatus.ERR_GENERIC


class ConfigError(AgentError):
    """A required parameter is missing or malformed."""

    status = OcfStatus.ERR_CONFIGURED


class InstalledError(AgentError):
    """Missing binaries, devices or kernel support, or a foreign-owned artifact."""

    status = OcfStatus.ERR_INSTALLED


class GenericError(AgentError):
    """An external command that should have succeeded failed."""

    status = OcfStatus.ERR_GENERIC


class ResourceConfig(BaseModel):
    """Per-invocation resource parameters supplied by the cluster manager."""

    model_config = ConfigDict(frozen=True)

    name: str = DEFAULT_RESOURCE_NAME
    device: Optional[str] = None
    cache_device: Optional[str] = None

    def mapped_path(self, mapper_dir: str) -> Path:
        """Path of the device node the device-mapper creates for this resource."""
        return Path(mapper_dir) / self.name


@dataclasses.dataclass(frozen=True)
class NodeInfo:
    """Result of stat'ing a filesystem node."""

    is_block: bool
    major: Optional[int] = None


@dataclasses.dataclass
class AgentSettings:
    """Host-side tunables: binaries, kernel paths and polling."""

    dmsetup_bin: str = "dmsetup"
    flashcache_load_bin: str = "flashcache_load"
    modprobe_bin: str = "modprobe"
    module_name: str = "flashcache"
    module_marker: str = "/proc/flashcache"
    proc_devices: str = "/proc/devices"
    mapper_dir: str = "/dev/mapper"
    poll_interval: float = 1.0
    log_level: str = "INFO"


@dataclasses.dataclass
class ActionResult:
    """Outcome of a single invocation."""

    status: OcfStatus
    message: Optional[str] = None
