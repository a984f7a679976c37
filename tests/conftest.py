"""Pytest configuration and shared fixtures for flashcache-agent tests."""

from __future__ import annotations

from typing import Dict, List, Optional, Set

import pytest

from flashcache_agent.backend import CommandError, HostCommands
from flashcache_agent.models import AgentSettings, NodeInfo, ResourceConfig

DM_MAJOR = 253


class FakeHost(HostCommands):
    """In-memory host: device nodes, device-mapper table and kernel module.

    `pending` holds mutations applied one per sleep() to simulate a kernel
    that takes a while to converge after a command.
    """

    def __init__(self, settings: AgentSettings):
        self.settings = settings
        self.nodes: Dict[str, NodeInfo] = {}
        self.dm_table: List[str] = []
        self.dm_majors: Set[int] = {DM_MAJOR}
        self.module = True
        self.binaries: Set[str] = {settings.dmsetup_bin, settings.flashcache_load_bin}
        self.calls: List[tuple] = []
        self.fail: Set[str] = set()
        self.lag = 0
        self.pending: List = []
        self.flaky_ls = 0

    def add_block(self, path: str, major: int = 8) -> None:
        self.nodes[path] = NodeInfo(is_block=True, major=major)

    def _mapper(self, name: str) -> str:
        return f"{self.settings.mapper_dir}/{name}"

    def _activate(self, name: str) -> None:
        self.nodes[self._mapper(name)] = NodeInfo(is_block=True, major=DM_MAJOR)
        self.dm_table.append(name)

    def _deactivate(self, name: str) -> None:
        self.nodes.pop(self._mapper(name), None)
        self.dm_table.remove(name)

    def _schedule(self, fn, name: str) -> None:
        if self.lag:
            self.pending = [lambda: None] * (self.lag - 1) + [lambda: fn(name)]
        else:
            fn(name)

    def tick(self, _interval: float) -> None:
        self.calls.append(("sleep",))
        if self.pending:
            self.pending.pop(0)()

    def stat_node(self, path: str) -> Optional[NodeInfo]:
        return self.nodes.get(path)

    def device_mapper_majors(self) -> Set[int]:
        return set(self.dm_majors)

    def dm_names(self) -> List[str]:
        if self.flaky_ls:
            self.flaky_ls -= 1
            raise CommandError(["dmsetup", "ls"], 1, "Resource temporarily unavailable")
        return list(self.dm_table)

    def module_loaded(self) -> bool:
        return self.module

    def load_module(self) -> None:
        self.calls.append(("load_module",))
        if "load_module" in self.fail:
            raise CommandError(["modprobe", "flashcache"], 1, "FATAL: Module flashcache not found")
        self.module = True

    def cache_load(self, cache_device: str, name: str) -> None:
        self.calls.append(("cache_load", cache_device, name))
        if "cache_load" in self.fail:
            raise CommandError(["flashcache_load", cache_device, name], 1, "bad superblock")
        self._schedule(self._activate, name)

    def dm_remove(self, name: str) -> None:
        self.calls.append(("dm_remove", name))
        if "dm_remove" in self.fail:
            raise CommandError(["dmsetup", "remove", name], 1, "Device or resource busy")
        self._schedule(self._deactivate, name)

    def has_binary(self, binary: str) -> bool:
        return binary in self.binaries

    def called(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def settings():
    return AgentSettings()


@pytest.fixture
def host(settings):
    fake = FakeHost(settings)
    fake.add_block("/dev/sdb")
    fake.add_block("/dev/sdc")
    return fake


@pytest.fixture
def config():
    return ResourceConfig(name="fc1", device="/dev/sdb", cache_device="/dev/sdc")


@pytest.fixture
def ocf_env(tmp_path):
    """Environment as the cluster manager would pass it."""
    return {
        "OCF_RESKEY_name": "fc1",
        "OCF_RESKEY_device": "/dev/sdb",
        "OCF_RESKEY_cache_device": "/dev/sdc",
        "OCF_RESKEY_CRM_meta_interval": "10000",
        "FLASHCACHE_AGENT_CONFIG": str(tmp_path / "missing.json"),
    }
