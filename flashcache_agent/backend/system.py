"""
Host command adapter backed by the real system (dmsetup, modprobe,
flashcache_load, /proc and /dev).
"""

import logging
import os
import shutil
import stat
import subprocess
from pathlib import Path
from typing import List, Optional, Set

from ..models import AgentSettings, NodeInfo
from .base import CommandError, HostCommands

logger = logging.getLogger("flashcache-agent")

_NO_DEVICES = "No devices found"


def _run(cmd: List[str]) -> subprocess.CompletedProcess:
    """Run a command, capturing output, and raise CommandError on failure."""
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        raise CommandError(cmd, stderr=str(e)) from e
    if result.returncode != 0:
        logger.error("%s failed (rc=%d): %s", cmd[0], result.returncode, result.stderr.strip())
        raise CommandError(cmd, result.returncode, result.stderr)
    return result


def parse_dm_names(output: str) -> List[str]:
    """Extract mapping names from `dmsetup ls` output."""
    names = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line == _NO_DEVICES:
            continue
        names.append(line.split()[0])
    return names


def parse_block_majors(text: str, driver: str = "device-mapper") -> Set[int]:
    """Return the block majors registered under `driver` in /proc/devices."""
    majors: Set[int] = set()
    in_block = False
    for line in text.splitlines():
        line = line.strip()
        if line == "Block devices:":
            in_block = True
            continue
        if line.endswith("devices:"):
            in_block = False
            continue
        if not in_block or not line:
            continue
        parts = line.split()
        if len(parts) == 2 and parts[1] == driver:
            try:
                majors.add(int(parts[0]))
            except ValueError:
                logger.warning("Ignoring malformed /proc/devices line: %s", line)
    return majors


class SystemHost(HostCommands):
    def __init__(self, settings: AgentSettings):
        self.settings = settings

    def stat_node(self, path: str) -> Optional[NodeInfo]:
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return None
        if not stat.S_ISBLK(st.st_mode):
            return NodeInfo(is_block=False)
        return NodeInfo(is_block=True, major=os.major(st.st_rdev))

    def device_mapper_majors(self) -> Set[int]:
        try:
            text = Path(self.settings.proc_devices).read_text()
        except OSError as e:
            logger.warning("Cannot read %s: %s", self.settings.proc_devices, e)
            return set()
        return parse_block_majors(text)

    def dm_names(self) -> List[str]:
        result = _run([self.settings.dmsetup_bin, "ls"])
        return parse_dm_names(result.stdout)

    def module_loaded(self) -> bool:
        return Path(self.settings.module_marker).exists()

    def load_module(self) -> None:
        logger.info("Loading kernel module %s", self.settings.module_name)
        _run([self.settings.modprobe_bin, self.settings.module_name])

    def cache_load(self, cache_device: str, name: str) -> None:
        logger.info("Loading flashcache %s from %s", name, cache_device)
        _run([self.settings.flashcache_load_bin, cache_device, name])

    def dm_remove(self, name: str) -> None:
        logger.info("Removing device-mapper mapping %s", name)
        _run([self.settings.dmsetup_bin, "remove", name])

    def has_binary(self, binary: str) -> bool:
        return shutil.which(binary) is not None
