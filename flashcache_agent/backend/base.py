from __future__ import annotations

from typing import List, Optional, Protocol, Set, runtime_checkable

from ..models import NodeInfo


class CommandError(Exception):
    """An external host command could not run or exited non-zero."""

    def __init__(self, cmd: List[str], returncode: Optional[int] = None, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"{' '.join(cmd)}: {detail}")


@runtime_checkable
class HostCommands(Protocol):
    """Narrow contract for everything the agent asks of the host.
    Semantics:
      - stat_node(): None when nothing exists at path; never raises for absence.
      - device_mapper_majors(): block major numbers registered as device-mapper.
      - dm_names(): names of the active device-mapper mappings.
      - module_loaded()/load_module(): presence marker and loader for the cache engine.
      - cache_load()/dm_remove(): the two state-changing commands.
      - has_binary(): whether an executable is available on PATH.
    Notes:
      - State-changing and listing methods raise CommandError on failure.
    """

    def stat_node(self, path: str) -> Optional[NodeInfo]:
        ...

    def device_mapper_majors(self) -> Set[int]:
        ...

    def dm_names(self) -> List[str]:
        ...

    def module_loaded(self) -> bool:
        ...

    def load_module(self) -> None:
        ...

    def cache_load(self, cache_device: str, name: str) -> None:
        ...

    def dm_remove(self, name: str) -> None:
        ...

    def has_binary(self, binary: str) -> bool:
        ...
