# Orchestration module for resource lifecycle management
from .lifecycle import LifecycleController
from .probe import ProbeOracle

__all__ = ["LifecycleController", "ProbeOracle"]
