#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Action dispatch for the flashcache resource agent.
This module maps the action token passed by the cluster manager onto a
lifecycle operation and turns the outcome into an OCF exit status.
"""
import logging
from typing import Callable, Dict, Optional

import typer

from ..backend import make_host_backend
from ..config import ConfigManager
from ..models import ActionResult, AgentError, AgentSettings, OcfStatus, ResourceConfig
from ..orchestration import LifecycleController
from ..utils.logging import setup_logging
from .metadata import METADATA, usage

logger = logging.getLogger("flashcache-agent")

Handler = Callable[[LifecycleController, ResourceConfig, bool], OcfStatus]


def _default_controller(settings: AgentSettings) -> LifecycleController:
    return LifecycleController(settings, make_host_backend(settings))


class ActionDispatcher:
    """Runs exactly one action per invocation."""

    HANDLERS: Dict[str, Handler] = {
        "start": lambda c, cfg, probe: c.start(cfg),
        "stop": lambda c, cfg, probe: c.stop(cfg),
        "monitor": lambda c, cfg, probe: c.monitor(cfg, is_probe=probe),
        "status": lambda c, cfg, probe: c.monitor(cfg, is_probe=probe),
        "reload": lambda c, cfg, probe: c.reload(cfg),
        "validate-all": lambda c, cfg, probe: c.validate(cfg),
    }

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        controller_factory: Callable[[AgentSettings], LifecycleController] = _default_controller,
    ):
        self.config_manager = config_manager or ConfigManager()
        self.controller_factory = controller_factory

    def dispatch(self, action: Optional[str]) -> ActionResult:
        """Execute `action` and return its result. Never raises."""
        if action == "meta-data":
            typer.echo(METADATA, nl=False)
            return ActionResult(OcfStatus.SUCCESS)
        if action in ("usage", "help"):
            typer.echo(usage())
            return ActionResult(OcfStatus.SUCCESS)

        handler = self.HANDLERS.get(action or "")
        if handler is None:
            typer.echo(usage())
            return ActionResult(OcfStatus.ERR_UNIMPLEMENTED, f"Unimplemented action: {action}")

        try:
            settings = self.config_manager.load_agent_settings()
            setup_logging(settings)
            config = self.config_manager.load_resource_config()
            controller = self.controller_factory(settings)
            status = handler(controller, config, self.config_manager.is_probe(action))
        except AgentError as e:
            logger.error("%s failed: %s", action, e)
            return ActionResult(e.status, str(e))
        except Exception as e:
            logger.error("%s failed unexpectedly: %s", action, e)
            return ActionResult(OcfStatus.ERR_GENERIC, str(e))
        return ActionResult(status)
