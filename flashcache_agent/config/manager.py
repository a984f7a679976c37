#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management module for the flashcache resource agent.
This module loads host-side agent settings and the per-invocation resource
parameters handed over by the cluster manager through the environment.
"""
import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..models import AgentSettings, ConfigError, ResourceConfig, DEFAULT_RESOURCE_NAME

logger = logging.getLogger("flashcache-agent")

RESKEY_PREFIX = "OCF_RESKEY_"
DEFAULT_CONFIG_PATH = "/etc/flashcache-agent.json"
PROBE_ACTIONS = {"monitor", "status"}


def _env_value(env: Mapping[str, str], key: str) -> Optional[str]:
    """Return a stripped environment value, treating empty strings as unset."""
    value = env.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


class ConfigManager:
    """Manager for configuration operations."""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        self.env = os.environ if env is None else env

    def load_agent_settings(self) -> AgentSettings:
        """Load agent settings.
        Precedence: env > JSON file (FLASHCACHE_AGENT_CONFIG) > built-in defaults.
        A missing file is fine; a file that is not valid JSON is fatal.
        """
        settings = AgentSettings()
        cfg_path = self.env.get("FLASHCACHE_AGENT_CONFIG", DEFAULT_CONFIG_PATH)
        p = Path(cfg_path)
        if p.exists():
            with p.open("r", encoding="utf-8") as f:
                try:
                    file_cfg = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigError(f"Invalid JSON in FLASHCACHE_AGENT_CONFIG='{cfg_path}': {e}") from e
            if not isinstance(file_cfg, dict):
                raise ConfigError(f"FLASHCACHE_AGENT_CONFIG='{cfg_path}' must contain a JSON object")
            settings = self._apply_overrides(settings, file_cfg)

        env_cfg: Dict[str, Any] = {}
        interval = _env_value(self.env, "FLASHCACHE_AGENT_POLL_INTERVAL")
        if interval is not None:
            env_cfg["poll_interval"] = interval
        level = _env_value(self.env, "FLASHCACHE_AGENT_LOG_LEVEL")
        if level is not None:
            env_cfg["log_level"] = level
        if self.env.get("HA_debug", "0") == "1":
            env_cfg["log_level"] = "DEBUG"
        return self._apply_overrides(settings, env_cfg)

    def _apply_overrides(self, settings: AgentSettings, overrides: Dict[str, Any]) -> AgentSettings:
        known = {f.name for f in dataclasses.fields(AgentSettings)}
        values: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in known:
                logger.warning("Ignoring unknown agent setting: %s", key)
                continue
            values[key] = value
        if "poll_interval" in values:
            try:
                values["poll_interval"] = float(values["poll_interval"])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid poll_interval value: {values['poll_interval']}") from e
            if values["poll_interval"] <= 0:
                raise ConfigError("poll_interval must be positive")
        if "log_level" in values:
            values["log_level"] = str(values["log_level"]).upper()
        return dataclasses.replace(settings, **values)

    def load_resource_config(self) -> ResourceConfig:
        """Build the resource parameters from OCF_RESKEY_* variables."""
        return ResourceConfig(
            name=_env_value(self.env, RESKEY_PREFIX + "name") or DEFAULT_RESOURCE_NAME,
            device=_env_value(self.env, RESKEY_PREFIX + "device"),
            cache_device=_env_value(self.env, RESKEY_PREFIX + "cache_device"),
        )

    def is_probe(self, action: Optional[str]) -> bool:
        """A probe is a one-shot monitor: monitor/status with no recurring interval."""
        if action not in PROBE_ACTIONS:
            return False
        interval = _env_value(self.env, RESKEY_PREFIX + "CRM_meta_interval")
        return interval is None or interval == "0"
