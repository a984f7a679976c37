"""Tests for the start/stop/monitor/reload state machine."""

from __future__ import annotations

import pytest

from flashcache_agent.backend import CommandError
from flashcache_agent.models import ConfigError, GenericError, InstalledError, OcfStatus, ResourceConfig
from flashcache_agent.orchestration import LifecycleController


@pytest.fixture
def controller(settings, host):
    return LifecycleController(settings, host, sleep=host.tick)


class TestStart:
    def test_start_attaches_and_converges(self, controller, host, config):
        assert controller.start(config) is OcfStatus.SUCCESS
        assert ("cache_load", "/dev/sdc", "fc1") in host.calls
        assert "fc1" in host.dm_table

    def test_start_polls_until_table_has_entry(self, controller, host, config):
        host.lag = 3

        assert controller.start(config) is OcfStatus.SUCCESS
        assert host.called("sleep") == 3
        assert "fc1" in host.dm_table

    def test_start_when_running_is_noop(self, controller, host, config):
        host._activate("fc1")

        assert controller.start(config) is OcfStatus.SUCCESS
        assert host.called("cache_load") == 0

    def test_start_loads_module_when_missing(self, controller, host, config):
        host.module = False

        controller.start(config)

        assert host.calls[0] == ("load_module",)
        assert host.module

    def test_start_skips_module_load_when_present(self, controller, host, config):
        controller.start(config)

        assert host.called("load_module") == 0

    def test_module_load_failure_is_installed_error(self, controller, host, config):
        host.module = False
        host.fail.add("load_module")

        with pytest.raises(InstalledError):
            controller.start(config)
        assert host.called("cache_load") == 0

    def test_cache_load_failure_is_generic_error(self, controller, host, config):
        host.fail.add("cache_load")

        with pytest.raises(GenericError):
            controller.start(config)
        assert host.called("sleep") == 0

    def test_start_refuses_foreign_device(self, controller, host, config):
        host.add_block("/dev/mapper/fc1", major=8)

        with pytest.raises(InstalledError):
            controller.start(config)
        assert host.calls == []

    def test_start_keeps_polling_through_failed_listing(self, controller, host, config):
        host.lag = 1
        host.flaky_ls = 1

        assert controller.start(config) is OcfStatus.SUCCESS
        assert host.flaky_ls == 0
        assert host.called("sleep") == 2

    def test_start_requires_devices(self, controller, host):
        with pytest.raises(ConfigError):
            controller.start(ResourceConfig(name="fc1", device="/dev/sdb"))
        assert host.calls == []


class TestStop:
    def test_stop_removes_and_converges(self, controller, host, config):
        host._activate("fc1")
        host.lag = 2

        assert controller.stop(config) is OcfStatus.SUCCESS
        assert ("dm_remove", "fc1") in host.calls
        assert host.called("sleep") == 2
        assert "fc1" not in host.dm_table

    def test_stop_when_stopped_is_noop(self, controller, host, config):
        assert controller.stop(config) is OcfStatus.SUCCESS
        assert host.called("dm_remove") == 0

    def test_stop_refuses_foreign_device(self, controller, host, config):
        host.add_block("/dev/mapper/fc1", major=8)
        host.dm_table.append("fc1")

        with pytest.raises(InstalledError):
            controller.stop(config)
        assert host.called("dm_remove") == 0

    def test_remove_failure_is_generic_error(self, controller, host, config):
        host._activate("fc1")
        host.fail.add("dm_remove")

        with pytest.raises(GenericError):
            controller.stop(config)
        assert "fc1" in host.dm_table


class TestMonitor:
    def test_monitor_not_running(self, controller, config):
        assert controller.monitor(config) is OcfStatus.NOT_RUNNING

    def test_monitor_running(self, controller, host, config):
        host._activate("fc1")

        assert controller.monitor(config) is OcfStatus.SUCCESS
        assert host.calls == []

    def test_monitor_conflicting_is_installed_error(self, controller, host, config):
        host.add_block("/dev/mapper/fc1", major=8)

        with pytest.raises(InstalledError):
            controller.monitor(config)

    def test_monitor_propagates_failed_listing(self, controller, host, config):
        host._activate("fc1")
        host.flaky_ls = 1

        with pytest.raises(CommandError):
            controller.monitor(config)

    def test_monitor_invalid_config_is_not_reported_as_stopped(self, controller):
        with pytest.raises(ConfigError):
            controller.monitor(ResourceConfig(device="/dev/sdb"))

    def test_probe_monitor_without_devices(self, controller, host, config):
        host.nodes.clear()

        assert controller.monitor(config, is_probe=True) is OcfStatus.NOT_RUNNING

    def test_recurring_monitor_without_devices_fails(self, controller, host, config):
        host.nodes.clear()

        with pytest.raises(InstalledError):
            controller.monitor(config)


def test_reload_does_not_tear_down(controller, host, config):
    host._activate("fc1")

    assert controller.reload(config) is OcfStatus.SUCCESS
    assert host.called("dm_remove") == 0
    assert host.called("cache_load") == 0


def test_reload_starts_stopped_resource(controller, host, config):
    assert controller.reload(config) is OcfStatus.SUCCESS
    assert host.called("cache_load") == 1


def test_full_lifecycle(controller, host, config):
    host.lag = 1

    assert controller.monitor(config) is OcfStatus.NOT_RUNNING
    assert controller.start(config) is OcfStatus.SUCCESS
    assert controller.monitor(config) is OcfStatus.SUCCESS
    assert controller.stop(config) is OcfStatus.SUCCESS
    assert controller.monitor(config) is OcfStatus.NOT_RUNNING
    assert [c[0] for c in host.calls] == ["cache_load", "sleep", "dm_remove", "sleep"]
