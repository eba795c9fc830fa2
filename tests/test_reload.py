"""
Tests for periodic reloading.
"""

import json
import os
import tempfile
import threading
import time
from unittest.mock import Mock

import pytest
from flaky import flaky

from schemaconf.framework.configuration import ConfigField, ReloadTimer, SchemaConfiguration
from schemaconf.framework.configuration.sources import ConfigurationSource
from schemaconf.infrastructure.exceptions import ReadError
from schemaconf.infrastructure.observability.logging import LogEvent, LogLevel

from tests.fixtures.helpers import wait_for


class SlowReloadSource(ConfigurationSource):
    """Serves the reference as is; the first read on the reload thread blocks for a while."""

    def __init__(self, delay: float = 0.3):
        super().__init__()
        self.delay = delay
        self.tick_started = threading.Event()

    async def load(self, reference):
        return self.load_sync(reference)

    def load_sync(self, reference):
        data = dict(reference)
        if threading.current_thread().name == "ConfigReload" and not self.tick_started.is_set():
            self.tick_started.set()
            time.sleep(self.delay)
        return data


def write_json(path, data):
    with open(path, 'w') as f:
        json.dump(data, f)


@pytest.fixture
def json_file():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
        json.dump({'port': 3000, 'host': 'localhost'}, f)
        temp_file = f.name
    yield temp_file
    if os.path.exists(temp_file):
        os.unlink(temp_file)


class TestReloadTimer:
    """Test the background ticker."""

    @flaky(max_runs=3)
    def test_ticks_until_stopped(self):
        ticks = []
        timer = ReloadTimer(20, lambda: ticks.append(time.time()))

        assert timer.start()
        assert timer.is_running
        assert wait_for(lambda: len(ticks) >= 2)

        assert timer.stop()
        assert not timer.is_running
        count = len(ticks)
        time.sleep(0.1)
        assert len(ticks) == count

    def test_start_twice_is_noop(self):
        timer = ReloadTimer(1000, Mock())
        try:
            assert timer.start()
            assert not timer.start()
        finally:
            timer.stop()

    def test_stop_without_start_is_noop(self):
        assert not ReloadTimer(1000, Mock()).stop()

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ReloadTimer(0, Mock())

    @flaky(max_runs=3)
    def test_failing_tick_keeps_timer_alive(self):
        calls = []

        def tick():
            calls.append(1)
            raise RuntimeError("tick failed")

        timer = ReloadTimer(20, tick)
        timer.start()
        try:
            assert wait_for(lambda: len(calls) >= 2)
        finally:
            timer.stop()

    @flaky(max_runs=3)
    def test_stop_from_inside_tick(self):
        stopped = threading.Event()
        timer = None

        def tick():
            timer.stop()
            stopped.set()

        timer = ReloadTimer(20, tick)
        timer.start()

        assert stopped.wait(3)
        assert not timer.is_running


class TestConfigurationReload:
    """Test reload scheduling on SchemaConfiguration."""

    def test_no_interval_no_timer(self, config):
        config.load_sync({'port': 3000, 'host': 'localhost'})
        assert not config.is_reload_running

    @flaky(max_runs=3)
    def test_interval_armed_after_first_load(self, schema):
        """Test a configured interval starts only once something is loaded."""
        with SchemaConfiguration(schema=schema, reload_interval_ms=50) as config:
            assert not config.is_reload_running

            data = {'port': 3000, 'host': 'localhost'}
            config.load_sync(data)
            assert config.is_reload_running

            data['host'] = 'remotehost'
            assert wait_for(lambda: config.get('host') == 'remotehost')

        assert not config.is_reload_running

    @flaky(max_runs=3)
    def test_reload_picks_up_mutated_object(self, config):
        """Test the stored object reference is re-read on each tick."""
        data = {'port': 3000, 'host': 'localhost'}
        config.load_sync(data)
        data['host'] = 'remotehost'

        config.start_reload_interval(50)

        assert wait_for(lambda: config.get('host') == 'remotehost')

    @flaky(max_runs=3)
    def test_reload_from_file_runs_changed_listeners_only(self, config, json_file):
        port_listener = Mock()
        host_listener = Mock()
        config.load_sync(json_file)
        config.add_listener('port', port_listener)
        config.add_listener('host', host_listener)

        write_json(json_file, {'port': 3000, 'host': 'remotehost'})
        config.start_reload_interval(50)

        assert wait_for(lambda: host_listener.call_count >= 1)
        config.stop_reload_interval()

        host_listener.assert_called_once_with('remotehost', 'localhost')
        port_listener.assert_not_called()
        assert config.get('host') == 'remotehost'

    @flaky(max_runs=3)
    def test_stop_prevents_reload(self, config):
        data = {'port': 3000, 'host': 'localhost'}
        config.load_sync(data)
        config.start_reload_interval(50)
        config.stop_reload_interval()

        data['host'] = 'remotehost'
        time.sleep(0.2)

        assert config.get('host') == 'localhost'
        assert not config.is_reload_running

    def test_start_while_running_is_noop(self, config):
        config.load_sync({'port': 3000, 'host': 'localhost'})
        config.start_reload_interval(10000)
        timer = config._reload_timer

        config.start_reload_interval(10)

        assert config._reload_timer is timer
        assert timer.interval_ms == 10000
        config.stop_reload_interval()

    def test_start_without_interval_is_noop(self, config):
        config.start_reload_interval()
        assert not config.is_reload_running

    def test_stop_is_idempotent(self, config):
        config.stop_reload_interval()
        config.stop_reload_interval()
        assert not config.is_reload_running

    @flaky(max_runs=3)
    def test_failed_tick_keeps_last_good_snapshot(self, schema, json_file, log_recorder):
        """Test a bad file during a tick is logged and reported, never raised."""
        errors = []
        config = SchemaConfiguration(schema=schema, logger=log_recorder, on_reload_error=errors.append)
        try:
            config.load_sync(json_file)
            write_json(json_file, {'port': 'invalid', 'host': 'localhost'})
            config.start_reload_interval(50)

            assert wait_for(lambda: len(errors) >= 1)
            config.stop_reload_interval()

            assert config.get('port') == 3000
            assert log_recorder.has_message("Failed to reload configuration", LogLevel.ERROR)
        finally:
            config.close()

    @flaky(max_runs=3)
    def test_missing_file_during_tick(self, config, json_file):
        config.load_sync(json_file)
        os.unlink(json_file)
        errors = []
        config._on_reload_error = errors.append

        config.start_reload_interval(50)
        assert wait_for(lambda: len(errors) >= 1)
        config.stop_reload_interval()

        assert isinstance(errors[0], ReadError)
        assert config.get('host') == 'localhost'

    @flaky(max_runs=3)
    def test_successful_tick_is_logged_as_reload(self, schema, log_recorder):
        config = SchemaConfiguration(schema=schema, logger=log_recorder, reload_interval_ms=50)
        try:
            config.load_sync({'port': 3000, 'host': 'localhost'})
            assert wait_for(lambda: log_recorder.has_message("Reloaded configuration successfully.", LogLevel.INFO))
        finally:
            config.close()

    @flaky(max_runs=3)
    def test_slow_tick_does_not_revert_newer_load(self, log_recorder):
        """Test a tick that read the old reference is discarded once a newer load is applied."""
        source = SlowReloadSource()
        config = SchemaConfiguration(schema={'v': ConfigField(int)}, source=source, logger=log_recorder)
        calls = []
        config.add_listener('v', lambda new, old: calls.append((new, old)))
        try:
            config.load_sync({'v': 1})
            config.start_reload_interval(20)
            assert source.tick_started.wait(3)

            config.load_sync({'v': 2})
            assert config.get('v') == 2
        finally:
            config.close()

        assert calls == [(2, 1)]
        assert config.get('v') == 2
        assert config.source_reference == {'v': 2}
        assert log_recorder.has_message("Discarded configuration superseded by a newer load.")

    def test_stale_reload_result_is_discarded(self, config):
        """Test results are applied in the order their loads started."""
        config.load_sync({'port': 3000, 'host': 'localhost'})
        overlay, reference, stale = config._pre_reload()
        config.load_sync({'port': 4000, 'host': 'localhost'})

        config._post_load(overlay, {'port': 3000, 'host': 'localhost'}, LogEvent.RELOAD, stale)

        assert config.get('port') == 4000
