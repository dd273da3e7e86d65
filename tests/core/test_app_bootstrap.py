"""ApplicationBootstrap Tests

The bootstrap must only reach its ready state after every initializer
succeeded, and must stay out of it after any failure.
"""

import asyncio

import pytest

from appinit.core.base.lifecycle_component import ComponentState
from appinit.core.interfaces import BarrierState
from appinit.core.services.app_bootstrap import ApplicationBootstrap
from appinit.core.services.config import ConfigReader
from appinit.utils.exceptions import (
    BootstrapError,
    ConfigurationError,
    InitializationTimeoutError,
)
from mocks import DeferredInitializer, DelayedInitializer, RecordingInitializer


def _config(timeout=None) -> ConfigReader:
    return ConfigReader.from_dict({"bootstrap": {"init_timeout": timeout}})


class TestBootstrapStart:
    """Test successful bootstrap"""

    def test_start_with_sync_initializers(self, call_log):
        bootstrap = ApplicationBootstrap(
            [RecordingInitializer("a", call_log), RecordingInitializer("b", call_log)]
        )

        assert bootstrap.start() is True
        assert bootstrap.is_ready is True
        assert bootstrap.state == ComponentState.RUNNING
        assert bootstrap.barrier.done is True
        assert call_log == ["a", "b"]

    def test_start_waits_for_deferred_initializers(self):
        delayed = DelayedInitializer(0.01, value="ok")
        bootstrap = ApplicationBootstrap([lambda: 5, delayed], config_reader=_config(5))

        assert bootstrap.start() is True
        assert bootstrap.is_ready is True
        assert delayed.future.done() is True

    def test_start_without_initializers(self):
        bootstrap = ApplicationBootstrap()

        assert bootstrap.start() is True
        assert bootstrap.is_ready is True
        bootstrap.require_ready()

    def test_start_is_idempotent(self, call_log):
        init = RecordingInitializer("a", call_log)
        bootstrap = ApplicationBootstrap([init])

        bootstrap.start()
        bootstrap.start()

        assert init.call_count == 1

    def test_ready_callbacks_called_once(self):
        bootstrap = ApplicationBootstrap([lambda: None])
        events = []
        bootstrap.on_ready(lambda: events.append("first"))
        bootstrap.on_ready(lambda: events.append("second"))

        bootstrap.start()
        bootstrap.stop()
        bootstrap.start()
        bootstrap.on_ready(lambda: events.append("late"))

        assert events == ["first", "second", "late"]

    def test_ready_callback_failure_does_not_block_others(self):
        bootstrap = ApplicationBootstrap([lambda: None])
        events = []

        def broken():
            raise RuntimeError("callback failed")

        bootstrap.on_ready(broken)
        bootstrap.on_ready(lambda: events.append("ok"))

        assert bootstrap.start() is True
        assert events == ["ok"]

    def test_stop_clears_ready_flag(self):
        bootstrap = ApplicationBootstrap([lambda: None])
        bootstrap.start()

        assert bootstrap.stop() is True
        assert bootstrap.is_ready is False
        assert bootstrap.state == ComponentState.STOPPED


class TestBootstrapFailure:
    """Test that failures prevent the ready state"""

    def test_deferred_failure_prevents_ready(self):
        error = RuntimeError("boom")
        bootstrap = ApplicationBootstrap(
            [lambda: 5, DelayedInitializer(0.005, error=error)], config_reader=_config(5)
        )
        ready = []
        bootstrap.on_ready(lambda: ready.append(True))

        assert bootstrap.start() is False
        assert bootstrap.is_ready is False
        assert bootstrap.state == ComponentState.ERROR
        assert bootstrap.last_error is error
        assert ready == []

    def test_sync_throw_prevents_ready(self):
        def explode():
            raise ValueError("sync")

        bootstrap = ApplicationBootstrap([explode])

        assert bootstrap.start() is False
        assert bootstrap.state == ComponentState.ERROR
        assert isinstance(bootstrap.last_error, ValueError)
        assert bootstrap.barrier.state == BarrierState.RUNNING

    def test_failed_bootstrap_does_not_retry(self):
        deferred = DeferredInitializer()
        deferred.fail(RuntimeError("boom"))
        bootstrap = ApplicationBootstrap([deferred])

        assert bootstrap.start() is False
        assert bootstrap.start() is False
        assert deferred.call_count == 1

    def test_timeout_prevents_ready(self):
        bootstrap = ApplicationBootstrap([DeferredInitializer()], config_reader=_config(0.05))

        assert bootstrap.start() is False
        assert isinstance(bootstrap.last_error, InitializationTimeoutError)
        assert bootstrap.is_ready is False

    def test_require_ready_wraps_failure(self):
        error = RuntimeError("boom")
        deferred = DeferredInitializer()
        deferred.fail(error)
        bootstrap = ApplicationBootstrap([deferred])
        bootstrap.start()

        with pytest.raises(BootstrapError) as exc_info:
            bootstrap.require_ready()

        assert exc_info.value.original_exception is error
        assert exc_info.value.context["component_name"] == "ApplicationBootstrap"
        assert exc_info.value.context["original_type"] == "RuntimeError"

    def test_require_ready_before_start(self):
        bootstrap = ApplicationBootstrap([lambda: None])

        with pytest.raises(BootstrapError, match="not ready"):
            bootstrap.require_ready()

    def test_failure_returns_none_when_healthy(self):
        bootstrap = ApplicationBootstrap([lambda: None])
        bootstrap.start()

        assert bootstrap.failure() is None


class TestBootstrapAsync:
    """Test starting from an event loop"""

    def test_start_async_with_coroutines(self, call_log):
        async def load():
            await asyncio.sleep(0.01)
            call_log.append("load")

        bootstrap = ApplicationBootstrap([RecordingInitializer("sync", call_log), load])

        assert asyncio.run(bootstrap.start_async()) is True
        assert bootstrap.is_ready is True
        assert bootstrap.state == ComponentState.RUNNING
        assert call_log == ["sync", "load"]

    def test_start_async_failure(self):
        async def load():
            raise LookupError("missing")

        bootstrap = ApplicationBootstrap([load])

        assert asyncio.run(bootstrap.start_async()) is False
        assert bootstrap.state == ComponentState.ERROR
        assert isinstance(bootstrap.last_error, LookupError)

    def test_start_async_timeout_keeps_signal_pending(self):
        deferred = DeferredInitializer()
        bootstrap = ApplicationBootstrap([deferred], config_reader=_config(0.05))

        assert asyncio.run(bootstrap.start_async()) is False
        assert isinstance(bootstrap.last_error, InitializationTimeoutError)
        assert bootstrap.barrier.done_future.done() is False

        deferred.succeed()
        assert bootstrap.barrier.done is True
        assert bootstrap.is_ready is False

    def test_start_async_sync_throw(self):
        def explode():
            raise ValueError("sync")

        bootstrap = ApplicationBootstrap([explode])

        assert asyncio.run(bootstrap.start_async()) is False
        assert isinstance(bootstrap.last_error, ValueError)


class TestBootstrapStatus:
    """Test status reporting"""

    def test_status_includes_barrier(self):
        bootstrap = ApplicationBootstrap([lambda: None])
        bootstrap.start()

        status = bootstrap.get_status()

        assert status["component_state"] == "running"
        assert status["ready"] is True
        assert status["failure"] is None
        assert status["barrier"]["state"] == "succeeded"

    def test_status_reports_failure_details(self):
        deferred = DeferredInitializer()
        deferred.fail(RuntimeError("boom"))
        bootstrap = ApplicationBootstrap([deferred])
        bootstrap.start()

        failure = bootstrap.get_status()["failure"]

        assert failure["exception_type"] == "BootstrapError"
        assert failure["category"] == "lifecycle"
        assert failure["context"]["original_type"] == "RuntimeError"
        assert "boom" in failure["original_exception"]


class TestBootstrapConfiguration:
    """Invalid settings fail the bootstrap before any initializer runs"""

    @pytest.mark.parametrize("timeout", ["abc", -1])
    def test_invalid_timeout_fails_sync_start(self, timeout, call_log):
        init = RecordingInitializer("a", call_log)
        bootstrap = ApplicationBootstrap([init], config_reader=_config(timeout))

        assert bootstrap.start() is False
        assert bootstrap.state == ComponentState.ERROR
        assert isinstance(bootstrap.last_error, ConfigurationError)
        assert init.call_count == 0
        assert bootstrap.barrier.state == BarrierState.NOT_STARTED

    @pytest.mark.parametrize("timeout", ["abc", -1])
    def test_invalid_timeout_fails_async_start(self, timeout, call_log):
        init = RecordingInitializer("a", call_log)
        bootstrap = ApplicationBootstrap([init], config_reader=_config(timeout))

        assert asyncio.run(bootstrap.start_async()) is False
        assert bootstrap.state == ComponentState.ERROR
        assert isinstance(bootstrap.last_error, ConfigurationError)
        assert init.call_count == 0
        assert bootstrap.barrier.state == BarrierState.NOT_STARTED

    def test_invalid_log_level_fails_start(self):
        bootstrap = ApplicationBootstrap(
            [lambda: None], config_reader=ConfigReader.from_dict({"logging": {"level": "chatty"}})
        )

        assert bootstrap.start() is False
        assert isinstance(bootstrap.failure(), ConfigurationError)
        assert bootstrap.is_ready is False
