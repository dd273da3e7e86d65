"""初始化屏障

收集一组零参数初始化函数，每个只调用一次；任何函数都可以返回 future
表示异步完成。所有异步结果成功后解析同一个完成信号，或者以第一个失败
使完成信号失败。

使用示例:
    barrier = InitBarrier([load_settings, warm_cache, connect_database])
    barrier.run_initializers()
    barrier.wait(timeout=30)  # 或者 await barrier
"""

import asyncio
import inspect
import threading
import time
from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from ..interfaces.initializer import BarrierState, IInitStatus, Initializer
from ...utils.exceptions import InitializationTimeoutError


def _describe(initializer: Initializer) -> str:
    return getattr(initializer, "__qualname__", None) or repr(initializer)


class InitBarrier(IInitStatus):
    """一次性初始化屏障

    - ``run_initializers()`` 按列表顺序同步调用每个初始化函数，只生效一次。
    - 返回值带 ``add_done_callback`` 的（``concurrent.futures.Future``、
      ``asyncio.Future``）视为异步结果；协程会被调度到当前线程正在运行的
      事件循环上；其它返回值视为已完成。
    - ``done_future`` 在所有异步结果成功后成功，或以第一个失败而失败。
    - 初始化函数同步抛出的异常不会被捕获，直接从 ``run_initializers()``
      传播给调用者。

    所有状态修改都在同一把锁内完成，异步结果可以在任意线程上完成。
    """

    def __init__(self, initializers: Optional[Sequence[Initializer]] = None):
        """
        Args:
            initializers: 有序的初始化函数列表，None 视为空列表
        """
        self._initializers: Tuple[Initializer, ...] = tuple(initializers or ())
        self._done_future: "Future[None]" = Future()
        # 完成信号不可被外部取消
        self._done_future.set_running_or_notify_cancel()
        self._lock = threading.RLock()

        self._started = False
        self._done = False
        self._resolved = False
        self._pending = 0
        self._error: Optional[BaseException] = None

        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None

    def run_initializers(self) -> None:
        """运行所有初始化函数

        重复调用（包括在某个初始化函数内部的重入调用）没有任何效果。
        """
        with self._lock:
            if self._started:
                logger.debug("Initializers already started, ignoring run request")
                return
            self._started = True
            self._started_at = time.monotonic()

        logger.info(f"Running {len(self._initializers)} initializer(s)")

        pending: List[Any] = []
        for index, initializer in enumerate(self._initializers):
            try:
                result = initializer()
                deferred = self._as_deferred(result, initializer)
            except Exception:
                logger.exception(
                    f"Initializer #{index} ({_describe(initializer)}) raised synchronously"
                )
                raise

            if deferred is not None:
                logger.debug(
                    f"Initializer #{index} ({_describe(initializer)}) completes asynchronously"
                )
                pending.append(deferred)

        with self._lock:
            self._pending = len(pending)

        if not pending:
            self._resolve(None)
            return

        for deferred in pending:
            deferred.add_done_callback(self._on_settled)

    def add_done_callback(self, callback: Callable[["InitBarrier"], Any]) -> None:
        """注册完成回调，完成信号解析后以屏障本身为参数调用

        已经解析时立即调用。
        """
        self._done_future.add_done_callback(lambda _future: callback(self))

    def wait(self, timeout: Optional[float] = None) -> None:
        """阻塞等待完成信号

        Args:
            timeout: 超时时间（秒），None 表示一直等待

        Raises:
            InitializationTimeoutError: 超时前完成信号尚未解析
            BaseException: 第一个失败的初始化函数抛出的原始异常
        """
        try:
            self._done_future.result(timeout=timeout)
        except FuturesTimeoutError:
            if self._done_future.done():
                raise
            raise InitializationTimeoutError(
                f"Initializers did not finish within {timeout}s",
                timeout=timeout,
                context={"pending": self.pending_count},
            ) from None

    def __await__(self):
        return asyncio.wrap_future(self._done_future).__await__()

    @property
    def done(self) -> bool:
        """所有初始化函数是否已成功完成；失败后永远为 False"""
        return self._done

    @property
    def done_future(self) -> "Future[None]":
        return self._done_future

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def state(self) -> BarrierState:
        with self._lock:
            if not self._started:
                return BarrierState.NOT_STARTED
            if self._done:
                return BarrierState.SUCCEEDED
            if self._error is not None:
                return BarrierState.FAILED
            return BarrierState.RUNNING

    @property
    def error(self) -> Optional[BaseException]:
        """第一个失败，没有失败时为 None"""
        return self._error

    @property
    def pending_count(self) -> int:
        """尚未完成的异步结果数量"""
        with self._lock:
            return self._pending

    @property
    def initializer_count(self) -> int:
        return len(self._initializers)

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            if self._started_at is None:
                elapsed = 0.0
            else:
                end = self._finished_at if self._finished_at is not None else time.monotonic()
                elapsed = end - self._started_at

            return {
                "state": self.state.value,
                "done": self._done,
                "initializers": len(self._initializers),
                "pending": self._pending,
                "error": repr(self._error) if self._error is not None else None,
                "elapsed_seconds": elapsed,
            }

    def _as_deferred(self, result: Any, initializer: Initializer) -> Optional[Any]:
        """把返回值分类为异步结果；同步结果返回 None"""
        if callable(getattr(result, "add_done_callback", None)):
            return result

        if inspect.isawaitable(result):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError(
                    f"Initializer {_describe(initializer)} returned an awaitable "
                    f"but no event loop is running in this thread"
                ) from None
            return asyncio.ensure_future(result, loop=loop)

        return None

    def _on_settled(self, deferred: Any) -> None:
        error = self._extract_error(deferred)

        with self._lock:
            if self._resolved:
                if error is not None:
                    logger.debug(f"Ignoring initializer failure after resolution: {error!r}")
                return

            if error is None:
                self._pending -= 1
                if self._pending > 0:
                    return

        self._resolve(error)

    @staticmethod
    def _extract_error(deferred: Any) -> Optional[BaseException]:
        try:
            return deferred.exception()
        except (CancelledError, asyncio.CancelledError) as e:
            return e

    def _resolve(self, error: Optional[BaseException]) -> None:
        """解析完成信号；只有第一次调用生效"""
        with self._lock:
            if self._resolved:
                return
            self._resolved = True
            self._finished_at = time.monotonic()
            elapsed = self._finished_at - (self._started_at or self._finished_at)

            if error is None:
                self._done = True
            else:
                self._error = error

        # 在锁外解析，完成回调可以重新访问屏障
        if error is None:
            logger.info(f"All initializers completed in {elapsed:.3f}s")
            self._done_future.set_result(None)
        else:
            logger.error(f"Initializer failed after {elapsed:.3f}s: {error!r}")
            self._done_future.set_exception(error)
