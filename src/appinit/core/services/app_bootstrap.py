"""应用启动器

负责运行初始化屏障并等待其完成；只有所有初始化函数都成功后应用才进入
就绪状态。任何失败（配置非法、异步失败、同步抛出、等待超时）都会让启动器
停留在 ERROR 状态并记录 ``last_error``。
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence

from loguru import logger

from ..base.lifecycle_component import LifecycleComponent
from ..interfaces.initializer import Initializer
from ...utils.exceptions import (
    AppInitError,
    BootstrapError,
    InitializationTimeoutError,
    wrap_exception,
)
from .config import ConfigKeys, ConfigReader
from .init_barrier import InitBarrier


class ApplicationBootstrap(LifecycleComponent):
    """应用启动器

    ``start()`` 阻塞当前线程直到初始化完成；``start_async()`` 在事件循环中
    等待。返回协程的初始化函数会被调度到调用线程正在运行的事件循环上，
    因此在运行事件循环的线程里必须使用 ``start_async()``：同步 ``start()``
    会阻塞这个循环，协程永远无法完成，未配置超时时会一直等待。

    Example:
        >>> bootstrap = ApplicationBootstrap([load_settings, connect_db])
        >>> bootstrap.on_ready(lambda: print("ready"))
        >>> if not bootstrap.start():
        ...     raise bootstrap.failure()
    """

    def __init__(
        self,
        initializers: Optional[Sequence[Initializer]] = None,
        config_reader: Optional[ConfigReader] = None,
        component_name: str = "ApplicationBootstrap",
    ):
        """
        Args:
            initializers: 有序的初始化函数列表
            config_reader: 配置读取器，None 时使用默认配置
            component_name: 组件名称
        """
        super().__init__(component_name)
        self._config = config_reader or ConfigReader()
        self._barrier = InitBarrier(initializers)
        self._ready = False
        self._ready_callbacks: List[Callable[[], Any]] = []
        self._ready_notified = False

    @property
    def barrier(self) -> InitBarrier:
        return self._barrier

    @property
    def is_ready(self) -> bool:
        """所有初始化函数成功完成且启动器正在运行"""
        return self._ready

    def on_ready(self, callback: Callable[[], Any]) -> None:
        """注册就绪回调；已经就绪时立即调用"""
        self._ready_callbacks.append(callback)
        if self._ready_notified:
            self._call_ready_callback(callback)

    def _do_start(self) -> bool:
        if self._last_error is not None:
            # 失败的初始化不会重试
            return False

        # 配置错误和同步抛出的异常向上传播，由基类记录并进入 ERROR
        timeout = self._resolve_timeout()
        self._barrier.run_initializers()

        try:
            self._barrier.wait(timeout)
        except (Exception, asyncio.CancelledError) as e:
            return self._fail(e)

        self._mark_ready()
        return True

    async def _do_start_async(self) -> bool:
        if self._last_error is not None:
            return False

        timeout = self._resolve_timeout()
        self._barrier.run_initializers()

        done_future = self._barrier.done_future
        # shield 防止超时取消传播到完成信号本身
        waiter = asyncio.shield(asyncio.wrap_future(done_future))
        try:
            await asyncio.wait_for(waiter, timeout)
        except (Exception, asyncio.CancelledError) as e:
            if done_future.done():
                return self._fail(done_future.exception())
            if not isinstance(e, asyncio.TimeoutError):
                # 调用方取消了等待
                raise
            return self._fail(
                InitializationTimeoutError(
                    f"Initializers did not finish within {timeout}s",
                    timeout=timeout,
                    context={"pending": self._barrier.pending_count},
                )
            )

        self._mark_ready()
        return True

    def _do_stop(self) -> bool:
        # 初始化屏障不能重新运行，停止只影响就绪标志
        self._ready = False
        return True

    def failure(self) -> Optional[AppInitError]:
        """把启动失败包装为 BootstrapError；没有失败时返回 None"""
        if self.last_error is None:
            return None
        return wrap_exception(
            self.last_error,
            message=f"{self.component_name} failed to initialize: {self.last_error!r}",
            exception_type=BootstrapError,
            component_name=self.component_name,
        )

    def require_ready(self) -> None:
        """确认已就绪

        Raises:
            BootstrapError: 尚未就绪或初始化失败
        """
        if self._ready:
            return
        error = self.failure()
        if error is not None:
            raise error
        raise BootstrapError(
            f"{self.component_name} is not ready (state={self.state.value})",
            component_name=self.component_name,
        )

    def get_status(self) -> Dict[str, Any]:
        failure = self.failure()
        return {
            "component": self.component_name,
            "component_state": self.state.value,
            "ready": self._ready,
            "failure": failure.to_dict() if failure is not None else None,
            "barrier": self._barrier.get_status(),
        }

    def _resolve_timeout(self) -> Optional[float]:
        """校验配置并读取等待超时，必须在运行初始化函数之前调用

        Raises:
            ConfigurationError: 配置非法
        """
        self._config.validate()
        timeout = self._config.get_setting(ConfigKeys.BOOTSTRAP_INIT_TIMEOUT)
        if not timeout:
            return None
        return float(timeout)

    def _fail(self, error: BaseException) -> bool:
        self._last_error = error
        self._ready = False
        logger.error(f"{self.component_name} initialization failed: {error!r}")
        return False

    def _mark_ready(self) -> None:
        self._ready = True
        if self._ready_notified:
            return
        self._ready_notified = True
        for callback in list(self._ready_callbacks):
            self._call_ready_callback(callback)

    def _call_ready_callback(self, callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception as e:
            logger.opt(exception=e).error(f"{self.component_name} ready callback failed")
