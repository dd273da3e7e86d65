"""启动/停止生命周期基类

ApplicationBootstrap 基于此类：启动成功进入 RUNNING，返回 False 或抛出
异常进入 ERROR 并记录 ``last_error``。同步 ``start()`` 和异步
``start_async()`` 共用同一套状态处理。
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from loguru import logger


class ComponentState(Enum):
    STOPPED = "stopped"  # 初始状态
    RUNNING = "running"
    ERROR = "error"


class LifecycleComponent(ABC):
    """带 STOPPED/RUNNING/ERROR 三态的组件

    子类实现 ``_do_start``/``_do_stop``；需要在事件循环中启动的子类再覆盖
    ``_do_start_async``（默认直接调用 ``_do_start``）。
    """

    def __init__(self, component_name: str):
        self._component_name = component_name
        self._state = ComponentState.STOPPED
        self._last_error: Optional[BaseException] = None

    def start(self) -> bool:
        """启动组件；已在运行时直接返回 True"""
        if self._state == ComponentState.RUNNING:
            return True

        logger.debug(f"{self._component_name} starting")
        try:
            success = self._do_start()
        except Exception as e:
            return self._record_start_error(e)
        return self._record_start_result(success)

    async def start_async(self) -> bool:
        """在事件循环中启动组件，状态处理与 ``start()`` 相同"""
        if self._state == ComponentState.RUNNING:
            return True

        logger.debug(f"{self._component_name} starting (async)")
        try:
            success = await self._do_start_async()
        except Exception as e:
            return self._record_start_error(e)
        return self._record_start_result(success)

    def stop(self) -> bool:
        """停止组件；已停止时直接返回 True"""
        if self._state == ComponentState.STOPPED:
            return True

        logger.debug(f"{self._component_name} stopping")
        try:
            success = self._do_stop()
        except Exception as e:
            self._state = ComponentState.ERROR
            self._last_error = e
            logger.opt(exception=e).error(f"{self._component_name} stop raised")
            return False

        if success:
            self._state = ComponentState.STOPPED
            logger.info(f"{self._component_name} stopped")
        else:
            self._state = ComponentState.ERROR
        return success

    @abstractmethod
    def _do_start(self) -> bool:
        pass

    async def _do_start_async(self) -> bool:
        return self._do_start()

    @abstractmethod
    def _do_stop(self) -> bool:
        pass

    def _record_start_result(self, success: bool) -> bool:
        if success:
            self._state = ComponentState.RUNNING
            logger.info(f"{self._component_name} started")
        else:
            self._state = ComponentState.ERROR
            logger.warning(f"{self._component_name} failed to start")
        return success

    def _record_start_error(self, error: BaseException) -> bool:
        self._state = ComponentState.ERROR
        self._last_error = error
        logger.opt(exception=error).error(f"{self._component_name} start raised")
        return False

    @property
    def is_running(self) -> bool:
        return self._state == ComponentState.RUNNING

    @property
    def state(self) -> ComponentState:
        return self._state

    @property
    def component_name(self) -> str:
        return self._component_name

    @property
    def last_error(self) -> Optional[BaseException]:
        """start/stop 最近一次抛出或记录的异常"""
        return self._last_error
