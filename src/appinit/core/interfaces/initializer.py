"""初始化屏障接口定义"""

from abc import ABC, abstractmethod
from concurrent.futures import Future
from enum import Enum
from typing import Any, Callable, Dict, Optional

Initializer = Callable[[], Any]
"""零参数初始化函数；返回普通值或 future（延迟完成）"""


class BarrierState(Enum):
    """初始化屏障状态枚举"""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class IInitStatus(ABC):
    """初始化状态接口

    反映一组初始化函数的运行状态。
    """

    @abstractmethod
    def run_initializers(self) -> None:
        """运行所有初始化函数（只生效一次）"""
        pass

    @property
    @abstractmethod
    def done(self) -> bool:
        """所有初始化函数是否已成功完成"""
        pass

    @property
    @abstractmethod
    def done_future(self) -> "Future[None]":
        """完成信号，只会被解析一次"""
        pass

    @property
    @abstractmethod
    def state(self) -> BarrierState:
        """当前状态"""
        pass

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> None:
        """阻塞等待完成信号

        Args:
            timeout: 超时时间（秒），None 表示一直等待
        """
        pass

    @abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """获取状态快照"""
        pass
