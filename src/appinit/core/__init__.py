"""核心模块：初始化屏障、启动器与生命周期基类"""

from .base.lifecycle_component import ComponentState, LifecycleComponent
from .interfaces import BarrierState, IInitStatus, Initializer
from .services import ApplicationBootstrap, ConfigKeys, ConfigReader, InitBarrier

__all__ = [
    "ApplicationBootstrap",
    "BarrierState",
    "ComponentState",
    "ConfigKeys",
    "ConfigReader",
    "IInitStatus",
    "InitBarrier",
    "Initializer",
    "LifecycleComponent",
]
