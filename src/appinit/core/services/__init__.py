"""核心服务"""

from .app_bootstrap import ApplicationBootstrap
from .config import ConfigKeys, ConfigReader
from .init_barrier import InitBarrier

__all__ = [
    "ApplicationBootstrap",
    "ConfigKeys",
    "ConfigReader",
    "InitBarrier",
]
