"""接口定义"""

from .initializer import BarrierState, IInitStatus, Initializer

__all__ = ["BarrierState", "IInitStatus", "Initializer"]
