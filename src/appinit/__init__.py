"""appinit - one-shot application initialization barrier

Runs a fixed list of initializer callbacks once and exposes a single
completion signal that succeeds when every asynchronous initializer has
finished, or fails with the first error.
"""

__version__ = "0.1.0"
__description__ = "appinit"

from .core import ApplicationBootstrap, BarrierState, InitBarrier
from .utils import setup_logging

__all__ = ["ApplicationBootstrap", "BarrierState", "InitBarrier", "setup_logging"]
