"""Mock 对象库"""
from .initializer_mock import DeferredInitializer, DelayedInitializer, RecordingInitializer

__all__ = [
    'DeferredInitializer',
    'DelayedInitializer',
    'RecordingInitializer',
]
