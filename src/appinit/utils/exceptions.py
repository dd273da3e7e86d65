"""appinit 异常

初始化函数自身的异常原样通过完成信号传播，不会被包装；这里的异常只用于
启动器、等待超时和配置错误。每个异常携带类别、严重程度和上下文，
``to_dict()`` 供状态快照使用。
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    INITIALIZATION = "initialization"
    CONFIGURATION = "configuration"
    LIFECYCLE = "lifecycle"
    SYSTEM = "system"


class AppInitError(Exception):
    """启动过程中的结构化错误

    ``error_code`` 默认由类名和时间戳生成；``context`` 总是包含
    ``component`` 键。
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[Dict[str, Any]] = None,
        recovery_suggestions: Optional[List[str]] = None,
        original_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)

        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        self.original_exception = original_exception
        self.timestamp = time.time()
        self.error_code = error_code or f"{type(self).__name__.upper()}_{int(self.timestamp)}"

        self.context.setdefault("component", type(self).__name__)

    def to_dict(self) -> Dict[str, Any]:
        """状态快照和日志使用的字典形式"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context,
            "recovery_suggestions": self.recovery_suggestions,
            "exception_type": type(self).__name__,
            "original_exception": repr(self.original_exception)
            if self.original_exception is not None
            else None,
        }


# =============================================================================
# Initialization Exceptions
# =============================================================================


class InitializationTimeoutError(AppInitError):
    """等待初始化完成超时"""

    def __init__(self, message: str, timeout: Optional[float] = None, **kwargs):
        context = kwargs.pop("context", {})
        context["timeout"] = timeout

        super().__init__(
            message=message,
            category=ErrorCategory.INITIALIZATION,
            severity=kwargs.pop("severity", ErrorSeverity.HIGH),
            context=context,
            recovery_suggestions=kwargs.pop(
                "recovery_suggestions",
                [
                    "Increase bootstrap.init_timeout in the configuration",
                    "Check which initializer is still pending",
                ],
            ),
            **kwargs,
        )


class BootstrapError(AppInitError):
    """应用启动未能进入就绪状态"""

    def __init__(self, message: str, component_name: str = "unknown", **kwargs):
        context = kwargs.pop("context", {})
        context["component_name"] = component_name

        super().__init__(
            message=message,
            category=ErrorCategory.LIFECYCLE,
            severity=kwargs.pop("severity", ErrorSeverity.CRITICAL),
            context=context,
            recovery_suggestions=kwargs.pop("recovery_suggestions", []),
            **kwargs,
        )


class ConfigurationError(AppInitError):
    """配置相关异常"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=kwargs.pop("severity", ErrorSeverity.MEDIUM),
            recovery_suggestions=kwargs.pop(
                "recovery_suggestions",
                [
                    "Check the configuration file for invalid values",
                    "Delete the configuration file to restore defaults",
                ],
            ),
            **kwargs,
        )


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(
    original_exception: BaseException,
    message: Optional[str] = None,
    exception_type: Optional[type] = None,
    **kwargs: Any,
) -> AppInitError:
    """Wrap a standard exception in the AppInitError hierarchy

    Args:
        original_exception: Original exception to wrap
        message: Optional custom message
        exception_type: Exception type to use for wrapping
        **kwargs: Extra keyword arguments for the exception type

    Returns:
        Wrapped exception
    """
    if isinstance(original_exception, AppInitError):
        return original_exception

    if exception_type is None:
        exception_type = AppInitError

    if message is None:
        message = str(original_exception) or type(original_exception).__name__

    context = kwargs.pop("context", {})
    context["original_type"] = type(original_exception).__name__

    return exception_type(
        message=message,
        original_exception=original_exception,
        context=context,
        **kwargs,
    )
