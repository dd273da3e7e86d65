"""日志配置 - 基于 loguru

使用示例:
    from appinit.utils.logger import setup_logging

    setup_logging(config_reader)

其余模块直接使用 ``from loguru import logger``。
"""

import os
import sys
from typing import Any, List, Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}"

_handler_ids: List[int] = []


def is_dev_mode() -> bool:
    """检查是否为开发模式"""
    return "--dev" in sys.argv or bool(os.getenv("APPINIT_DEV"))


def setup_logging(config_reader: Optional[Any] = None) -> List[int]:
    """根据配置安装 loguru 输出

    重复调用会先移除上一次安装的输出。

    Args:
        config_reader: 提供 ``get_setting(key, default)`` 的配置对象

    Returns:
        已安装的 loguru handler id 列表
    """

    def setting(key: str, default: Any) -> Any:
        if config_reader is None:
            return default
        return config_reader.get_setting(key, default)

    # 开发模式总是输出 DEBUG
    if is_dev_mode():
        level = "DEBUG"
    else:
        level = str(setting("logging.level", "INFO")).upper()

    for handler_id in _handler_ids:
        try:
            logger.remove(handler_id)
        except ValueError:
            pass  # 已被外部移除
    _handler_ids.clear()

    if setting("logging.console_output", True):
        _handler_ids.append(
            logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, enqueue=False)
        )

    log_file = setting("logging.file", None)
    if log_file:
        _handler_ids.append(
            logger.add(
                str(log_file),
                level=level,
                format=FILE_FORMAT,
                rotation=setting("logging.rotation", "10 MB"),
                retention=setting("logging.retention", 5),
                encoding="utf-8",
                enqueue=True,
            )
        )

    logger.debug(f"Logging configured (level={level}, handlers={len(_handler_ids)})")
    return list(_handler_ids)
