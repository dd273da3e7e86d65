"""配置默认值定义 - 单一职责：提供默认配置"""

from typing import Dict, Any


def get_default_config() -> Dict[str, Any]:
    """获取默认配置

    Returns:
        默认配置字典
    """
    return {
        "bootstrap": {
            "init_timeout": None,  # 秒；None 或 0 表示一直等待
        },
        "logging": {
            "level": "INFO",
            "console_output": True,
            "file": None,  # 日志文件路径，None 表示不写文件
            "rotation": "10 MB",
            "retention": 5,
        },
    }
