"""配置服务模块"""

from .config_defaults import get_default_config
from .config_keys import ConfigKeys
from .config_reader import ConfigReader

__all__ = [
    "ConfigReader",
    "ConfigKeys",
    "get_default_config",
]
