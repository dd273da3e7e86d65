"""配置读取服务 - 单一职责：配置读取和查询"""

import copy
import json
from pathlib import Path
from typing import Dict, Any, Optional, TypeVar, Union

from loguru import logger

from ....utils.exceptions import ConfigurationError
from .config_defaults import get_default_config
from .config_keys import ConfigKeys, VALID_LOG_LEVELS

T = TypeVar("T")


class ConfigReader:
    """配置读取器 - 只负责读取配置"""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """初始化配置读取器

        Args:
            config_path: 配置文件路径，None 时只使用默认配置
        """
        self.config_path = Path(config_path) if config_path else None
        self._default_config = get_default_config()
        self._config: Dict[str, Any] = self._merge_configs(self._default_config, {})

    @classmethod
    def from_dict(cls, settings: Dict[str, Any]) -> "ConfigReader":
        """直接从字典构建配置（主要用于测试和嵌入式场景）"""
        reader = cls()
        reader._config = reader._merge_configs(reader._default_config, settings)
        return reader

    def load_config(self) -> bool:
        """从文件加载配置

        Returns:
            是否加载成功
        """
        if self.config_path is None or not self.config_path.exists():
            self._config = self._merge_configs(self._default_config, {})
            logger.debug(f"Using default configuration (config_path={self.config_path})")
            return True

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load configuration from {self.config_path}: {e}")
            self._config = self._merge_configs(self._default_config, {})
            return False

        if not isinstance(loaded_config, dict):
            logger.error(f"Configuration root must be an object: {self.config_path}")
            self._config = self._merge_configs(self._default_config, {})
            return False

        self._config = self._merge_configs(self._default_config, loaded_config)
        logger.info(
            f"Configuration loaded from {self.config_path} "
            f"(keys_loaded={len(loaded_config)})"
        )
        return True

    def get_setting(self, key: str, default: Optional[T] = None) -> T:
        """获取配置项

        Args:
            key: 配置项键名，支持嵌套路径 (例如: "bootstrap.init_timeout")
            default: 默认值

        Returns:
            配置项的值，如果不存在则返回默认值
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_all_settings(self) -> Dict[str, Any]:
        """获取所有配置的副本"""
        return copy.deepcopy(self._config)

    def validate(self) -> None:
        """校验配置

        Raises:
            ConfigurationError: 配置项取值非法
        """
        timeout = self.get_setting(ConfigKeys.BOOTSTRAP_INIT_TIMEOUT)
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise ConfigurationError(
                    f"{ConfigKeys.BOOTSTRAP_INIT_TIMEOUT} must be a number, got {timeout!r}",
                    context={"key": ConfigKeys.BOOTSTRAP_INIT_TIMEOUT},
                )
            if timeout < 0:
                raise ConfigurationError(
                    f"{ConfigKeys.BOOTSTRAP_INIT_TIMEOUT} must not be negative, got {timeout!r}",
                    context={"key": ConfigKeys.BOOTSTRAP_INIT_TIMEOUT},
                )

        level = str(self.get_setting(ConfigKeys.LOGGING_LEVEL, "INFO")).upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level: {level}",
                context={"key": ConfigKeys.LOGGING_LEVEL},
            )

    def _merge_configs(
        self, default: Dict[str, Any], loaded: Dict[str, Any]
    ) -> Dict[str, Any]:
        """合并默认配置和加载的配置

        Args:
            default: 默认配置
            loaded: 加载的配置

        Returns:
            合并后的配置
        """
        result = copy.deepcopy(default)

        def merge_recursive(base: Dict[str, Any], update: Dict[str, Any]) -> None:
            for key, value in update.items():
                if (
                    key in base
                    and isinstance(base[key], dict)
                    and isinstance(value, dict)
                ):
                    merge_recursive(base[key], value)
                else:
                    base[key] = value

        merge_recursive(result, loaded)
        return result
