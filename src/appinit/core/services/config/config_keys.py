"""配置键常量定义 - 类型安全的配置访问

使用示例:
    config.get_setting(ConfigKeys.BOOTSTRAP_INIT_TIMEOUT)
"""


class ConfigKeys:
    """配置键常量类 - 所有配置路径的中央定义"""

    # ==================== Bootstrap (启动配置) ====================
    BOOTSTRAP_INIT_TIMEOUT = "bootstrap.init_timeout"
    """等待初始化完成的超时 (float | None): 秒"""

    # ==================== Logging (日志配置) ====================
    LOGGING_LEVEL = "logging.level"
    """日志级别 (str): "DEBUG" | "INFO" | "WARNING" | "ERROR" | "CRITICAL" """

    LOGGING_CONSOLE_OUTPUT = "logging.console_output"
    """是否输出到控制台 (bool)"""

    LOGGING_FILE = "logging.file"
    """日志文件路径 (str | None)"""

    LOGGING_ROTATION = "logging.rotation"
    """日志文件轮转条件 (str): 例如 "10 MB" """

    LOGGING_RETENTION = "logging.retention"
    """保留的轮转文件数量 (int)"""


VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
