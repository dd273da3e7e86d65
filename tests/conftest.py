"""pytest 配置和全局 fixtures"""
import sys
from pathlib import Path
from typing import List

import pytest
from loguru import logger

# 添加 src 到 path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
# 让 tests.mocks 可以作为 mocks 导入
sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture
def log_messages():
    """捕获 loguru 输出的消息"""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def call_log() -> List[str]:
    """初始化函数调用顺序记录"""
    return []
