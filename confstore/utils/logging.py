"""日志系统设置"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.manager import LoggingConfig


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """设置日志系统"""
    config = config or LoggingConfig()

    # 移除默认处理器
    logger.remove()

    if config.console_enabled:
        logger.add(
            sys.stderr,
            level=config.level,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
            colorize=config.console_colored
        )

    if config.file_enabled:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            config.log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation=config.rotation,
            retention=config.retention,
            compression="zip"
        )
