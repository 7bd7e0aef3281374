"""
confstore - 键值配置存储

内存键值配置，支持 JSON 导入导出和文件持久化。
"""

from .store import (
    Configuration,
    ConfigurationManager,
    SerializationOptions,
    ConfigStoreError,
    ConfigurationError,
    ParseError,
    SerializationError,
    SettingsError,
)

__all__ = [
    'Configuration',
    'ConfigurationManager',
    'SerializationOptions',
    'ConfigStoreError',
    'ConfigurationError',
    'ParseError',
    'SerializationError',
    'SettingsError',
]

__version__ = "0.1.0"
