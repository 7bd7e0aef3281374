"""
配置存储模块

提供键值配置的内存存储、JSON 序列化和文件持久化功能。
"""

from .configuration import Configuration, ConfigurationManager, SerializationOptions
from .errors import (
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
