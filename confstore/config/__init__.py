"""
设置管理模块

提供 confstore 运行设置的加载、验证和管理功能。
"""

from .manager import SettingsManager, StoreConfig, LoggingConfig

__all__ = ['SettingsManager', 'StoreConfig', 'LoggingConfig']
