"""
应用设置管理器

负责加载、验证和管理 confstore 自身的运行设置，包括：
- 存储文件与序列化选项
- 日志输出配置
"""

import os
import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional, Union
from dataclasses import dataclass
from loguru import logger

from ..store.configuration import SerializationOptions
from ..store.errors import SettingsError

LOG_LEVEL_ENV = "CONFSTORE_LOG_LEVEL"
VALID_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class StoreConfig:
    """存储配置数据类"""
    default_file: str = "data/config.json"
    indent: Optional[int] = None
    sort_keys: bool = True
    ensure_ascii: bool = False
    encoding: str = "utf-8"
    file_mode: int = 0o644


@dataclass
class LoggingConfig:
    """日志配置数据类"""
    level: str = "INFO"

    # 文件日志
    file_enabled: bool = False
    log_file: str = "data/logs/confstore.log"
    rotation: str = "10 MB"
    retention: str = "30 days"

    # 控制台日志
    console_enabled: bool = True
    console_colored: bool = True


def _parse_file_mode(value: Union[str, int]) -> int:
    """解析文件权限，字符串按八进制处理（如 "0644"）"""
    if isinstance(value, int):
        return value
    try:
        return int(str(value), 8)
    except ValueError as e:
        raise SettingsError(f"无效的文件权限: {value}") from e


class SettingsManager:
    """confstore 设置管理器"""

    def __init__(self, config_dir: str = "config"):
        """
        初始化设置管理器

        Args:
            config_dir: 设置文件目录路径
        """
        self.config_dir = Path(config_dir)
        self.settings_file = self.config_dir / "settings.yaml"

        self._settings: Dict[str, Any] = {}

        self.store: Optional[StoreConfig] = None
        self.logging: Optional[LoggingConfig] = None

        self.load_settings()

    def load_settings(self) -> None:
        """加载设置文件，文件不存在时使用默认值"""
        if not self.settings_file.exists():
            logger.debug(f"设置文件不存在，使用默认设置: {self.settings_file}")
            self._settings = {}
            self._parse_settings()
            return

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                self._settings = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"加载设置文件失败: {e}")
            raise SettingsError(f"设置文件格式错误: {self.settings_file}") from e

        if not isinstance(self._settings, dict):
            raise SettingsError(f"设置文件顶层必须是映射: {self.settings_file}")

        self._parse_settings()
        logger.debug(f"设置文件加载成功: {self.settings_file}")

    def _parse_settings(self) -> None:
        """解析设置"""
        store_config = self._settings.get('store', {}) or {}
        self.store = StoreConfig(
            default_file=store_config.get('default_file', 'data/config.json'),
            indent=store_config.get('indent'),
            sort_keys=store_config.get('sort_keys', True),
            ensure_ascii=store_config.get('ensure_ascii', False),
            encoding=store_config.get('encoding', 'utf-8'),
            file_mode=_parse_file_mode(store_config.get('file_mode', 0o644))
        )

        logging_config = self._settings.get('logging', {}) or {}
        file_config = logging_config.get('file', {}) or {}
        console_config = logging_config.get('console', {}) or {}
        self.logging = LoggingConfig(
            level=str(os.environ.get(LOG_LEVEL_ENV) or logging_config.get('level', 'INFO')).upper(),
            file_enabled=file_config.get('enabled', False),
            log_file=file_config.get('path', 'data/logs/confstore.log'),
            rotation=file_config.get('rotation', '10 MB'),
            retention=file_config.get('retention', '30 days'),
            console_enabled=console_config.get('enabled', True),
            console_colored=console_config.get('colored', True)
        )

    def create_default_settings(self) -> Path:
        """创建默认设置文件"""
        default_settings = {
            'store': {
                'default_file': 'data/config.json',
                'indent': None,
                'sort_keys': True,
                'ensure_ascii': False,
                'encoding': 'utf-8',
                'file_mode': '0644'
            },
            'logging': {
                'level': 'INFO',
                'file': {
                    'enabled': False,
                    'path': 'data/logs/confstore.log',
                    'rotation': '10 MB',
                    'retention': '30 days'
                },
                'console': {
                    'enabled': True,
                    'colored': True
                }
            }
        }

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.settings_file, 'w', encoding='utf-8') as f:
            yaml.dump(default_settings, f, default_flow_style=False,
                      allow_unicode=True, indent=2, sort_keys=False)

        logger.info(f"创建默认设置文件: {self.settings_file}")
        self.load_settings()
        return self.settings_file

    def serialization_options(self) -> SerializationOptions:
        """按当前设置构造序列化选项"""
        return SerializationOptions(
            indent=self.store.indent,
            sort_keys=self.store.sort_keys,
            ensure_ascii=self.store.ensure_ascii,
            encoding=self.store.encoding,
            file_mode=self.store.file_mode
        )

    def validate_config(self) -> Dict[str, List[str]]:
        """验证设置的完整性和正确性"""
        errors = {
            'store': [],
            'logging': []
        }

        if not self.store.default_file:
            errors['store'].append("默认存储文件不能为空")
        if self.store.indent is not None and (not isinstance(self.store.indent, int) or self.store.indent < 0):
            errors['store'].append(f"缩进必须是非负整数: {self.store.indent}")
        if not 0 <= self.store.file_mode <= 0o777:
            errors['store'].append(f"文件权限超出范围: {oct(self.store.file_mode)}")
        try:
            "".encode(self.store.encoding)
        except LookupError:
            errors['store'].append(f"未知的编码: {self.store.encoding}")

        if self.logging.level not in VALID_LOG_LEVELS:
            errors['logging'].append(f"未知的日志级别: {self.logging.level}")
        if self.logging.file_enabled and not self.logging.log_file:
            errors['logging'].append("启用文件日志时必须指定日志路径")

        return errors

    def reload_config(self) -> None:
        """重新加载设置"""
        logger.info("重新加载设置文件...")
        self.load_settings()

    def __str__(self) -> str:
        return (f"SettingsManager("
                f"default_file={self.store.default_file}, "
                f"log_level={self.logging.level})")

    def __repr__(self) -> str:
        return self.__str__()
