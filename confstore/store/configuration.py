"""
键值配置存储

内存中的键值配置容器，包括：
- 仅插入的写入语义（已存在的键不会被覆盖）
- JSON 文本导出/导入（导入时整体替换映射）
- 绑定文件路径或逐次指定路径的保存/加载
"""

import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from .errors import ConfigurationError, ParseError, SerializationError

PathLike = Union[str, os.PathLike]


@dataclass
class SerializationOptions:
    """序列化与文件持久化选项"""
    indent: Optional[int] = None    # None 表示紧凑输出
    sort_keys: bool = True
    ensure_ascii: bool = False
    encoding: str = "utf-8"
    file_mode: int = 0o644          # 仅在创建文件时生效


class ConfigurationManager(ABC):
    """
    配置存储能力接口

    save/load 既可使用 set_file_name 绑定的路径，也可在每次调用时显式传入路径；
    save_to_file/load_from_file 是逐次指定路径的写法。
    """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """检查键是否存在"""

    @abstractmethod
    def set_value(self, key: str, value: Any) -> bool:
        """仅当键不存在时写入，返回是否写入"""

    @abstractmethod
    def get_value(self, key: str) -> Tuple[Any, bool]:
        """返回 (值, 是否存在)"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """删除键，返回是否发生删除"""

    @abstractmethod
    def clear(self) -> None:
        """清空所有键"""

    @abstractmethod
    def to_json(self) -> str:
        """导出为 JSON 对象文本"""

    @abstractmethod
    def from_json(self, text: Union[str, bytes]) -> None:
        """从 JSON 对象文本整体替换映射"""

    @abstractmethod
    def set_file_name(self, path: Optional[PathLike]) -> None:
        """绑定后续 save/load 使用的文件路径"""

    @abstractmethod
    def save(self, path: Optional[PathLike] = None) -> None:
        """保存到文件"""

    @abstractmethod
    def load(self, path: Optional[PathLike] = None) -> None:
        """从文件加载"""

    def save_to_file(self, path: PathLike) -> None:
        """保存到指定路径，不改变绑定路径"""
        self.save(path)

    def load_from_file(self, path: PathLike) -> None:
        """从指定路径加载，不改变绑定路径"""
        self.load(path)


class Configuration(ConfigurationManager):
    """内存键值配置"""

    def __init__(self, file_name: Optional[PathLike] = None,
                 options: Optional[SerializationOptions] = None):
        """
        初始化配置存储

        Args:
            file_name: 绑定的文件路径，可稍后通过 set_file_name 设置
            options: 序列化选项，默认紧凑输出、按键排序
        """
        self._data: Dict[str, Any] = {}
        self._file_name: Optional[str] = None
        self.options = options or SerializationOptions()
        self.set_file_name(file_name)

    @property
    def file_name(self) -> Optional[str]:
        return self._file_name

    def set_file_name(self, path: Optional[PathLike]) -> None:
        self._file_name = os.fspath(path) if path else None

    def exists(self, key: str) -> bool:
        return key in self._data

    def set_value(self, key: str, value: Any) -> bool:
        if self.exists(key):
            return False
        self._data[key] = value
        return True

    def get_value(self, key: str) -> Tuple[Any, bool]:
        if self.exists(key):
            return self._data[key], True
        return None, False

    def delete(self, key: str) -> bool:
        if self.exists(key):
            del self._data[key]
            return True
        return False

    def clear(self) -> None:
        self._data = {}

    def keys(self) -> List[str]:
        return list(self._data)

    def to_dict(self) -> Dict[str, Any]:
        """返回映射的浅拷贝"""
        return dict(self._data)

    def to_json(self) -> str:
        """
        导出为 JSON 对象文本

        Returns:
            JSON 文本

        Raises:
            SerializationError: 存在无法编码的值（不支持的类型、NaN/Infinity、循环引用）
        """
        separators = (",", ":") if self.options.indent is None else None
        try:
            return json.dumps(
                self._data,
                indent=self.options.indent,
                sort_keys=self.options.sort_keys,
                ensure_ascii=self.options.ensure_ascii,
                separators=separators,
                allow_nan=False,
            )
        except (TypeError, ValueError, RecursionError) as e:
            raise SerializationError(f"配置无法序列化为JSON: {e}") from e

    def from_json(self, text: Union[str, bytes]) -> None:
        """
        解析 JSON 对象文本并整体替换映射

        先解析到新的字典，成功后再替换；失败时原映射保持不变。

        Args:
            text: JSON 文本，bytes 按 options.encoding 解码

        Raises:
            ParseError: 文本不是合法 JSON，或顶层不是对象
        """
        try:
            if isinstance(text, (bytes, bytearray)):
                text = text.decode(self.options.encoding)
            new_data = json.loads(text)
        except (TypeError, ValueError, LookupError, RecursionError) as e:
            raise ParseError(f"JSON解析失败: {e}") from e

        if not isinstance(new_data, dict):
            raise ParseError(f"JSON顶层必须是对象，实际为: {type(new_data).__name__}")

        self._data = new_data

    def _resolve_path(self, path: Optional[PathLike]) -> str:
        """显式路径优先，其次为绑定路径"""
        if path is not None:
            return os.fspath(path)
        if not self._file_name:
            raise ConfigurationError("file name not set")
        return self._file_name

    def save(self, path: Optional[PathLike] = None) -> None:
        """
        保存到文件（整体覆盖写入）

        Args:
            path: 本次使用的路径，缺省时使用绑定路径

        Raises:
            ConfigurationError: 未指定路径且未绑定文件
            SerializationError: 存在无法编码的值或文本无法按 encoding 编码，此时不会触碰文件
            OSError: 文件系统错误原样抛出
        """
        target = self._resolve_path(path)
        payload = self.to_json()
        try:
            data = payload.encode(self.options.encoding)
        except (UnicodeEncodeError, LookupError) as e:
            raise SerializationError(f"配置无法按 {self.options.encoding} 编码: {e}") from e

        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self.options.file_mode)
        with open(fd, "wb") as f:
            f.write(data)

        logger.debug(f"配置已保存: {target} ({len(self._data)} 项)")

    def load(self, path: Optional[PathLike] = None) -> None:
        """
        从文件加载并整体替换映射

        Args:
            path: 本次使用的路径，缺省时使用绑定路径

        Raises:
            ConfigurationError: 未指定路径且未绑定文件
            ParseError: 文件内容不是 JSON 对象，原映射保持不变
            OSError: 文件系统错误原样抛出
        """
        target = self._resolve_path(path)

        with open(target, "rb") as f:
            raw = f.read()

        self.from_json(raw)
        logger.debug(f"配置已加载: {target} ({len(self._data)} 项)")

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Configuration(keys={len(self._data)}, file_name={self._file_name!r})"
