"""配置存储异常定义"""


class ConfigStoreError(Exception):
    """配置存储异常基类"""
    pass


class ParseError(ConfigStoreError):
    """JSON 文本格式错误或不是对象"""
    pass


class SerializationError(ConfigStoreError):
    """存储的值无法编码为 JSON"""
    pass


class ConfigurationError(ConfigStoreError):
    """需要绑定文件路径的操作在未绑定时被调用"""
    pass


class SettingsError(ConfigStoreError):
    """应用设置文件无法解析"""
    pass
