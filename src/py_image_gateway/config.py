"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。配置在启动后只读，
所有并发请求共享同一个快照。
"""

import os
from dataclasses import dataclass, field
from typing import Any

from . import __version__


@dataclass(frozen=True)
class EncodeDefaults:
    """编码相关的默认参数，只在对应字段未设置时使用"""

    JPEG_QUALITY: int = 80
    GIF_SPEED: int = 10
    AVIF_SPEED: int = 8
    AVIF_QUALITY: int = 80
    PNG_COMPRESS_LEVEL: int = 6

    def get_format_defaults(self, format_name: str) -> dict[str, Any]:
        """获取格式特定的默认参数"""
        defaults = {
            "jpeg": {"quality": self.JPEG_QUALITY},
            "gif": {"speed": self.GIF_SPEED},
            "avif": {"speed": self.AVIF_SPEED, "quality": self.AVIF_QUALITY},
        }
        return defaults.get(format_name, {})


@dataclass(frozen=True)
class ServerDefaults:
    """服务相关的默认配置"""

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    MAX_WORKERS: int = 4
    USER_AGENT: str = f"py-image-gateway/{__version__}"
    CACHE_CONTROL: str = "max-age=31536000, public"


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class SecurityDefaults:
    """签名相关配置"""

    # 签名密钥，None 表示关闭签名校验
    KEY: bytes | None = field(default=None, repr=False)

    @property
    def signature_enabled(self) -> bool:
        return self.KEY is not None


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.encode = EncodeDefaults()
        self.server = ServerDefaults()
        self.logging = LoggingDefaults()
        self.security = SecurityDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 空字符串视为未设置
        if key := os.getenv("KEY"):
            object.__setattr__(self.security, "KEY", key.encode("utf-8"))

        # 服务配置
        if host := os.getenv("HOST"):
            object.__setattr__(self.server, "HOST", host)

        if port := os.getenv("PORT"):
            object.__setattr__(self.server, "PORT", int(port))

        if max_workers := os.getenv("GATEWAY_MAX_WORKERS"):
            object.__setattr__(self.server, "MAX_WORKERS", int(max_workers))

        if user_agent := os.getenv("GATEWAY_USER_AGENT"):
            object.__setattr__(self.server, "USER_AGENT", user_agent)

        # 日志配置
        if log_level := os.getenv("GATEWAY_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
