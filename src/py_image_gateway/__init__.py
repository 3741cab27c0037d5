"""按需图像变换网关。

客户端请求的路径中包含签名、变换指令链和编码后的源图 URL，网关鉴权后获取源图、
应用变换、重新编码并返回。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "按需图像变换网关，基于 Pillow 11"

# 核心功能导出
from .core.params import build_path, parse_params
from .core.signature import sign_path, verify_signature
from .engine.orchestrator import RequestOrchestrator
from .models.fetch_result import ImageResponse


__all__ = [
    "ImageResponse",
    "RequestOrchestrator",
    "build_path",
    "get_version",
    "parse_params",
    "sign_path",
    "verify_signature",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
