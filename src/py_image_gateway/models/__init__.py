"""数据模型包。

定义请求解析、编码配置和获取结果相关的数据结构。
"""

from .encode_config import EncodeConfig
from .fetch_result import FetchResult, ImageResponse
from .formats import (
    ImageFormat,
    ImageFormats,
    format_from_content_type,
    format_from_extension,
    format_from_filename,
    format_from_pillow,
    resolve_content_type,
)
from .operations import (
    Operation,
    ParsedRequest,
    Resize,
    Rotate,
    SetFormat,
    SetQuality,
    SetSpeed,
)


__all__ = [
    "EncodeConfig",
    "FetchResult",
    "ImageFormat",
    "ImageFormats",
    "ImageResponse",
    "Operation",
    "ParsedRequest",
    "Resize",
    "Rotate",
    "SetFormat",
    "SetQuality",
    "SetSpeed",
    "format_from_content_type",
    "format_from_extension",
    "format_from_filename",
    "format_from_pillow",
    "resolve_content_type",
]
