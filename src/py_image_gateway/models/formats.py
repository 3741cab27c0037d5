"""图像格式定义。

封闭的 ImageFormat 枚举，以及扩展名、MIME 类型、Pillow 格式名之间的映射表。
新增格式只需要在这里增加一行映射，不需要在其他组件里加分支。
"""

from enum import Enum
from pathlib import PurePosixPath
from typing import Final


class ImageFormat(str, Enum):
    """网关识别的图像格式"""

    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    WEBP = "webp"
    PNM = "pnm"
    TIFF = "tiff"
    TGA = "tga"
    DDS = "dds"
    BMP = "bmp"
    ICO = "ico"
    HDR = "hdr"
    OPENEXR = "openexr"
    FARBFELD = "farbfeld"
    AVIF = "avif"
    QOI = "qoi"
    PCX = "pcx"


class ImageFormats:
    """格式映射表"""

    # 扩展名 -> 格式（不区分大小写）
    EXTENSIONS: Final[dict[str, ImageFormat]] = {
        "avif": ImageFormat.AVIF,
        "jpg": ImageFormat.JPEG,
        "jpeg": ImageFormat.JPEG,
        "jfif": ImageFormat.JPEG,
        "png": ImageFormat.PNG,
        "apng": ImageFormat.PNG,
        "gif": ImageFormat.GIF,
        "webp": ImageFormat.WEBP,
        "tif": ImageFormat.TIFF,
        "tiff": ImageFormat.TIFF,
        "tga": ImageFormat.TGA,
        "dds": ImageFormat.DDS,
        "bmp": ImageFormat.BMP,
        "ico": ImageFormat.ICO,
        "hdr": ImageFormat.HDR,
        "exr": ImageFormat.OPENEXR,
        "pbm": ImageFormat.PNM,
        "pam": ImageFormat.PNM,
        "ppm": ImageFormat.PNM,
        "pgm": ImageFormat.PNM,
        "pnm": ImageFormat.PNM,
        "ff": ImageFormat.FARBFELD,
        "qoi": ImageFormat.QOI,
        "pcx": ImageFormat.PCX,
    }

    # 响应头使用的 Content-Type
    CONTENT_TYPES: Final[dict[ImageFormat, str]] = {
        ImageFormat.PNG: "image/png",
        ImageFormat.JPEG: "image/jpeg",
        ImageFormat.GIF: "image/gif",
        ImageFormat.WEBP: "image/webp",
        ImageFormat.PNM: "image/x-portable-anymap",
        ImageFormat.TIFF: "image/tiff",
        ImageFormat.TGA: "image/x-tga",
        ImageFormat.DDS: "image/vnd.ms-dds",
        ImageFormat.BMP: "image/bmp",
        ImageFormat.ICO: "image/x-icon",
        ImageFormat.HDR: "image/vnd.radiance",
        ImageFormat.OPENEXR: "image/exr",
        ImageFormat.FARBFELD: "image/farbfeld",
        ImageFormat.AVIF: "image/avif",
        ImageFormat.QOI: "image/qoi",
        ImageFormat.PCX: "image/x-pcx",
    }

    # 源站返回的 Content-Type -> 格式，包含常见别名
    MIME_ALIASES: Final[dict[str, ImageFormat]] = {
        "image/jpg": ImageFormat.JPEG,
        "image/vnd.microsoft.icon": ImageFormat.ICO,
        "image/aces": ImageFormat.OPENEXR,
    }

    # Pillow 插件名 <-> 格式，只包含 Pillow 能解码的格式
    PILLOW_NAMES: Final[dict[ImageFormat, str]] = {
        ImageFormat.PNG: "PNG",
        ImageFormat.JPEG: "JPEG",
        ImageFormat.GIF: "GIF",
        ImageFormat.WEBP: "WEBP",
        ImageFormat.PNM: "PPM",
        ImageFormat.TIFF: "TIFF",
        ImageFormat.TGA: "TGA",
        ImageFormat.DDS: "DDS",
        ImageFormat.BMP: "BMP",
        ImageFormat.ICO: "ICO",
        ImageFormat.AVIF: "AVIF",
        ImageFormat.QOI: "QOI",
        ImageFormat.PCX: "PCX",
    }

    # Pillow 识别出的其他插件名
    PILLOW_ALIASES: Final[dict[str, ImageFormat]] = {
        "MPO": ImageFormat.JPEG,
        "DIB": ImageFormat.BMP,
    }

    FALLBACK_CONTENT_TYPE: Final[str] = "application/octet-stream"


def format_from_extension(extension: str) -> ImageFormat | None:
    """根据扩展名获取格式，允许带前导点"""
    return ImageFormats.EXTENSIONS.get(extension.lower().lstrip("."))


def format_from_filename(filename: str) -> ImageFormat | None:
    """根据文件名的扩展名获取格式"""
    suffix = PurePosixPath(filename).suffix
    if not suffix:
        return None
    return format_from_extension(suffix)


def format_from_content_type(content_type: str) -> ImageFormat | None:
    """根据 Content-Type 获取格式，忽略参数部分"""
    mime = content_type.split(";", 1)[0].strip().lower()
    if mime in ImageFormats.MIME_ALIASES:
        return ImageFormats.MIME_ALIASES[mime]
    for image_format, known in ImageFormats.CONTENT_TYPES.items():
        if known == mime:
            return image_format
    return None


def format_from_pillow(pillow_name: str | None) -> ImageFormat | None:
    """将 Pillow 的插件名映射回格式"""
    if not pillow_name:
        return None
    name = pillow_name.upper()
    if name in ImageFormats.PILLOW_ALIASES:
        return ImageFormats.PILLOW_ALIASES[name]
    for image_format, known in ImageFormats.PILLOW_NAMES.items():
        if known == name:
            return image_format
    return None


def resolve_content_type(image_format: ImageFormat) -> str:
    """获取输出格式对应的 Content-Type"""
    return ImageFormats.CONTENT_TYPES.get(
        image_format, ImageFormats.FALLBACK_CONTENT_TYPE
    )
