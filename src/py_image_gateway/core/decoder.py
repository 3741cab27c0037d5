"""图像解码模块。

优先使用源站声明的格式，否则根据字节内容嗅探格式。Pillow 负责绝大多数格式，
Radiance HDR 和 OpenEXR 交给 OpenCV，Farbfeld 用 numpy 直接读取。
"""

from io import BytesIO

import cv2
import numpy as np
from PIL import Image

from ..exceptions import DecodingError, UnknownFormatError, handle_image_errors
from ..models.formats import ImageFormat, ImageFormats, format_from_pillow
from ..utils.logging_helpers import get_logger


logger = get_logger()

FARBFELD_MAGIC = b"farbfeld"
FARBFELD_HEADER_SIZE = 16
OPENEXR_MAGIC = b"\x76\x2f\x31\x01"
RADIANCE_MAGICS = (b"#?RADIANCE", b"#?RGBE")

# Pillow 读入后需要统一的色彩模式，保证后续平滑缩放可用
_MODE_CONVERSIONS = {
    "1": "L",
    "CMYK": "RGB",
    "YCbCr": "RGB",
    "LAB": "RGB",
    "HSV": "RGB",
}


def guess_format(data: bytes) -> ImageFormat | None:
    """根据文件头嗅探格式"""
    if data.startswith(FARBFELD_MAGIC):
        return ImageFormat.FARBFELD
    if data.startswith(OPENEXR_MAGIC):
        return ImageFormat.OPENEXR
    if data.startswith(RADIANCE_MAGICS):
        return ImageFormat.HDR

    try:
        with Image.open(BytesIO(data)) as img:
            return format_from_pillow(img.format)
    except Exception as e:
        logger.debug(f"格式嗅探失败: {e}")
        return None


def determine_input_format(
    data: bytes, declared_format: ImageFormat | None
) -> ImageFormat:
    """确定输入格式：声明的格式优先，其次按内容嗅探

    Raises:
        UnknownFormatError: 无法确定格式
    """
    if declared_format is not None:
        return declared_format

    image_format = guess_format(data)
    if image_format is None:
        raise UnknownFormatError("无法确定输入图像格式")
    return image_format


def _normalize_mode(img: Image.Image) -> Image.Image:
    """将调色板等模式转换为支持平滑缩放的模式"""
    if img.mode in ("P", "PA"):
        has_alpha = img.mode == "PA" or "transparency" in img.info
        return img.convert("RGBA" if has_alpha else "RGB")
    if img.mode in _MODE_CONVERSIONS:
        return img.convert(_MODE_CONVERSIONS[img.mode])
    return img


def _decode_with_pillow(data: bytes, image_format: ImageFormat) -> Image.Image:
    pillow_name = ImageFormats.PILLOW_NAMES.get(image_format)
    if pillow_name is None:
        raise DecodingError(f"没有可用的解码器: {image_format.value}")

    formats = [pillow_name]
    if image_format is ImageFormat.JPEG:
        formats.append("MPO")

    with Image.open(BytesIO(data), formats=formats) as img:
        img.load()
        return _normalize_mode(img.copy())


def _decode_with_opencv(data: bytes) -> Image.Image:
    buffer = np.frombuffer(data, dtype=np.uint8)
    pixels = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if pixels is None:
        raise DecodingError("OpenCV 无法解码图像")

    # 浮点线性数据截断到 8 位显示范围
    pixels = np.clip(pixels.astype(np.float32) * 255.0, 0, 255).astype(np.uint8)
    if pixels.ndim == 2:
        return Image.fromarray(pixels)
    if pixels.shape[2] == 4:
        return Image.fromarray(cv2.cvtColor(pixels, cv2.COLOR_BGRA2RGBA))
    return Image.fromarray(cv2.cvtColor(pixels, cv2.COLOR_BGR2RGB))


def _decode_farbfeld(data: bytes) -> Image.Image:
    if not data.startswith(FARBFELD_MAGIC) or len(data) < FARBFELD_HEADER_SIZE:
        raise DecodingError("Farbfeld 文件头无效")

    width, height = np.frombuffer(data, dtype=">u4", count=2, offset=8)
    expected = int(width) * int(height) * 4
    pixels = np.frombuffer(data, dtype=">u2", offset=FARBFELD_HEADER_SIZE)
    if pixels.size != expected:
        raise DecodingError("Farbfeld 像素数据长度不匹配")

    rgba = (pixels >> 8).astype(np.uint8).reshape(int(height), int(width), 4)
    return Image.fromarray(rgba)


@handle_image_errors("图像解码", DecodingError)
def decode_image(data: bytes, image_format: ImageFormat) -> Image.Image:
    """按指定格式解码图像

    Args:
        data: 原始字节
        image_format: 已确定的输入格式

    Returns:
        Image.Image: 解码后的图像

    Raises:
        DecodingError: 解码失败
    """
    match image_format:
        case ImageFormat.HDR | ImageFormat.OPENEXR:
            img = _decode_with_opencv(data)
        case ImageFormat.FARBFELD:
            img = _decode_farbfeld(data)
        case _:
            img = _decode_with_pillow(data, image_format)

    logger.debug(f"解码完成: {image_format.value} {img.width}x{img.height} {img.mode}")
    return img
