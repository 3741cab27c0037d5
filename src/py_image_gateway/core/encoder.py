"""编码分发模块。

以封闭的 ImageFormat 枚举为键的静态分发表。新增输出格式只需要在 ENCODERS 中增加一行，
并在 models.formats 中补充 Content-Type 映射。
"""

from collections.abc import Callable
from io import BytesIO
from typing import Any

import cv2
import numpy as np
from PIL import Image

from ..exceptions import EncodingError, UnsupportedFormatError
from ..models.encode_config import EncodeConfig
from ..models.formats import ImageFormat
from ..utils.logging_helpers import get_logger
from .decoder import FARBFELD_MAGIC
from .formats import FormatProcessor, get_save_parameters


logger = get_logger()

# ICO 单个图标的最大边长
ICO_MAX_DIMENSION = 256

Writer = Callable[[Image.Image, dict[str, Any]], bytes]


def _pillow_writer(pillow_name: str) -> Writer:
    def write(img: Image.Image, params: dict[str, Any]) -> bytes:
        buffer = BytesIO()
        img.save(buffer, format=pillow_name, **params)
        return buffer.getvalue()

    return write


def _write_gif(img: Image.Image, params: dict[str, Any]) -> bytes:
    """GIF 需要先量化到调色板，速度越小量化越精细"""
    speed = params["speed"]
    if img.mode in ("RGB", "RGBA"):
        # RGBA 只能使用八叉树量化
        if img.mode == "RGB" and speed < 10:
            method = Image.Quantize.MEDIANCUT
        else:
            method = Image.Quantize.FASTOCTREE
        img = img.quantize(colors=256, method=method, kmeans=max(0, 10 - speed))

    buffer = BytesIO()
    img.save(buffer, format="GIF")
    return buffer.getvalue()


def _write_ico(img: Image.Image, params: dict[str, Any]) -> bytes:
    if img.width > ICO_MAX_DIMENSION or img.height > ICO_MAX_DIMENSION:
        raise ValueError(f"ICO 尺寸不能超过 {ICO_MAX_DIMENSION}: {img.size}")
    buffer = BytesIO()
    img.save(buffer, format="ICO", sizes=[img.size], **params)
    return buffer.getvalue()


def _opencv_writer(extension: str) -> Writer:
    """HDR 和 EXR 使用 OpenCV 写出 32 位浮点数据"""

    def write(img: Image.Image, params: dict[str, Any]) -> bytes:
        pixels = np.asarray(img, dtype=np.float32) / 255.0
        bgr = cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR)
        ok, buffer = cv2.imencode(extension, bgr)
        if not ok:
            raise ValueError(f"OpenCV 无法编码 {extension}")
        return buffer.tobytes()

    return write


def _write_farbfeld(img: Image.Image, params: dict[str, Any]) -> bytes:
    """Farbfeld: 魔数 + 大端宽高 + 每通道 16 位大端 RGBA"""
    pixels = np.asarray(img, dtype=np.uint16) * 257
    header = FARBFELD_MAGIC + np.array([img.width, img.height], dtype=">u4").tobytes()
    return header + pixels.astype(">u2").tobytes()


ENCODERS: dict[ImageFormat, Writer] = {
    ImageFormat.PNG: _pillow_writer("PNG"),
    ImageFormat.JPEG: _pillow_writer("JPEG"),
    ImageFormat.GIF: _write_gif,
    ImageFormat.WEBP: _pillow_writer("WEBP"),
    ImageFormat.PNM: _pillow_writer("PPM"),
    ImageFormat.TIFF: _pillow_writer("TIFF"),
    ImageFormat.TGA: _pillow_writer("TGA"),
    ImageFormat.BMP: _pillow_writer("BMP"),
    ImageFormat.ICO: _write_ico,
    ImageFormat.HDR: _opencv_writer(".hdr"),
    ImageFormat.OPENEXR: _opencv_writer(".exr"),
    ImageFormat.FARBFELD: _write_farbfeld,
    ImageFormat.AVIF: _pillow_writer("AVIF"),
    ImageFormat.QOI: _pillow_writer("QOI"),
}


def is_encodable(image_format: ImageFormat) -> bool:
    """是否支持该输出格式"""
    return image_format in ENCODERS


def encode_image(
    image: Image.Image,
    config: EncodeConfig,
    format_processor: FormatProcessor | None = None,
) -> bytes:
    """按编码配置编码图像

    Args:
        image: 变换后的图像
        config: 最终编码配置
        format_processor: 色彩模式转换器，默认新建

    Returns:
        bytes: 编码后的字节

    Raises:
        UnsupportedFormatError: 输出格式不在支持列表中
        EncodingError: 编码器内部失败，不携带编码器的错误文本
    """
    writer = ENCODERS.get(config.format)
    if writer is None:
        raise UnsupportedFormatError(f"不支持的输出格式: {config.format.value}")

    processor = format_processor or FormatProcessor()
    params = get_save_parameters(config)

    try:
        prepared = processor.prepare_for_format(image, config.format)
        data = writer(prepared, params)
    except Exception as e:
        logger.warning(f"编码 {config.format.value} 失败: {e}")
        raise EncodingError(f"编码 {config.format.value} 失败") from e

    logger.debug(f"编码完成: {config.format.value} 参数={params} 大小={len(data)}")
    return data
