"""格式处理器模块。

为目标格式准备图像的色彩模式，并计算各格式的保存参数。默认参数只在编码配置
中对应字段未设置时使用。
"""

from typing import Any, Final

from PIL import Image

from ..config import get_config
from ..models.encode_config import EncodeConfig
from ..models.formats import ImageFormat
from ..utils.logging_helpers import get_logger


logger = get_logger()

JPEG_QUALITY_RANGE: Final[tuple[int, int]] = (1, 100)
AVIF_QUALITY_RANGE: Final[tuple[int, int]] = (1, 100)
AVIF_SPEED_RANGE: Final[tuple[int, int]] = (1, 10)
# GIF 量化速度：1 最慢质量最好，30 最快
GIF_SPEED_RANGE: Final[tuple[int, int]] = (1, 30)


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, value))


class FormatProcessor:
    """格式处理器 - 将图像转换为目标编码器接受的色彩模式"""

    # 各编码器直接接受的模式
    ALLOWED_MODES: Final[dict[ImageFormat, frozenset[str]]] = {
        ImageFormat.PNG: frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}),
        ImageFormat.JPEG: frozenset({"L", "RGB", "CMYK"}),
        ImageFormat.GIF: frozenset({"L", "P", "RGB", "RGBA"}),
        ImageFormat.WEBP: frozenset({"RGB", "RGBA"}),
        ImageFormat.AVIF: frozenset({"RGB", "RGBA"}),
        ImageFormat.TIFF: frozenset({"1", "L", "LA", "I", "I;16", "F", "P", "RGB", "RGBA", "CMYK"}),
        ImageFormat.BMP: frozenset({"1", "L", "P", "RGB", "RGBA"}),
        ImageFormat.TGA: frozenset({"L", "LA", "P", "RGB", "RGBA"}),
        ImageFormat.ICO: frozenset({"RGBA"}),
        ImageFormat.PNM: frozenset({"1", "L", "I", "I;16", "RGB"}),
        ImageFormat.QOI: frozenset({"RGB", "RGBA"}),
        ImageFormat.FARBFELD: frozenset({"RGBA"}),
        ImageFormat.HDR: frozenset({"RGB"}),
        ImageFormat.OPENEXR: frozenset({"RGB"}),
    }

    def prepare_for_format(
        self, img: Image.Image, target_format: ImageFormat
    ) -> Image.Image:
        """为目标格式准备图片

        Args:
            img: PIL图片对象
            target_format: 目标格式

        Returns:
            Image.Image: 处理后的图片对象
        """
        allowed = self.ALLOWED_MODES.get(target_format)
        if allowed is None or img.mode in allowed:
            return img

        match target_format:
            case ImageFormat.JPEG:
                return self._prepare_for_jpeg(img)
            case _:
                return self._convert_to_allowed(img, allowed)

    def _prepare_for_jpeg(self, img: Image.Image) -> Image.Image:
        """JPEG不支持透明度，透明区域合成到白色背景上"""
        if self.has_alpha(img):
            rgba = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            return background
        if img.mode in ("I", "I;16", "F"):
            return self._to_8bit_gray(img)
        return img.convert("RGB")

    def _convert_to_allowed(
        self, img: Image.Image, allowed: frozenset[str]
    ) -> Image.Image:
        """按 透明度 -> 灰度 -> RGB 的顺序选择最接近的模式"""
        if img.mode in ("I", "I;16", "F"):
            img = self._to_8bit_gray(img)
            if img.mode in allowed:
                return img

        if self.has_alpha(img) and "RGBA" in allowed:
            return img.convert("RGBA")
        if img.mode in ("L", "LA") and "L" in allowed:
            return img.convert("L")
        if "RGB" in allowed:
            return img.convert("RGB")
        return img.convert("RGBA")

    @staticmethod
    def _to_8bit_gray(img: Image.Image) -> Image.Image:
        """高位深灰度图转换为 8 位灰度"""
        if img.mode == "F":
            return img.convert("L")
        # 16 位数据按比例缩放到 0-255
        return img.convert("I").point(lambda value: value * (1 / 257)).convert("L")

    @staticmethod
    def has_alpha(img: Image.Image) -> bool:
        return img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info


def get_save_parameters(config: EncodeConfig) -> dict[str, Any]:
    """获取保存参数，未设置的字段使用格式默认值

    Returns:
        dict: 传给编码器的参数
    """
    defaults = get_config().encode.get_format_defaults(config.format.value)
    quality = config.quality if config.quality is not None else defaults.get("quality")
    speed = config.speed if config.speed is not None else defaults.get("speed")

    match config.format:
        case ImageFormat.JPEG:
            return {"quality": _clamp(quality, JPEG_QUALITY_RANGE)}
        case ImageFormat.GIF:
            return {"speed": _clamp(speed, GIF_SPEED_RANGE)}
        case ImageFormat.AVIF:
            return {
                "quality": _clamp(quality, AVIF_QUALITY_RANGE),
                "speed": _clamp(speed, AVIF_SPEED_RANGE),
            }
        case ImageFormat.PNG:
            # Pillow 默认使用自适应行过滤
            return {"compress_level": get_config().encode.PNG_COMPRESS_LEVEL}
        case ImageFormat.WEBP:
            return {"lossless": True}
        case _:
            if config.quality is not None or config.speed is not None:
                logger.debug(f"{config.format.value} 不支持质量和速度参数，已忽略")
            return {}
