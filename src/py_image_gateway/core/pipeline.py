"""操作流水线模块。

按路径顺序对 (图像, 编码配置) 做左折叠。格式、速度、质量后写覆盖先写，
缩放和旋转每次都生成新的图像对象。
"""

from collections.abc import Iterable

from PIL import Image

from ..exceptions import ProcessingError, handle_image_errors
from ..models.encode_config import EncodeConfig
from ..models.formats import ImageFormat
from ..models.operations import Operation, Resize, Rotate, SetFormat, SetQuality, SetSpeed


# Pillow 的 ROTATE_* 是逆时针方向
_CLOCKWISE_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


@handle_image_errors("图像变换", ProcessingError)
def apply_operations(
    image: Image.Image,
    input_format: ImageFormat,
    operations: Iterable[Operation],
) -> tuple[Image.Image, EncodeConfig]:
    """依次应用操作

    Args:
        image: 解码后的图像
        input_format: 输入格式，作为输出格式的初始值
        operations: 按路径顺序排列的操作

    Returns:
        tuple: (变换后的图像, 最终编码配置)
    """
    config = EncodeConfig(format=input_format)

    for operation in operations:
        match operation:
            case SetFormat(format=image_format):
                config.format = image_format
            case SetSpeed(speed=speed):
                config.speed = speed
            case SetQuality(quality=quality):
                config.quality = quality
            case Resize(width=width, height=height):
                image = image.resize((width, height), Image.Resampling.LANCZOS)
            case Rotate(degrees=degrees):
                image = image.transpose(_CLOCKWISE_TRANSPOSE[degrees])

    return image, config
