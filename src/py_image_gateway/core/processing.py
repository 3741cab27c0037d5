"""图像处理入口模块。

在工作线程中执行的完整阻塞阶段：解码 -> 变换 -> 编码。
"""

from collections.abc import Sequence

from ..models.encode_config import EncodeConfig
from ..models.formats import ImageFormat
from ..models.operations import Operation
from ..utils.logging_helpers import get_logger
from .decoder import decode_image
from .encoder import encode_image
from .formats import FormatProcessor
from .pipeline import apply_operations


logger = get_logger()


def process_image(
    data: bytes,
    input_format: ImageFormat,
    operations: Sequence[Operation],
) -> tuple[bytes, EncodeConfig, tuple[int, int]]:
    """解码、应用操作并编码

    Args:
        data: 源图字节
        input_format: 已确定的输入格式
        operations: 按路径顺序排列的操作

    Returns:
        tuple: (编码后的字节, 最终编码配置, 输出尺寸)
    """
    decoded = decode_image(data, input_format)
    image, config = apply_operations(decoded, input_format, operations)
    body = encode_image(image, config, FormatProcessor())
    return body, config, image.size
