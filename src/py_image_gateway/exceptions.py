"""网关异常处理模块。

定义统一的异常类和错误处理机制。每个异常带有 HTTP 状态码和固定的对外消息，
内部细节只写入日志，不返回给调用方。
"""

from collections.abc import Callable
from functools import wraps
from typing import ClassVar, TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .utils.logging_helpers import get_logger


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class GatewayError(Exception):
    """网关错误基类"""

    status_code: ClassVar[int] = 500
    public_message: ClassVar[str] = "Internal error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ForbiddenError(GatewayError):
    """请求被拒绝（403）"""

    status_code = 403
    public_message = "Invalid signature"


class InvalidRequestError(GatewayError):
    """请求无法处理（422）"""

    status_code = 422
    public_message = "Invalid params"


class OriginUnavailableError(GatewayError):
    """源站不可用（404）"""

    status_code = 404
    public_message = "Fetching remote image failed"


class SignatureError(ForbiddenError):
    """签名格式错误或不匹配，两种情况不做区分"""

    pass


class ParseError(InvalidRequestError):
    """路径语法错误"""

    pass


class UnsupportedSchemeError(InvalidRequestError):
    """源图 URL 协议没有对应的获取器"""

    public_message = "Unsupported protocol for remote image"


class UnknownFormatError(InvalidRequestError):
    """无法确定输入格式"""

    public_message = "Unable to determine image format"


class DecodingError(InvalidRequestError):
    """解码失败"""

    public_message = "Decoding image failed"


class ProcessingError(InvalidRequestError):
    """处理过程错误，包括工作线程的意外故障"""

    public_message = "Processing image failed"


class UnsupportedFormatError(InvalidRequestError):
    """不支持的输出格式"""

    public_message = "Unsupported output format"


class EncodingError(InvalidRequestError):
    """编码失败"""

    public_message = "Encoding image failed"


class FetchError(OriginUnavailableError):
    """获取源图失败"""

    pass


def handle_image_errors(
    operation_name: str, error_cls: type[GatewayError] = ProcessingError
):
    """统一的图像处理异常处理装饰器

    将 Pillow、OpenCV 以及参数错误转换为 error_cls，已经是 GatewayError 的异常原样抛出。

    Args:
        operation_name: 操作名称，用于日志记录
        error_cls: 转换后的异常类型
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except GatewayError:
                raise
            except UnidentifiedImageError as e:
                logger.warning(f"{operation_name} - 无法识别图像格式: {e}")
                raise error_cls(f"无法识别图像格式: {e}") from e
            except DecompressionBombError as e:
                logger.warning(f"{operation_name} - 图像过大: {e}")
                raise error_cls(f"图像过大，可能存在安全风险: {e}") from e
            except OSError as e:
                logger.warning(f"{operation_name} - 编解码失败: {e}")
                raise error_cls(f"编解码失败: {e}") from e
            except (ValueError, TypeError, KeyError) as e:
                logger.warning(f"{operation_name} - 参数错误: {e}")
                raise error_cls(f"参数错误: {e}") from e
            except Exception as e:
                logger.error(f"{operation_name} - 未知错误: {e}")
                raise error_cls(f"处理失败: {e}") from e

        return wrapper

    return decorator
