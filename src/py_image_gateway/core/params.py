"""路径语法解析模块。

将签名段之后的路径解析为源图 URL 和按顺序排列的操作::

    resize:800:600/format:webp/quality:85/rotate:90/<base64url 源图 URL>

最后一段是 URL 安全、无填充的 base64 编码的源图 URL，之前的每一段都是
``name:arg1:arg2`` 形式的过滤指令。
"""

import base64
import binascii
import re
from collections.abc import Sequence

from ..exceptions import ParseError
from ..models.formats import format_from_extension
from ..models.operations import (
    Operation,
    ParsedRequest,
    Resize,
    Rotate,
    SetFormat,
    SetQuality,
    SetSpeed,
)
from ..utils.message_formatter import format_validation_error


_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]*")
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")

U8_MAX = 2**8 - 1
U32_MAX = 2**32 - 1


def decode_base64url(value: str) -> bytes:
    """宽松的 URL 安全 base64 解码

    先去掉所有 ``=``，再补齐填充，因此带填充和不带填充的输入都可以接受。

    Raises:
        ValueError: 输入包含非法字符或长度不合法
    """
    stripped = value.replace("=", "")
    if not _BASE64URL_RE.fullmatch(stripped):
        raise ValueError("非法的 base64url 字符")
    if len(stripped) % 4 == 1:
        raise ValueError("非法的 base64url 长度")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except binascii.Error as e:
        raise ValueError(str(e)) from e


def encode_base64url(data: bytes) -> str:
    """URL 安全、无填充的 base64 编码"""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def encode_source_url(url: str) -> str:
    """编码源图 URL 作为路径的最后一段"""
    return encode_base64url(url.encode("utf-8"))


def build_path(url: str, filters: Sequence[str] = ()) -> str:
    """构建签名段之后的路径（客户端需要对它签名）"""
    return "/".join([*filters, encode_source_url(url)])


def _parse_unsigned(value: str, maximum: int, field: str) -> int:
    if not _UNSIGNED_RE.fullmatch(value):
        raise ParseError(format_validation_error(field, value, "非负整数"))
    number = int(value)
    if number > maximum:
        raise ParseError(format_validation_error(field, value, f"0-{maximum}"))
    return number


def parse_filter(segment: str) -> Operation | None:
    """解析单个过滤指令

    Returns:
        解析出的操作；归一化后为 0 度的旋转返回 None

    Raises:
        ParseError: 指令名未知、参数个数不对或参数不合法
    """
    match segment.split(":"):
        case ["format", extension]:
            image_format = format_from_extension(extension)
            if image_format is None:
                raise ParseError(format_validation_error("format", extension))
            return SetFormat(format=image_format)
        case ["speed", speed]:
            return SetSpeed(speed=_parse_unsigned(speed, U8_MAX, "speed"))
        case ["quality", quality]:
            return SetQuality(quality=_parse_unsigned(quality, U8_MAX, "quality"))
        case ["resize", width, height]:
            return Resize(
                width=_parse_unsigned(width, U32_MAX, "resize.width"),
                height=_parse_unsigned(height, U32_MAX, "resize.height"),
            )
        case ["rotate", degrees]:
            normalized = _parse_unsigned(degrees, U32_MAX, "rotate") % 360
            if normalized == 0:
                return None
            if normalized not in (90, 180, 270):
                raise ParseError(format_validation_error("rotate", degrees, "90 的倍数"))
            return Rotate(degrees=normalized)
        case _:
            raise ParseError(f"无效的过滤指令: {segment}")


def parse_params(path_without_signature: str) -> ParsedRequest:
    """解析签名段之后的路径

    Raises:
        ParseError: 缺少源图 URL、指令无效或 URL 编码错误
    """
    *filters, encoded_url = path_without_signature.split("/")
    if not encoded_url:
        raise ParseError("缺少源图 URL")

    operations = [
        operation
        for operation in (parse_filter(segment) for segment in filters)
        if operation is not None
    ]

    try:
        url = decode_base64url(encoded_url).decode("utf-8")
    except ValueError as e:
        # UnicodeDecodeError 也是 ValueError
        raise ParseError(f"源图 URL 编码错误: {e}") from e

    return ParsedRequest(source_url=url, operations=tuple(operations))
