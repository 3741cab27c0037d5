"""请求签名模块。

签名是对签名段之后的完整路径做 HMAC-SHA256，再以 URL 安全、无填充的 base64
编码得到。校验在解析路径和获取源图之前完成。
"""

import hashlib
import hmac

from ..exceptions import SignatureError
from .params import decode_base64url, encode_base64url


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def compute_digest(path: str | bytes, key: str | bytes) -> bytes:
    """计算路径的 HMAC-SHA256 摘要"""
    return hmac.new(_as_bytes(key), _as_bytes(path), hashlib.sha256).digest()


def sign_path(path: str | bytes, key: str | bytes) -> str:
    """为路径生成签名段"""
    return encode_base64url(compute_digest(path, key))


def verify_signature(path: str | bytes, signature: str, key: str | bytes) -> None:
    """校验签名

    签名无法解码和摘要不匹配都抛出同一种错误，不向调用方区分两者。

    Raises:
        SignatureError: 签名无效
    """
    expected = compute_digest(path, key)
    try:
        supplied = decode_base64url(signature)
    except ValueError:
        supplied = b""

    if not hmac.compare_digest(expected, supplied):
        raise SignatureError("签名校验失败")
