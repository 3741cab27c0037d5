"""图像网关 MCP 服务器。

为智能体提供构建签名路径和检查路径的工具，不获取源图。
"""

import logging
from typing import Any

from fastmcp import FastMCP

from .config import get_config
from .core.params import build_path, parse_params
from .core.signature import sign_path
from .exceptions import GatewayError
from .utils.logging_helpers import configure_logging


# MCP 服务器响应类型定义
MCPResponse = dict[str, Any]

logger = logging.getLogger(__name__)

# 创建MCP应用
mcp = FastMCP("图像变换网关")


def build_signed_path(image_url: str, filters: list[str] | None = None) -> MCPResponse:
    """构建带签名的网关路径

    未配置密钥时使用占位签名 ``_``，服务端此时不校验签名。
    """
    try:
        path = build_path(image_url, filters or [])
        # 先解析一遍，保证返回的路径服务端一定能接受
        parse_params(path)
    except GatewayError as e:
        logger.warning(f"构建路径失败: {e}")
        return {"success": False, "error": e.message}

    security = get_config().security
    signature = sign_path(path, security.KEY) if security.signature_enabled else "_"
    return {
        "success": True,
        "path": f"/{signature}/{path}",
        "signed": security.signature_enabled,
    }


def describe_path(path: str) -> MCPResponse:
    """解析签名段之后的路径，返回源图 URL 和操作列表"""
    try:
        parsed = parse_params(path.lstrip("/"))
    except GatewayError as e:
        return {"success": False, "error": e.message}

    return {
        "success": True,
        "source_url": parsed.source_url,
        "operations": [operation.model_dump() for operation in parsed.operations],
    }


@mcp.tool()
def sign_image_path(image_url: str, filters: list[str] | None = None) -> MCPResponse:
    """🔏 构建带签名的图像网关路径

    Args:
        image_url: 源图 URL（http/https）
        filters: 过滤指令列表，如 ["resize:800:600", "format:webp", "quality:85"]

    Returns:
        dict: 包含可直接请求的路径，形如 /{signature}/{filters}/{source}
    """
    return build_signed_path(image_url, filters)


@mcp.tool()
def inspect_image_path(path: str) -> MCPResponse:
    """🔍 检查签名段之后的路径

    Args:
        path: 如 "resize:800:600/format:webp/aHR0cHM6Ly9leGFtcGxlLmNvbS9hLnBuZw"

    Returns:
        dict: 源图 URL 和按顺序排列的操作
    """
    return describe_path(path)


def main() -> None:
    """启动 MCP 服务器"""
    app_config = get_config()
    configure_logging(app_config.logging.LOG_LEVEL, app_config.logging.LOG_FORMAT)
    logger.info("启动图像网关 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
