"""日志消息格式化工具模块。

这里的消息只写入日志。返回给客户端的消息是异常类上固定的 public_message，
不经过这里。
"""

from typing import Any


# 日志中 URL 和路径的最大长度
MAX_LOGGED_LENGTH = 120


class MessageFormatter:
    """统一的日志消息格式化器"""

    @staticmethod
    def truncate(value: str, limit: int = MAX_LOGGED_LENGTH) -> str:
        """截断过长的路径或 URL"""
        if len(value) <= limit:
            return value
        return f"{value[:limit]}…"

    @classmethod
    def fetch_failed(cls, url: str, error: Exception) -> str:
        """源站获取失败"""
        return f"获取源图失败: {cls.truncate(url)} - {error}"

    @classmethod
    def request_rejected(cls, error: Exception, path: str) -> str:
        """请求在某个阶段被拒绝"""
        return f"请求被拒绝 [{type(error).__name__}] {cls.truncate(path)}: {error}"

    @staticmethod
    def invalid_value(field: str, value: Any, expected: str | None = None) -> str:
        """路径参数取值非法"""
        msg = f"参数非法 - {field}: {value!r}"
        if expected:
            msg += f" (期望: {expected})"
        return msg


def format_validation_error(field: str, value: Any, expected: str | None = None) -> str:
    """格式化路径参数错误消息"""
    return MessageFormatter.invalid_value(field, value, expected)
