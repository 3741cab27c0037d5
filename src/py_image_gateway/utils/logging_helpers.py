"""日志工具模块。

模块通过 get_logger() 获取以模块名命名的日志记录器，进程入口调用一次
configure_logging() 完成初始化。
"""

import inspect
import logging


# 这些库在 INFO 级别会为每个请求打一条日志
NOISY_LOGGERS = ("httpx", "httpcore")


def get_logger(name: str | None = None) -> logging.Logger:
    """获取日志记录器。

    Args:
        name: 日志记录器名称，默认使用调用模块的 __name__
    """
    if name is None:
        frame = inspect.currentframe()
        caller = frame.f_back if frame else None
        name = caller.f_globals.get("__name__", "py_image_gateway") if caller else "py_image_gateway"

    return logging.getLogger(name)


def configure_logging(level: str = "INFO", log_format: str | None = None) -> None:
    """按配置初始化根日志记录器

    Args:
        level: 日志级别名称
        log_format: 日志格式，None 时使用 logging 默认格式
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=log_format or logging.BASIC_FORMAT)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
