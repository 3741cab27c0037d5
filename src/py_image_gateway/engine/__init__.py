"""请求处理引擎模块。

包含请求编排和阻塞任务执行等核心处理逻辑。
"""

from .orchestrator import RequestOrchestrator
from .worker_pool import BlockingExecutor


__all__ = [
    "BlockingExecutor",
    "RequestOrchestrator",
]
