"""阻塞任务执行器模块。

解码、变换、编码都是 CPU 密集的阻塞操作，放在独立的线程池中执行，避免阻塞事件循环上
其他正在处理的请求。
"""

import asyncio
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from ..exceptions import GatewayError, ProcessingError


logger = logging.getLogger(__name__)
T = TypeVar("T")


class BlockingExecutor:
    """阻塞任务线程池

    工作线程中抛出的 GatewayError 原样传回；其他任何异常都视为工作线程故障，
    转换为 ProcessingError。
    """

    def __init__(self, max_workers: int = 4):
        """初始化执行器

        Args:
            max_workers: 最大工作线程数
        """
        self.max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None

    @property
    def executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="image-worker"
            )
        return self._executor

    async def run(self, func: Callable[..., T], *args: Any) -> T:
        """在工作线程中执行 func，当前协程挂起直到完成"""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, func, *args)
        except GatewayError:
            raise
        except asyncio.CancelledError:
            logger.debug("客户端断开，放弃等待工作线程结果")
            raise
        except Exception as e:
            logger.error(f"工作线程异常终止: {e!r}")
            raise ProcessingError(f"工作线程异常终止: {e!r}") from e

    def shutdown(self) -> None:
        """关闭线程池，等待正在执行的任务结束"""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
