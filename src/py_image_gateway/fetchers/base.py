"""获取器接口。"""

from typing import Protocol

from ..models.fetch_result import FetchResult


class Fetcher(Protocol):
    """从源站获取图像的能力

    任何传输或源站错误都应抛出 FetchError。
    """

    async def fetch(self, url: str) -> FetchResult: ...

    async def aclose(self) -> None: ...
