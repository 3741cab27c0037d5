"""获取器包。

协议到获取器的映射是纯查表，增加协议只需要注册新的获取器。
"""

from urllib.parse import urlsplit

from .base import Fetcher
from .web import WebFetcher


class FetcherRegistry:
    """按 URL 协议选择获取器"""

    def __init__(self, fetchers: dict[str, Fetcher] | None = None):
        self._fetchers: dict[str, Fetcher] = {}
        for scheme, fetcher in (fetchers or {}).items():
            self.register(scheme, fetcher)

    def register(self, scheme: str, fetcher: Fetcher) -> None:
        self._fetchers[scheme.lower()] = fetcher

    def resolve(self, url: str) -> Fetcher | None:
        """根据 URL 协议获取对应的获取器，无法解析或未注册时返回 None"""
        try:
            parts = urlsplit(url)
        except ValueError:
            return None
        if not parts.scheme or not parts.netloc:
            return None
        return self._fetchers.get(parts.scheme.lower())

    async def aclose(self) -> None:
        """关闭所有获取器，同一个实例只关闭一次"""
        closed: set[int] = set()
        for fetcher in self._fetchers.values():
            if id(fetcher) not in closed:
                closed.add(id(fetcher))
                await fetcher.aclose()


def create_default_registry(user_agent: str) -> FetcherRegistry:
    """创建默认注册表：http 和 https 共用一个 WebFetcher"""
    web_fetcher = WebFetcher(user_agent=user_agent)
    return FetcherRegistry({"http": web_fetcher, "https": web_fetcher})


__all__ = [
    "Fetcher",
    "FetcherRegistry",
    "WebFetcher",
    "create_default_registry",
]
