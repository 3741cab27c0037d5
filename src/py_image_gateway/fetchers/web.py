"""HTTP(S) 源站获取器。"""

import httpx

from ..exceptions import FetchError
from ..models.fetch_result import FetchResult
from ..models.formats import (
    ImageFormat,
    format_from_content_type,
    format_from_filename,
)
from ..utils.http_helpers import parse_content_disposition_filename
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter


logger = get_logger()


class WebFetcher:
    """通过 httpx 获取远程图像

    共享一个 AsyncClient，跟随重定向，不设置超时（超时由部署环境负责）。
    """

    def __init__(
        self,
        user_agent: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """初始化获取器

        Args:
            user_agent: 发往源站的 User-Agent
            transport: 自定义传输层，测试时注入 httpx.MockTransport
        """
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                timeout=None,
                transport=self._transport,
            )
        return self._client

    async def fetch(self, url: str) -> FetchResult:
        """获取图像

        Raises:
            FetchError: 传输失败或源站返回非 2xx 状态
        """
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(MessageFormatter.fetch_failed(url, e))
            raise FetchError(f"获取源图失败: {e}") from e

        filename = None
        if disposition := response.headers.get("Content-Disposition"):
            filename = parse_content_disposition_filename(disposition)

        return FetchResult(
            data=response.content,
            filename=filename,
            declared_format=self._declared_format(response, filename),
        )

    @staticmethod
    def _declared_format(
        response: httpx.Response, filename: str | None
    ) -> ImageFormat | None:
        """Content-Type 优先，其次文件名扩展名"""
        if content_type := response.headers.get("Content-Type"):
            if image_format := format_from_content_type(content_type):
                return image_format
        if filename:
            return format_from_filename(filename)
        return None

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
