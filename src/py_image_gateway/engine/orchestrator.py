"""请求编排模块。

单个请求的状态机::

    校验签名 -> 解析路径 -> 选择获取器 -> 获取 -> 确定输入格式
        -> 解码 -> 变换 -> 编码 -> 响应

签名失败进入 Forbidden，解析、格式、解码、变换、编码失败进入 InvalidRequest，
获取失败进入 OriginUnavailable。每个请求独占自己的解析结果、图像和编码配置。
"""

from ..config import AppConfig, get_config
from ..core.decoder import determine_input_format
from ..core.params import parse_params
from ..core.processing import process_image
from ..core.signature import verify_signature
from ..exceptions import (
    FetchError,
    GatewayError,
    UnsupportedSchemeError,
)
from ..fetchers import FetcherRegistry, create_default_registry
from ..models.fetch_result import FetchResult, ImageResponse
from ..models.formats import resolve_content_type
from ..utils.http_helpers import build_content_disposition
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .worker_pool import BlockingExecutor


logger = get_logger()


class RequestOrchestrator:
    """组合签名、解析、获取和处理，产出最终响应"""

    def __init__(
        self,
        key: bytes | None = None,
        fetchers: FetcherRegistry | None = None,
        executor: BlockingExecutor | None = None,
        cache_control: str | None = None,
    ):
        """初始化编排器

        Args:
            key: 签名密钥，None 表示关闭签名校验
            fetchers: 协议到获取器的注册表
            executor: 阻塞任务执行器
            cache_control: 响应的 Cache-Control
        """
        app_config = get_config()
        self.key = key
        self.fetchers = fetchers or create_default_registry(
            app_config.server.USER_AGENT
        )
        self.executor = executor or BlockingExecutor(app_config.server.MAX_WORKERS)
        self.cache_control = cache_control or app_config.server.CACHE_CONTROL

    @classmethod
    def from_config(cls, app_config: AppConfig) -> "RequestOrchestrator":
        """按应用配置创建编排器"""
        return cls(
            key=app_config.security.KEY,
            fetchers=create_default_registry(app_config.server.USER_AGENT),
            executor=BlockingExecutor(app_config.server.MAX_WORKERS),
            cache_control=app_config.server.CACHE_CONTROL,
        )

    async def handle(
        self, signature: str, path: str, signed_path: bytes | None = None
    ) -> ImageResponse:
        """处理一个请求

        Args:
            signature: 路径第一段的签名
            path: 签名段之后的路径（已解码，用于解析）
            signed_path: 参与签名的原始路径字节，None 时使用 path

        Returns:
            ImageResponse: 编码后的图像和响应头

        Raises:
            GatewayError: 按错误类别映射的异常
        """
        try:
            return await self._handle(signature, path, signed_path)
        except GatewayError as e:
            logger.warning(MessageFormatter.request_rejected(e, path))
            raise

    async def _handle(
        self, signature: str, path: str, signed_path: bytes | None
    ) -> ImageResponse:
        # 签名必须在任何解析和网络请求之前完成
        if self.key is not None:
            verify_signature(
                signed_path if signed_path is not None else path, signature, self.key
            )

        params = parse_params(path)

        fetcher = self.fetchers.resolve(params.source_url)
        if fetcher is None:
            raise UnsupportedSchemeError(f"不支持的源图协议: {params.source_url}")

        fetch_result = await self._fetch(fetcher, params.source_url)
        input_format = determine_input_format(
            fetch_result.data, fetch_result.declared_format
        )

        body, encode_config, dimensions = await self.executor.run(
            process_image, fetch_result.data, input_format, params.operations
        )

        response = ImageResponse(
            body=body,
            format=encode_config.format,
            dimensions=dimensions,
            headers={
                "Cache-Control": self.cache_control,
                "Content-Disposition": build_content_disposition(
                    fetch_result.filename
                ),
                "Content-Type": resolve_content_type(encode_config.format),
            },
        )
        logger.info(
            f"处理完成: {MessageFormatter.truncate(params.source_url)} "
            f"({fetch_result.get_size_human()}) -> {response.get_summary()}"
        )
        return response

    @staticmethod
    async def _fetch(fetcher, url: str) -> FetchResult:
        try:
            return await fetcher.fetch(url)
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"获取源图失败: {e!r}") from e

    async def aclose(self) -> None:
        """释放获取器和线程池"""
        await self.fetchers.aclose()
        self.executor.shutdown()
