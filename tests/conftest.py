"""测试配置文件。

提供测试所需的fixtures和配置。
"""

from io import BytesIO

import pytest
from PIL import Image, ImageDraw

from py_image_gateway.engine.orchestrator import RequestOrchestrator
from py_image_gateway.engine.worker_pool import BlockingExecutor
from py_image_gateway.fetchers import FetcherRegistry
from py_image_gateway.models.fetch_result import FetchResult


def create_test_image(size: tuple[int, int] = (64, 48), mode: str = "RGBA") -> Image.Image:
    """创建带图形的测试图片，左上角为红色标记块"""
    img = Image.new(mode, size, color="white")
    draw = ImageDraw.Draw(img)
    for i in range(5):
        x, y = (i * 13) % size[0], (i * 7) % size[1]
        draw.rectangle([x, y, x + 10, y + 8], fill=(i * 50 % 256, 100, 200))
    draw.rectangle([0, 0, 3, 3], fill=(255, 0, 0))
    return img


def to_bytes(img: Image.Image, pillow_format: str = "PNG") -> bytes:
    """将图片编码为字节"""
    buffer = BytesIO()
    img.save(buffer, format=pillow_format)
    return buffer.getvalue()


class StaticFetcher:
    """返回固定结果的获取器，记录调用过的 URL"""

    def __init__(self, result: FetchResult | None = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def sample_image() -> Image.Image:
    """64x48 的 RGBA 测试图片"""
    return create_test_image()


@pytest.fixture
def png_bytes(sample_image: Image.Image) -> bytes:
    return to_bytes(sample_image, "PNG")


@pytest.fixture
def static_fetcher(png_bytes: bytes) -> StaticFetcher:
    return StaticFetcher(FetchResult(data=png_bytes, filename="photo.png"))


@pytest.fixture
def signing_key() -> bytes:
    return b"secret"


def create_orchestrator(fetcher: StaticFetcher, key: bytes | None = None) -> RequestOrchestrator:
    """创建使用固定获取器的编排器"""
    registry = FetcherRegistry({"http": fetcher, "https": fetcher})
    return RequestOrchestrator(
        key=key,
        fetchers=registry,
        executor=BlockingExecutor(max_workers=2),
    )
