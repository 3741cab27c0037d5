"""获取结果与响应模型。"""

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field

from .formats import ImageFormat


class BaseResult(BaseModel):
    """结果基类"""

    model_config = ConfigDict(frozen=True)

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class FetchResult(BaseResult):
    """源站返回的原始图像"""

    data: bytes = Field(description="原始字节")
    filename: str | None = Field(None, description="源站提供的文件名")
    declared_format: ImageFormat | None = Field(None, description="源站声明的格式")

    def get_size_human(self) -> str:
        return self.format_size(len(self.data))


class ImageResponse(BaseResult):
    """编码完成、可以直接返回给客户端的图像"""

    body: bytes = Field(description="编码后的字节")
    format: ImageFormat = Field(description="输出格式")
    headers: dict[str, str] = Field(default_factory=dict, description="响应头")
    dimensions: tuple[int, int] | None = Field(None, description="输出尺寸")

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "application/octet-stream")

    def get_summary(self) -> str:
        """响应摘要，用于日志"""
        size = self.format_size(len(self.body))
        if self.dimensions:
            width, height = self.dimensions
            return f"{self.format.value} {width}x{height} {size}"
        return f"{self.format.value} {size}"
