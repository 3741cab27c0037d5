"""图像操作模型。

路径中的每个过滤指令对应一个不可变的操作对象，按路径顺序组成操作序列。
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .formats import ImageFormat


class _Operation(BaseModel):
    """操作基类，构造后不可修改"""

    model_config = ConfigDict(frozen=True)


class SetFormat(_Operation):
    """设置输出格式"""

    kind: Literal["format"] = "format"
    format: ImageFormat = Field(description="输出格式")


class SetSpeed(_Operation):
    """设置编码速度"""

    kind: Literal["speed"] = "speed"
    speed: int = Field(ge=0, le=255, description="编码速度")


class SetQuality(_Operation):
    """设置编码质量"""

    kind: Literal["quality"] = "quality"
    quality: int = Field(ge=0, le=255, description="编码质量")


class Resize(_Operation):
    """缩放到精确尺寸，不保持宽高比"""

    kind: Literal["resize"] = "resize"
    width: int = Field(ge=0, lt=2**32, description="目标宽度")
    height: int = Field(ge=0, lt=2**32, description="目标高度")


class Rotate(_Operation):
    """顺时针旋转"""

    kind: Literal["rotate"] = "rotate"
    degrees: Literal[90, 180, 270] = Field(description="归一化后的角度")


Operation = Annotated[
    SetFormat | SetSpeed | SetQuality | Resize | Rotate,
    Field(discriminator="kind"),
]


class ParsedRequest(BaseModel):
    """解析后的请求：源图 URL 和按路径顺序排列的操作"""

    model_config = ConfigDict(frozen=True)

    source_url: str = Field(description="源图 URL")
    operations: tuple[Operation, ...] = Field(default=(), description="操作序列")
