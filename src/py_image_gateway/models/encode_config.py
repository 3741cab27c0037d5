"""编码配置模型。"""

from pydantic import BaseModel, ConfigDict, Field

from .formats import ImageFormat


class EncodeConfig(BaseModel):
    """累积的输出参数

    每个 SetFormat/SetSpeed/SetQuality 操作覆盖之前的值，未设置的字段在编码时
    回退到格式默认值。
    """

    model_config = ConfigDict(validate_assignment=True)

    format: ImageFormat = Field(description="输出格式")
    speed: int | None = Field(None, ge=0, le=255, description="编码速度")
    quality: int | None = Field(None, ge=0, le=255, description="编码质量")
