"""路径解析测试。"""

import pytest

from py_image_gateway.core.params import (
    build_path,
    decode_base64url,
    encode_source_url,
    parse_filter,
    parse_params,
)
from py_image_gateway.exceptions import InvalidRequestError, ParseError
from py_image_gateway.models.formats import ImageFormat
from py_image_gateway.models.operations import (
    Resize,
    Rotate,
    SetFormat,
    SetQuality,
    SetSpeed,
)


class TestParseParams:
    """完整路径解析测试"""

    def test_parses_filters_in_path_order(self):
        """测试指令按路径顺序解析"""
        result = parse_params("resize:800:600/format:webp/quality:85/rotate:90/cGF0aA")

        assert result.source_url == "path"
        assert result.operations == (
            Resize(width=800, height=600),
            SetFormat(format=ImageFormat.WEBP),
            SetQuality(quality=85),
            Rotate(degrees=90),
        )

    def test_url_only(self):
        """测试没有指令的路径"""
        result = parse_params(encode_source_url("https://example.com/a.png"))

        assert result.source_url == "https://example.com/a.png"
        assert result.operations == ()

    def test_missing_image_url(self):
        """测试缺少源图 URL"""
        with pytest.raises(InvalidRequestError):
            parse_params("resize:800:600")

    def test_empty_path(self):
        """测试空路径"""
        with pytest.raises(ParseError):
            parse_params("")

    def test_trailing_slash(self):
        """测试最后一段为空"""
        with pytest.raises(ParseError):
            parse_params("resize:800:600/")

    def test_invalid_image_url(self):
        """测试非法的 base64 字符"""
        with pytest.raises(ParseError):
            parse_params("resize:800:600/!!!")

    def test_standard_base64_alphabet_rejected(self):
        """测试标准 base64 字母表中的 + 和 / 不被接受"""
        with pytest.raises(ParseError):
            parse_params("a+b=")

    def test_non_utf8_url(self):
        """测试解码结果不是 UTF-8"""
        with pytest.raises(ParseError):
            parse_params("__8")

    def test_padded_and_unpadded_url(self):
        """测试带填充和不带填充的 URL 都能解析"""
        assert parse_params("aHR0cA==").source_url == "http"
        assert parse_params("aHR0cA").source_url == "http"

    def test_invalid_filter(self):
        """测试未知指令"""
        with pytest.raises(ParseError):
            parse_params("invalidfilter/cGF0aA")

    def test_directive_names_are_case_sensitive(self):
        """测试指令名区分大小写"""
        with pytest.raises(ParseError):
            parse_params("Resize:10:10/cGF0aA")

    def test_invalid_number(self):
        """测试非数字参数"""
        with pytest.raises(ParseError):
            parse_params("quality:high/cGF0aA")

    def test_build_path_round_trip(self):
        """测试构建的路径可以被解析"""
        path = build_path("https://example.com/cat.jpg", ["resize:10:20", "format:png"])
        result = parse_params(path)

        assert result.source_url == "https://example.com/cat.jpg"
        assert result.operations == (
            Resize(width=10, height=20),
            SetFormat(format=ImageFormat.PNG),
        )


class TestParseFilter:
    """单个指令解析测试"""

    @pytest.mark.parametrize(
        ("segment", "expected"),
        [
            ("rotate:90", Rotate(degrees=90)),
            ("rotate:180", Rotate(degrees=180)),
            ("rotate:270", Rotate(degrees=270)),
            ("rotate:450", Rotate(degrees=90)),
            ("rotate:0", None),
            ("rotate:360", None),
            ("rotate:720", None),
        ],
    )
    def test_rotation_normalization(self, segment, expected):
        """测试旋转角度归一化，0 度不产生操作"""
        assert parse_filter(segment) == expected

    @pytest.mark.parametrize("segment", ["rotate:45", "rotate:91", "rotate:-90", "rotate:x"])
    def test_invalid_rotation(self, segment):
        """测试非 90 倍数或非数字的角度"""
        with pytest.raises(ParseError):
            parse_filter(segment)

    def test_zero_rotation_is_dropped_from_path(self):
        """测试 0 度旋转不进入操作序列"""
        result = parse_params("rotate:360/quality:10/cGF0aA")
        assert result.operations == (SetQuality(quality=10),)

    @pytest.mark.parametrize(
        ("extension", "expected"),
        [
            ("jpg", ImageFormat.JPEG),
            ("JPEG", ImageFormat.JPEG),
            ("png", ImageFormat.PNG),
            ("webp", ImageFormat.WEBP),
            ("avif", ImageFormat.AVIF),
            ("exr", ImageFormat.OPENEXR),
            ("ff", ImageFormat.FARBFELD),
            ("ppm", ImageFormat.PNM),
        ],
    )
    def test_format_extensions(self, extension, expected):
        """测试扩展名到格式的映射"""
        assert parse_filter(f"format:{extension}") == SetFormat(format=expected)

    def test_unknown_format(self):
        """测试未知扩展名"""
        with pytest.raises(ParseError):
            parse_filter("format:docx")

    def test_speed_and_quality_bounds(self):
        """测试速度和质量的取值范围 0-255"""
        assert parse_filter("speed:0") == SetSpeed(speed=0)
        assert parse_filter("quality:255") == SetQuality(quality=255)
        with pytest.raises(ParseError):
            parse_filter("quality:256")
        with pytest.raises(ParseError):
            parse_filter("speed:-1")

    def test_resize_requires_two_integers(self):
        """测试缩放参数个数和类型"""
        with pytest.raises(ParseError):
            parse_filter("resize:800")
        with pytest.raises(ParseError):
            parse_filter("resize:800:abc")
        with pytest.raises(ParseError):
            parse_filter("resize:1:2:3")

    def test_integer_syntax_is_strict(self):
        """测试不接受空白和下划线分隔的数字"""
        with pytest.raises(ParseError):
            parse_filter("quality: 5")
        with pytest.raises(ParseError):
            parse_filter("quality:1_0")


class TestBase64:
    """宽松 base64url 解码测试"""

    def test_strips_padding(self):
        assert decode_base64url("cGF0aA==") == b"path"
        assert decode_base64url("cGF0aA") == b"path"

    def test_rejects_invalid_length(self):
        with pytest.raises(ValueError):
            decode_base64url("cGF0a")
