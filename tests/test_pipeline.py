"""操作流水线测试。"""

import pytest

from py_image_gateway.core.params import parse_params
from py_image_gateway.core.pipeline import apply_operations
from py_image_gateway.models.formats import ImageFormat
from py_image_gateway.models.operations import Resize, Rotate, SetFormat, SetQuality, SetSpeed
from tests.conftest import create_test_image


RED = (255, 0, 0, 255)


class TestApplyOperations:
    """流水线折叠测试"""

    def test_empty_operations_keep_input(self, sample_image):
        """测试没有操作时保持输入格式和图像"""
        image, config = apply_operations(sample_image, ImageFormat.PNG, [])

        assert image.size == (64, 48)
        assert config.format is ImageFormat.PNG
        assert config.speed is None
        assert config.quality is None

    def test_last_writer_wins(self, sample_image):
        """测试格式、质量、速度后写覆盖先写"""
        operations = parse_params("format:webp/format:png/quality:50/cGF0aA").operations
        _, config = apply_operations(sample_image, ImageFormat.JPEG, operations)

        assert config.format is ImageFormat.PNG
        assert config.quality == 50

    def test_speed_and_quality_overwrite(self, sample_image):
        """测试重复的速度和质量指令"""
        operations = [SetSpeed(speed=3), SetQuality(quality=10), SetSpeed(speed=7), SetQuality(quality=90)]
        _, config = apply_operations(sample_image, ImageFormat.AVIF, operations)

        assert config.speed == 7
        assert config.quality == 90

    def test_resize_exact_dimensions(self, sample_image):
        """测试缩放到精确尺寸，不保持宽高比"""
        image, _ = apply_operations(sample_image, ImageFormat.PNG, [Resize(width=10, height=30)])
        assert image.size == (10, 30)

    def test_resize_twice(self, sample_image):
        """测试多次缩放按顺序执行"""
        operations = [Resize(width=100, height=100), Resize(width=8, height=4)]
        image, _ = apply_operations(sample_image, ImageFormat.PNG, operations)
        assert image.size == (8, 4)

    def test_input_image_untouched(self, sample_image):
        """测试变换不修改输入图像"""
        apply_operations(sample_image, ImageFormat.PNG, [Resize(width=5, height=5), Rotate(degrees=90)])
        assert sample_image.size == (64, 48)

    @pytest.mark.parametrize(
        ("degrees", "expected_size", "red_corner"),
        [
            (90, (48, 64), (47, 0)),
            (180, (64, 48), (63, 47)),
            (270, (48, 64), (0, 63)),
        ],
    )
    def test_clockwise_rotation(self, degrees, expected_size, red_corner):
        """测试顺时针旋转：左上角的红色标记移动到对应角落"""
        image, _ = apply_operations(create_test_image(), ImageFormat.PNG, [Rotate(degrees=degrees)])

        assert image.size == expected_size
        assert image.getpixel(red_corner) == RED
        assert image.getpixel((0, 0)) != RED

    def test_rotate_then_resize_order(self, sample_image):
        """测试操作按路径顺序执行"""
        operations = [Rotate(degrees=90), Resize(width=20, height=10)]
        image, _ = apply_operations(sample_image, ImageFormat.PNG, operations)
        assert image.size == (20, 10)

        operations = [Resize(width=20, height=10), Rotate(degrees=90)]
        image, _ = apply_operations(sample_image, ImageFormat.PNG, operations)
        assert image.size == (10, 20)

    def test_format_change_does_not_touch_pixels(self, sample_image):
        """测试格式指令只修改编码配置"""
        image, config = apply_operations(sample_image, ImageFormat.PNG, [SetFormat(format=ImageFormat.JPEG)])

        assert config.format is ImageFormat.JPEG
        assert image.mode == "RGBA"
        assert image.size == sample_image.size
