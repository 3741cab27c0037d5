"""核心模块包。

请求鉴权与变换流水线：路径解析、签名校验、解码、操作应用和编码分发。
"""

import os


# OpenCV 的 pip 版本默认关闭 EXR 编解码，必须在第一次导入 cv2 之前开启
os.environ.setdefault("OPENCV_IO_ENABLE_OPENEXR", "1")

from .decoder import decode_image, determine_input_format, guess_format
from .encoder import ENCODERS, encode_image, is_encodable
from .formats import FormatProcessor, get_save_parameters
from .params import build_path, encode_source_url, parse_filter, parse_params
from .pipeline import apply_operations
from .processing import process_image
from .signature import sign_path, verify_signature


__all__ = [
    "ENCODERS",
    "FormatProcessor",
    "apply_operations",
    "build_path",
    "decode_image",
    "determine_input_format",
    "encode_image",
    "encode_source_url",
    "get_save_parameters",
    "guess_format",
    "is_encodable",
    "parse_filter",
    "parse_params",
    "process_image",
    "sign_path",
    "verify_signature",
]
