"""HTTP 头工具函数。"""

from email.message import Message


def parse_content_disposition_filename(value: str) -> str | None:
    """从 Content-Disposition 头中提取文件名，支持 RFC 2231 的 filename*"""
    message = Message()
    message["Content-Disposition"] = value
    filename = message.get_filename()
    return filename or None


def build_content_disposition(filename: str | None) -> str:
    """构建响应的 Content-Disposition

    文件名不是可见 ASCII 或包含引号时退回到不带文件名的 inline。
    """
    if not filename:
        return "inline"
    if not all(0x20 <= ord(ch) < 0x7F for ch in filename) or '"' in filename:
        return "inline"
    return f'inline; filename="{filename}"'
