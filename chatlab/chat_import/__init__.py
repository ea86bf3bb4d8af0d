"""聊天导入与归一化层。

提供一个统一入口：识别不同来源（ChatLab JSON / QQ JSON / QQ TXT）的导出文件，
并把它们加载为统一结构（meta / members / messages）。
"""

from .base import ChatParser
from .enums import ChatPlatform, ChatType
from .errors import ChatImportError, FileTooLargeError, FormatError, UnrecognizedFormatError
from .loader import detect_file_format, load_chat_file
from .registry import FormatRegistry, build_default_registry
from .schema import ConversationMeta, FormatDescriptor, Member, Message, ParseResult

__all__ = [
    "ChatParser",
    "ChatPlatform",
    "ChatType",
    "ChatImportError",
    "FileTooLargeError",
    "FormatError",
    "UnrecognizedFormatError",
    "detect_file_format",
    "load_chat_file",
    "FormatRegistry",
    "build_default_registry",
    "ConversationMeta",
    "FormatDescriptor",
    "Member",
    "Message",
    "ParseResult",
]
