from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any


### ChatPlatform - 聊天平台
class ChatPlatform(str, Enum):
    QQ = "qq"
    WECHAT = "wechat"
    DISCORD = "discord"
    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"
    CHATLAB = "chatlab"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, value: Any) -> "ChatPlatform":
        """未提供或无法识别的平台一律归为 UNKNOWN。"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN


### ChatType - 会话类型
class ChatType(str, Enum):
    GROUP = "group"
    PRIVATE = "private"

    @classmethod
    def coerce(cls, value: Any) -> "ChatType":
        """未提供或无法识别的类型一律归为 GROUP。"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.GROUP


# NTMsgType - QQ 主消息类型（QQ JSON 的 rawMessage.msgType）
class NTMsgType(IntEnum):
    KMSGTYPEUNKNOWN = 0  # 未知消息
    KMSGTYPENULL = 1  # 空消息
    KMSGTYPEMIX = 2  # 混合消息（文本+图片等）
    KMSGTYPEFILE = 3  # 文件消息
    KMSGTYPESTRUCT = 4  # 结构化消息（JSON 卡片）
    KMSGTYPEGRAYTIPS = 5  # 灰色提示/系统消息
    KMSGTYPEPTT = 6  # 语音
    KMSGTYPEVIDEO = 7  # 视频
    KMSGTYPEMULTIMSGFORWARD = 8  # 合并转发
    KMSGTYPEREPLY = 9  # 回复


## ElementType - 消息内部元素（rawMessage.elements[].elementType）
class ElementType(IntEnum):
    UNKNOWN = 0  # 未知元素
    TEXT = 1  # 文本
    PIC = 2  # 图片
    FILE = 3  # 文件
    PTT = 4  # 语音
    VIDEO = 5  # 视频
    FACE = 6  # QQ 表情
    REPLY = 7  # 回复引用
    GreyTip = 8  # 灰色提示（拍一拍/撤回等）
    MFACE = 11  # 商城表情


__all__ = [
    "ChatPlatform",
    "ChatType",
    "NTMsgType",
    "ElementType",
]
