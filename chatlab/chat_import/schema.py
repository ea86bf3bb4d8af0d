"""聊天归一化数据模型。

目标：
- 把不同来源（ChatLab JSON / QQ JSON / QQ TXT）的聊天记录统一为同一套结构
- 每次解析都重新构造，解析之间不共享任何可变状态

说明：
- timestamp 保留各格式自身的 epoch 语义，不在这里做跨格式换算
- message.type 的取值由各格式自行决定，不做统一词表
- members / messages 按源文件顺序保存，不排序、不去重
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .enums import ChatPlatform, ChatType


@dataclass(frozen=True)
class FormatDescriptor:
    name: str
    platform: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "platform": self.platform}


@dataclass
class ConversationMeta:
    name: Optional[str] = None
    platform: ChatPlatform = ChatPlatform.UNKNOWN
    type: ChatType = ChatType.GROUP


@dataclass
class Member:
    # 平台原生标识（QQ uid / uin 等），同一文件内应稳定
    platform_id: str
    name: str


@dataclass
class Message:
    sender_platform_id: str
    sender_name: str
    timestamp: Union[int, float]
    type: Union[str, int]
    # 文本，或格式自带的不透明载荷
    content: Any = None


@dataclass
class ParseResult:
    meta: ConversationMeta
    members: List[Member] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """输出 ChatLab 风格（camelCase）的字典，便于直接 JSON 序列化。"""

        return {
            "meta": {
                "name": self.meta.name,
                "platform": self.meta.platform.value,
                "type": self.meta.type.value,
            },
            "members": [{"platformId": m.platform_id, "name": m.name} for m in self.members],
            "messages": [
                {
                    "senderPlatformId": msg.sender_platform_id,
                    "senderName": msg.sender_name,
                    "timestamp": msg.timestamp,
                    "type": msg.type,
                    "content": msg.content,
                }
                for msg in self.messages
            ],
        }


def safe_int(value: Any) -> Optional[int]:
    try:
        if value is None:
            return None
        return int(value)
    except (TypeError, ValueError):
        return None
