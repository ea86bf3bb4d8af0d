"""ChatLab 专属 JSON 格式。

ChatLab 自己导出的统一格式，结构与归一化模型一一对应：

    {
      "chatlab": {"version": "1.0"},
      "meta": {"name": "...", "platform": "qq", "type": "group"},
      "members": [{"platformId": "...", "name": "..."}],
      "messages": [{"sender": "...", "name": "...", "timestamp": 1700000000, "type": 0, "content": "..."}]
    }

timestamp 为 epoch 秒；type 沿用导出方的取值（数字或字符串），这里不做转换。
"""

from __future__ import annotations

import json
from typing import Any, List

from .base import ChatParser
from .core import has_suffix
from .enums import ChatPlatform, ChatType
from .schema import ConversationMeta, Member, Message, ParseResult


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


class ChatLabJsonParser(ChatParser):
    name = "ChatLab JSON"
    platform = "chatlab"

    def _looks_like(self, content: str, filename: str) -> bool:
        # .chatlab.json 也以 .json 结尾
        if not has_suffix(filename, ".json"):
            return False

        data = json.loads(content)
        if not isinstance(data, dict):
            return False

        chatlab = data.get("chatlab")
        return (
            isinstance(chatlab, dict)
            and isinstance(chatlab.get("version"), str)
            and isinstance(data.get("meta"), dict)
            and isinstance(data.get("members"), list)
            and isinstance(data.get("messages"), list)
        )

    def parse(self, content: str, filename: str) -> ParseResult:
        data = self._load_json(content)

        if not isinstance(data, dict):
            raise self._fail("JSON 根节点不是对象（dict）")
        if not data.get("chatlab"):
            raise self._fail("缺少 chatlab 版本信息")
        meta_obj = data.get("meta")
        if not isinstance(meta_obj, dict):
            raise self._fail("缺少 meta 对象")
        if not isinstance(data.get("members"), list):
            raise self._fail("缺少 members 列表")
        if not isinstance(data.get("messages"), list):
            raise self._fail("缺少 messages 列表")

        name = meta_obj.get("name")
        if name is not None and not isinstance(name, str):
            raise self._fail("meta.name 不是字符串")

        meta = ConversationMeta(
            name=name,
            platform=ChatPlatform.coerce(meta_obj.get("platform")),
            type=ChatType.coerce(meta_obj.get("type")),
        )

        members = [self._member(idx, m) for idx, m in enumerate(data["members"])]
        messages = [self._message(idx, m) for idx, m in enumerate(data["messages"])]

        return ParseResult(meta=meta, members=members, messages=messages)

    def _member(self, idx: int, m: Any) -> Member:
        if not isinstance(m, dict):
            raise self._fail(f"members[{idx}] 不是对象")
        platform_id = m.get("platformId")
        name = m.get("name")
        if not isinstance(platform_id, str) or not platform_id:
            raise self._fail(f"members[{idx}].platformId 缺失或不是字符串")
        if not isinstance(name, str):
            raise self._fail(f"members[{idx}].name 不是字符串")
        return Member(platform_id=platform_id, name=name)

    def _message(self, idx: int, msg: Any) -> Message:
        if not isinstance(msg, dict):
            raise self._fail(f"messages[{idx}] 不是对象")

        errors: List[str] = []
        sender = msg.get("sender")
        sender_name = msg.get("name")
        timestamp = msg.get("timestamp")
        msg_type = msg.get("type")

        if not isinstance(sender, str):
            errors.append("sender")
        if not isinstance(sender_name, str):
            errors.append("name")
        if not _is_number(timestamp):
            errors.append("timestamp")
        if not (isinstance(msg_type, str) or (isinstance(msg_type, int) and not isinstance(msg_type, bool))):
            errors.append("type")
        if errors:
            raise self._fail(f"messages[{idx}] 字段无效: {', '.join(errors)}")

        return Message(
            sender_platform_id=sender,
            sender_name=sender_name,
            timestamp=timestamp,
            type=msg_type,
            content=msg.get("content"),
        )

