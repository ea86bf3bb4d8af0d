"""QQ JSON：QQChatExporter V4 导出。

根节点大致为：
- chatInfo: {name, type}
- statistics: {...}（不可信，这里不用）
- messages: [{messageId, timestamp, sender{uid,uin,name}, content{text}, rawMessage{...}, ...}]

归一化规则：
- 成员：按发送者首次出现顺序建表，展示名取最新的非空名字
- 消息：与 messages 一一对应，不过滤、不去重、不重排
- timestamp：统一为 epoch 秒（ISO 字符串按 Config.TIMESTAMP_MODE 解释）
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from ..config import Config
from .base import ChatParser
from .core import has_suffix, filename_stem, looks_like_number, norm_str, participant_id_from_uid_uin, to_epoch_seconds
from .enums import ChatPlatform, ChatType, ElementType, NTMsgType
from .schema import ConversationMeta, Member, Message, ParseResult, safe_int


logger = logging.getLogger(__name__)


def _extract_sender_names_from_raw_message(raw_message: Optional[Dict[str, Any]]) -> Tuple[Optional[str], Optional[str]]:
    """按当前 exporter JSON 的结构提取名字：

    - 群昵称：rawMessage.sendMemberName
    - QQ 名称：rawMessage.sendNickName
    """

    if not isinstance(raw_message, dict):
        return None, None

    return norm_str(raw_message.get("sendMemberName")), norm_str(raw_message.get("sendNickName"))


def _is_system_from_raw_message(raw_message: Any) -> bool:
    """灰条提示（撤回、入群等）在 rawMessage 里通过 msgType=5 或 grayTipElement 表达。"""

    if not isinstance(raw_message, dict):
        return False

    if safe_int(raw_message.get("msgType")) == NTMsgType.KMSGTYPEGRAYTIPS:
        return True

    elements = raw_message.get("elements")
    if isinstance(elements, list):
        for el in elements:
            if isinstance(el, dict) and isinstance(el.get("grayTipElement"), dict):
                return True
    return False


def _scan_elements(raw_message: Any) -> Tuple[Dict[int, int], str, bool]:
    """统计 rawMessage.elements。

    返回：
    - element_counts: elementType -> count
    - clean_text: TEXT 且 atType=0 的 content 拼接结果
    - has_reply: 是否带 REPLY 元素
    """

    element_counts: Dict[int, int] = {}
    clean_parts: List[str] = []
    has_reply = False

    if not isinstance(raw_message, dict):
        return element_counts, "", has_reply

    elements = raw_message.get("elements")
    if not isinstance(elements, list):
        return element_counts, "", has_reply

    for el in elements:
        if not isinstance(el, dict):
            continue
        et = safe_int(el.get("elementType"))
        if et is None:
            continue
        element_counts[et] = element_counts.get(et, 0) + 1

        if et == ElementType.TEXT:
            te = el.get("textElement")
            if not isinstance(te, dict):
                continue
            if (safe_int(te.get("atType")) or 0) == 0 and te.get("content") is not None:
                clean_parts.append(str(te.get("content")))
        elif et == ElementType.REPLY and isinstance(el.get("replyElement"), dict):
            has_reply = True

    return element_counts, "".join(clean_parts).strip(), has_reply


def _infer_message_type(is_system: bool, has_reply: bool, element_counts: Dict[int, int], text: str) -> str:
    # 优先看系统/回复；其次看 element_counts
    if is_system:
        return "system"
    if has_reply:
        return "reply"
    if element_counts.get(ElementType.PIC, 0) > 0:
        return "image"
    if element_counts.get(ElementType.VIDEO, 0) > 0:
        return "video"
    if element_counts.get(ElementType.PTT, 0) > 0:
        return "audio"
    if element_counts.get(ElementType.FILE, 0) > 0:
        return "file"
    has_face = element_counts.get(ElementType.FACE, 0) > 0 or element_counts.get(ElementType.MFACE, 0) > 0
    if has_face and not text.strip():
        return "emoji"
    return "text"


class QQJsonParser(ChatParser):
    name = "QQ JSON"
    platform = "qq"

    def __init__(self, timestamp_mode: Optional[str] = None):
        self.timestamp_mode = (timestamp_mode or Config.TIMESTAMP_MODE).strip().lower()

    def _looks_like(self, content: str, filename: str) -> bool:
        if not has_suffix(filename, ".json"):
            return False

        data = json.loads(content)
        if not isinstance(data, dict) or "chatlab" in data:
            return False

        chat_info = data.get("chatInfo")
        if not isinstance(chat_info, dict):
            return False
        return isinstance(chat_info.get("name"), str) or isinstance(chat_info.get("type"), str)

    def parse(self, content: str, filename: str) -> ParseResult:
        root = self._load_json(content)

        if not isinstance(root, dict):
            raise self._fail("JSON 根节点不是对象（dict）")

        msgs = root.get("messages")
        if not isinstance(msgs, list):
            raise self._fail("JSON 中缺少 messages 列表")

        chat_info = root.get("chatInfo")
        if not isinstance(chat_info, dict):
            raise self._fail("JSON 中缺少 chatInfo 对象")

        title = chat_info.get("name")
        if not isinstance(title, str) or not title.strip():
            title = filename_stem(filename)

        meta = ConversationMeta(
            name=title,
            platform=ChatPlatform.QQ,
            type=ChatType.coerce(chat_info.get("type")),
        )

        members_by_id: Dict[str, Member] = {}
        messages: List[Message] = []

        for idx, m in enumerate(msgs):
            if not isinstance(m, dict):
                raise self._fail(f"messages[{idx}] 不是对象")

            ts = to_epoch_seconds(m.get("timestamp"), self.timestamp_mode)
            if ts is None:
                raise self._fail(f"messages[{idx}] 时间戳无法解析: {m.get('timestamp')!r}")

            sender_obj = m.get("sender") if isinstance(m.get("sender"), dict) else {}
            raw_message = m.get("rawMessage") if isinstance(m.get("rawMessage"), dict) else None

            # sender 身份：优先 sender.uid，其次 rawMessage.senderUid（系统灰条可能缺 uid）
            raw_uid = norm_str(raw_message.get("senderUid")) if raw_message else None
            raw_uin = norm_str(raw_message.get("senderUin")) if raw_message else None
            member_name, nick_name = _extract_sender_names_from_raw_message(raw_message)
            fallback_name = norm_str(sender_obj.get("name"))

            sender_id = participant_id_from_uid_uin(
                uid=norm_str(sender_obj.get("uid")) or raw_uid,
                uin=norm_str(sender_obj.get("uin")) or raw_uin,
                fallback_name=fallback_name,
            )
            # 展示名规则：优先群昵称 sendMemberName，其次 QQ 名称 sendNickName
            sender_name = member_name or nick_name or fallback_name or sender_id

            element_counts, clean_text, has_reply = _scan_elements(raw_message)
            is_system = bool(m.get("isSystemMessage", False)) or _is_system_from_raw_message(raw_message)

            # 系统占位 sender：uid=纯数字 且 name="0"，不进成员表
            is_placeholder = fallback_name == "0" and looks_like_number(sender_id)
            if not (is_system and is_placeholder):
                existing = members_by_id.get(sender_id)
                if existing is None:
                    members_by_id[sender_id] = Member(platform_id=sender_id, name=sender_name)
                elif sender_name and existing.name != sender_name:
                    existing.name = sender_name

            content_obj = m.get("content") if isinstance(m.get("content"), dict) else {}
            text = content_obj.get("text")
            if not isinstance(text, str):
                text = clean_text

            messages.append(
                Message(
                    sender_platform_id=sender_id,
                    sender_name=sender_name,
                    timestamp=ts,
                    type=_infer_message_type(is_system, has_reply, element_counts, clean_text or text),
                    content=text,
                )
            )

        members = list(members_by_id.values())
        logger.debug(f"QQ JSON 解析完成: {len(members)} 个成员, {len(messages)} 条消息")
        return ParseResult(meta=meta, members=members, messages=messages)
