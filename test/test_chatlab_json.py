"""ChatLab JSON format detection and parsing."""

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from chatlab.chat_import.chatlab_json import ChatLabJsonParser
from chatlab.chat_import.enums import ChatPlatform, ChatType
from chatlab.chat_import.errors import FormatError


EXAMPLE = (
    '{"chatlab":{"version":"1.0"},"meta":{"name":"Team"},'
    '"members":[{"platformId":"u1","name":"Alice"}],'
    '"messages":[{"sender":"u1","name":"Alice","timestamp":1700000000,"type":"text","content":"hi"}]}'
)


def _doc(**overrides):
    doc = json.loads(EXAMPLE)
    doc.update(overrides)
    return json.dumps(doc)


class TestChatLabJsonDetect(unittest.TestCase):
    """Detector accepts only ChatLab-shaped JSON files."""

    def setUp(self):
        self.parser = ChatLabJsonParser()

    def test_detects_example_export(self):
        self.assertTrue(self.parser.detect(EXAMPLE, "export.json"))

    def test_detects_double_extension(self):
        self.assertTrue(self.parser.detect(EXAMPLE, "Team.CHATLAB.json"))

    def test_rejects_other_extension(self):
        self.assertFalse(self.parser.detect(EXAMPLE, "export.txt"))

    def test_rejects_invalid_json_without_raising(self):
        self.assertFalse(self.parser.detect("{not json", "export.json"))

    def test_rejects_non_object_root(self):
        self.assertFalse(self.parser.detect("[1, 2, 3]", "export.json"))

    def test_rejects_non_string_version(self):
        self.assertFalse(self.parser.detect(_doc(chatlab={"version": 1}), "export.json"))

    def test_rejects_missing_members_array(self):
        self.assertFalse(self.parser.detect(_doc(members={"u1": "Alice"}), "export.json"))

    def test_detects_empty_meta_object(self):
        self.assertTrue(self.parser.detect(_doc(meta={}), "export.json"))

    def test_rejects_non_object_meta(self):
        self.assertFalse(self.parser.detect(_doc(meta=[]), "export.json"))

    def test_detect_is_deterministic(self):
        first = self.parser.detect(EXAMPLE, "export.json")
        second = self.parser.detect(EXAMPLE, "export.json")
        self.assertEqual(first, second)


class TestChatLabJsonParse(unittest.TestCase):
    """Parser maps the ChatLab document 1:1 onto the normalized model."""

    def setUp(self):
        self.parser = ChatLabJsonParser()

    def test_parse_example(self):
        result = self.parser.parse(EXAMPLE, "export.json")
        self.assertEqual("Team", result.meta.name)
        self.assertEqual(1, len(result.members))
        self.assertEqual("u1", result.members[0].platform_id)
        self.assertEqual("Alice", result.members[0].name)
        self.assertEqual(1, len(result.messages))
        msg = result.messages[0]
        self.assertEqual("hi", msg.content)
        self.assertEqual("u1", msg.sender_platform_id)
        self.assertEqual("Alice", msg.sender_name)
        self.assertEqual(1700000000, msg.timestamp)
        self.assertEqual("text", msg.type)

    def test_meta_defaults_when_omitted(self):
        result = self.parser.parse(EXAMPLE, "export.json")
        self.assertIs(ChatPlatform.UNKNOWN, result.meta.platform)
        self.assertIs(ChatType.GROUP, result.meta.type)

    def test_meta_unknown_tags_fall_back(self):
        content = _doc(meta={"name": "Team", "platform": "myspace", "type": "broadcast"})
        result = self.parser.parse(content, "export.json")
        self.assertIs(ChatPlatform.UNKNOWN, result.meta.platform)
        self.assertIs(ChatType.GROUP, result.meta.type)

    def test_meta_known_tags(self):
        content = _doc(meta={"name": "DM", "platform": "wechat", "type": "private"})
        result = self.parser.parse(content, "export.json")
        self.assertIs(ChatPlatform.WECHAT, result.meta.platform)
        self.assertIs(ChatType.PRIVATE, result.meta.type)

    def test_empty_lists_stay_lists(self):
        result = self.parser.parse(_doc(members=[], messages=[]), "export.json")
        self.assertEqual([], result.members)
        self.assertEqual([], result.messages)

    def test_order_and_duplicates_pass_through(self):
        members = [
            {"platformId": "u2", "name": "Bob"},
            {"platformId": "u1", "name": "Alice"},
            {"platformId": "u2", "name": "Bobby"},
        ]
        messages = [
            {"sender": "u2", "name": "Bob", "timestamp": 30, "type": 0, "content": "late"},
            {"sender": "u1", "name": "Alice", "timestamp": 10, "type": 0, "content": "early"},
            {"sender": "u1", "name": "Alice", "timestamp": 10, "type": 0, "content": "early"},
        ]
        result = self.parser.parse(_doc(members=members, messages=messages), "export.json")
        self.assertEqual(["u2", "u1", "u2"], [m.platform_id for m in result.members])
        self.assertEqual(["late", "early", "early"], [m.content for m in result.messages])
        self.assertEqual(0, result.messages[0].type)

    def test_structured_content_is_kept(self):
        messages = [{"sender": "u1", "name": "Alice", "timestamp": 1, "type": 1, "content": None}]
        result = self.parser.parse(_doc(messages=messages), "export.json")
        self.assertIsNone(result.messages[0].content)

    def test_parse_is_idempotent(self):
        self.assertEqual(self.parser.parse(EXAMPLE, "export.json"), self.parser.parse(EXAMPLE, "export.json"))

    def test_invalid_json_raises_format_error(self):
        with self.assertRaises(FormatError) as ctx:
            self.parser.parse("{broken", "export.json")
        self.assertIsNotNone(ctx.exception.cause)

    def test_missing_messages_raises_format_error(self):
        doc = json.loads(EXAMPLE)
        del doc["messages"]
        with self.assertRaises(FormatError):
            self.parser.parse(json.dumps(doc), "export.json")

    def test_member_without_platform_id_raises(self):
        with self.assertRaises(FormatError):
            self.parser.parse(_doc(members=[{"name": "Alice"}]), "export.json")

    def test_message_with_string_timestamp_raises(self):
        messages = [{"sender": "u1", "name": "Alice", "timestamp": "yesterday", "type": "text", "content": "hi"}]
        with self.assertRaises(FormatError):
            self.parser.parse(_doc(messages=messages), "export.json")

    def test_message_with_bool_timestamp_raises(self):
        messages = [{"sender": "u1", "name": "Alice", "timestamp": True, "type": "text", "content": "hi"}]
        with self.assertRaises(FormatError):
            self.parser.parse(_doc(messages=messages), "export.json")


if __name__ == "__main__":
    unittest.main()
