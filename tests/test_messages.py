from __future__ import annotations

import unittest

from decagon_sdk.errors import ProtocolError
from decagon_sdk.messages import ChatMessage, ErrorMessage, UnknownMessage, UserMessage, parse_message


class MessageTests(unittest.TestCase):
    def test_chat_message(self) -> None:
        payload = {"type": "chat_message", "data": {"text": "hi", "role": "AI", "conversation_id": "c1"}}
        message = parse_message(payload)
        self.assertIsInstance(message, ChatMessage)
        self.assertEqual(message.text, "hi")
        self.assertEqual(message.role, "AI")
        self.assertEqual(message.conversation_id, "c1")
        self.assertEqual(message.raw, payload)

    def test_error_message(self) -> None:
        message = parse_message({"type": "error", "data": {"error": "boom"}})
        self.assertIsInstance(message, ErrorMessage)
        self.assertEqual(message.error, "boom")

    def test_unknown_type_keeps_payload(self) -> None:
        payload = {"type": "typing_indicator", "data": [1, 2], "extra": True}
        message = parse_message(payload)
        self.assertIsInstance(message, UnknownMessage)
        self.assertEqual(message.type, "typing_indicator")
        self.assertEqual(message.data, [1, 2])
        self.assertEqual(message.raw, payload)

    def test_known_type_with_opaque_body(self) -> None:
        message = parse_message({"type": "chat_message", "data": "plain"})
        self.assertIsInstance(message, UnknownMessage)

    def test_missing_type_rejected(self) -> None:
        for payload in ({"data": {}}, {"type": ""}, {"type": 3}):
            with self.subTest(payload=payload):
                with self.assertRaises(ProtocolError):
                    parse_message(payload)

    def test_user_message_wire_shape(self) -> None:
        message = UserMessage(conversation_id="c1", text="Hello", extra={"channel": "web"})
        self.assertEqual(
            message.to_wire(),
            {"type": "message", "data": {"channel": "web", "conversation_id": "c1", "text": "Hello"}},
        )


if __name__ == "__main__":
    unittest.main()
