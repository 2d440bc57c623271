from __future__ import annotations

import unittest

from decagon_sdk.errors import InvalidInputError
from decagon_sdk.utils import derive_ws_url, join_url, require_number, strip_query, with_query


class UtilsTests(unittest.TestCase):
    def test_derive_ws_url(self) -> None:
        self.assertEqual(derive_ws_url("https://api.example.test", "/ws"), "wss://api.example.test/ws")
        self.assertEqual(derive_ws_url("http://10.0.0.1:9000/v1/", "/ws"), "ws://10.0.0.1:9000/v1/ws")

    def test_join_url(self) -> None:
        self.assertEqual(join_url("https://h/", "/a/b"), "https://h/a/b")
        self.assertEqual(join_url("https://h", "a", {"x": "1 2"}), "https://h/a?x=1+2")

    def test_with_query_preserves_existing(self) -> None:
        self.assertEqual(with_query("wss://h/ws?region=eu", {"epoch": "5"}), "wss://h/ws?region=eu&epoch=5")

    def test_strip_query_hides_credentials(self) -> None:
        self.assertEqual(strip_query("wss://h/ws?signature=abc&epoch=1"), "wss://h/ws")

    def test_require_number(self) -> None:
        self.assertEqual(require_number(3, "score"), 3)
        for value in (None, "3", False, float("nan"), float("inf"), float("-inf")):
            with self.subTest(value=value):
                with self.assertRaises(InvalidInputError):
                    require_number(value, "score")


if __name__ == "__main__":
    unittest.main()
