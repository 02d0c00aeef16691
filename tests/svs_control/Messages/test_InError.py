import unittest

from svs_control.message import ErrorCode, InError, InMessage


class TestInError(unittest.TestCase):
    def test_decode(self) -> None:
        message = InMessage.from_bytes(b'\x03_{"code":2,"message":"wrong message"}')

        self.assertIsInstance(message, InError)
        self.assertEqual(message.code, ErrorCode.WRONG_MESSAGE)
        self.assertEqual(message.message, "wrong message")

    def test_unknown_code_falls_back_to_generic(self) -> None:
        message = InMessage.from_bytes(b'\x03_{"code":77,"message":"huh"}')

        self.assertEqual(message.code, ErrorCode.GENERIC)
        self.assertEqual(message.message, "huh")

    def test_unparsable_content_uses_defaults(self) -> None:
        for content in (b"not json", b"{}", b'{"code":2}', b'{"code":"2","message":"x"}'):
            message = InMessage.from_bytes(b"\x03_" + content)
            self.assertEqual(message, InError(ErrorCode.GENERIC, ""))

    def test_round_trip(self) -> None:
        original = InError(ErrorCode.WRONG_MESSAGE, "nope")
        self.assertEqual(InMessage.from_bytes(original.to_bytes()), original)
