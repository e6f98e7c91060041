import unittest
from qrbatch.models.common import AddResult, ExtractionMode
from qrbatch.services.manual_tokens import ManualTokenManager

class TestManualTokens(unittest.TestCase):
    def setUp(self):
        self.saved = []
        self.mgr = ManualTokenManager(ExtractionMode.numeric, on_change=self.saved.append)

    def test_duplicate_reported(self):
        self.assertEqual(self.mgr.add("123"), AddResult.success)
        self.assertEqual(self.mgr.add("123"), AddResult.duplicate)
        self.assertEqual(self.mgr.tokens, ["123"])

    def test_non_digits_invalid_in_numeric_mode(self):
        self.assertEqual(self.mgr.add("12a"), AddResult.invalid)
        self.assertEqual(self.mgr.tokens, [])
        self.assertEqual(self.saved, [])

    def test_blank_is_invalid(self):
        self.assertEqual(self.mgr.add("   "), AddResult.invalid)

    def test_input_is_trimmed(self):
        self.assertEqual(self.mgr.add(" 456 "), AddResult.success)
        self.assertEqual(self.mgr.add("456"), AddResult.duplicate)
        self.assertEqual(self.mgr.tokens, ["456"])

    def test_remove_absent_is_noop(self):
        self.mgr.add("123")
        self.saved.clear()
        self.mgr.remove("999")
        self.assertEqual(self.mgr.tokens, ["123"])
        self.assertEqual(self.saved, [])

    def test_remove_persists(self):
        self.mgr.add("123")
        self.mgr.add("456")
        self.mgr.remove("123")
        self.assertEqual(self.mgr.tokens, ["456"])
        self.assertEqual(self.saved[-1], ["456"])

    def test_line_mode_accepts_text(self):
        mgr = ManualTokenManager(ExtractionMode.line)
        self.assertEqual(mgr.add("Room 12A"), AddResult.success)
        self.assertEqual(mgr.tokens, ["Room 12A"])

    def test_initial_tokens_deduplicated(self):
        mgr = ManualTokenManager("numeric", tokens=["111", "111", 5, "", "222"])
        self.assertEqual(mgr.tokens, ["111", "222"])

if __name__ == "__main__":
    unittest.main()
