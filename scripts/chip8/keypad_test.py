import unittest
from keypad import Keypad


class TestKeypad(unittest.TestCase):
    def setUp(self):
        self.keypad = Keypad()

    def test_press_and_release(self):
        self.keypad.press(0xA)
        self.assertTrue(self.keypad.is_pressed(0xA))
        self.keypad.release(0xA)
        self.assertFalse(self.keypad.is_pressed(0xA))

    def test_press_latches_last_key(self):
        self.keypad.press(0x3)
        self.keypad.press(0x7)
        self.assertEqual(self.keypad.last_key,
                         0x7)

    def test_release_keeps_latch(self):
        self.keypad.press(0x5)
        self.keypad.release(0x5)
        self.assertEqual(self.keypad.last_key,
                         0x5)

    def test_reset(self):
        self.keypad.press(0xF)
        self.keypad.reset()
        self.assertFalse(self.keypad.is_pressed(0xF))
        self.assertEqual(self.keypad.last_key,
                         0)

    def test_invalid_key(self):
        with self.assertRaises(IndexError):
            self.keypad.is_pressed(16)

    def test_out_of_range_press_is_rejected(self):
        for key in (-1, 16):
            with self.subTest(key=key):
                with self.assertRaises(IndexError):
                    self.keypad.press(key)
        self.assertEqual(self.keypad.keys,
                         [False] * 16)
        self.assertEqual(self.keypad.last_key,
                         0)

    def test_out_of_range_release_is_rejected(self):
        for key in (-1, 16):
            with self.subTest(key=key):
                with self.assertRaises(IndexError):
                    self.keypad.release(key)


if __name__ == "__main__":
    unittest.main()
