import unittest

import pygame

from host import KEY_MAPPINGS, get_rom_arg, handle_event


class RecordingChip:
    def __init__(self):
        self.events = []

    def key_down(self, key):
        self.events.append(("down", key))

    def key_up(self, key):
        self.events.append(("up", key))


class TestKeyMappings(unittest.TestCase):
    def test_every_logical_key_is_mapped_once(self):
        self.assertEqual(sorted(KEY_MAPPINGS.values()),
                         list(range(16)))

    def test_layout(self):
        self.assertEqual(KEY_MAPPINGS[pygame.K_x], 0x0)
        self.assertEqual(KEY_MAPPINGS[pygame.K_4], 0xC)
        self.assertEqual(KEY_MAPPINGS[pygame.K_v], 0xF)


class TestHandleEvent(unittest.TestCase):
    def setUp(self):
        self.chip = RecordingChip()

    def test_key_press_and_release_are_forwarded(self):
        self.assertTrue(handle_event(self.chip, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q)))
        self.assertTrue(handle_event(self.chip, pygame.event.Event(pygame.KEYUP, key=pygame.K_q)))
        self.assertEqual(self.chip.events,
                         [("down", 0x4), ("up", 0x4)])

    def test_unmapped_keys_are_ignored(self):
        self.assertTrue(handle_event(self.chip, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p)))
        self.assertEqual(self.chip.events,
                         [])

    def test_quit(self):
        self.assertFalse(handle_event(self.chip, pygame.event.Event(pygame.QUIT)))
        self.assertFalse(handle_event(self.chip, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE)))


class TestArgs(unittest.TestCase):
    def test_rom_file(self):
        self.assertEqual(get_rom_arg(["-f", "pong.ch8"]),
                         "pong.ch8")

    def test_rom_file_is_required(self):
        with self.assertRaises(SystemExit):
            get_rom_arg([])


if __name__ == "__main__":
    unittest.main()
