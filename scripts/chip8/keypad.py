NUM_KEYS = 16


# ********** LOGICAL 16 KEYS HEX KEYPAD
# the physical keys -> logical keys translation is done by the host
class Keypad:
    def __init__(self):
        self.keys = [False] * NUM_KEYS
        self.last_key = 0

    def __str__(self):
        # same layout as the original COSMAC VIP keypad
        layout = ((0x1, 0x2, 0x3, 0xC),
                  (0x4, 0x5, 0x6, 0xD),
                  (0x7, 0x8, 0x9, 0xE),
                  (0xA, 0x0, 0xB, 0xF))
        return "\n".join(" ".join(str(int(self.keys[k])) for k in row) for row in layout)

    def _check(self, key):
        if not 0 <= key < NUM_KEYS:
            raise IndexError(f"The CHIP-8 keypad has {NUM_KEYS} keys, got key {key}")

    def reset(self):
        self.keys = [False] * NUM_KEYS
        self.last_key = 0

    def press(self, key):
        """register a key press and latch it as the last key pressed"""
        self._check(key)
        self.keys[key] = True
        self.last_key = key

    def release(self, key):
        # the latch is left alone, only the next press overwrites it
        self._check(key)
        self.keys[key] = False

    def is_pressed(self, key):
        self._check(key)
        return self.keys[key]
