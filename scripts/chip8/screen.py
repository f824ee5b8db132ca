SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32


# ********** MONOCHROME PIXEL GRID, ONE BYTE PER PIXEL (0 = OFF, 1 = ON)
# presentation (scaling, colors, windows) belongs to the host
class Screen:
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.w, self.h = w, h
        self.buffer = bytearray(w * h)

    def reset(self):
        self.buffer[:] = bytes(self.w * self.h)

    def toggle_pixel(self, x, y):
        """flip a pixel, return True if it was ON before (i.e. it got erased)"""
        idx = y * self.w + x
        was_on = self.buffer[idx] == 1
        self.buffer[idx] ^= 1
        return was_on

    def draw_sprite(self, x, y, rows):
        """
        XOR a sprite onto the screen, each row is a byte with the MSB being the leftmost pixel
        the modulo only anchors the top-left corner, whatever falls past the edges gets clipped
        return True if any pixel went from ON to OFF (collision)
        """
        x, y = x % self.w, y % self.h
        collision = False
        for line, sprite_byte in enumerate(rows):
            if y + line >= self.h:
                break
            for bit in range(8):
                if x + bit >= self.w:
                    break
                if sprite_byte & (0x80 >> bit):
                    if self.toggle_pixel(x + bit, y + line):
                        collision = True
        return collision

    def get_pixel_data(self):
        """read only view of the whole grid, row after row"""
        return memoryview(self.buffer).toreadonly()
