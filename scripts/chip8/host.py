import argparse
import sys

import os
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_1, K_2, K_3, K_4,
    K_q, K_w, K_e, K_r,
    K_a, K_s, K_d, K_f,
    K_z, K_x, K_c, K_v,
)

from chip8 import Chip8, Chip8Error
from screen import SCREEN_HEIGHT, SCREEN_WIDTH


# ******************** STATIC SECTION
# physical keyboard         CHIP-8 keypad
#   1 2 3 4                   1 2 3 C
#   Q W E R        ->         4 5 6 D
#   A S D F                   7 8 9 E
#   Z X C V                   A 0 B F
KEY_MAPPINGS = {
    K_x: 0x0,
    K_1: 0x1,
    K_2: 0x2,
    K_3: 0x3,
    K_q: 0x4,
    K_w: 0x5,
    K_e: 0x6,
    K_a: 0x7,
    K_s: 0x8,
    K_d: 0x9,
    K_z: 0xA,
    K_c: 0xB,
    K_4: 0xC,
    K_r: 0xD,
    K_f: 0xE,
    K_v: 0xF,
}

CLOCK_SPEED = 500   # cycles per second
SCALE = 10
BLUE = pygame.Color(80,69,155,255)
LIGHT_BLUE = pygame.Color(136,126,203,255)


# ******************** UTILITIES SECTION
def get_rom_arg(argv=None):
    parser = argparse.ArgumentParser(description="CHIP-8 interpreter")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    args = parser.parse_args(argv)
    return args.file

def beep():
    print('\a', end='', flush=True)


# ******************** I/O SECTION
class Display:
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE):
        self.w, self.h, self.scale = w, h, s
        self.background = bg_color
        self.foreground = fg_color
        self.surface = pygame.display.set_mode(
            (w * self.scale, h * self.scale),
        )
        self.surface.fill(self.background)

    def render(self, pixels):
        """turn the interpreter pixel grid into rectangles, the change is visible only after the flip"""
        self.surface.fill(self.background)
        for i, pixel in enumerate(pixels):
            if pixel:
                x, y = i % self.w, i // self.w
                pygame.draw.rect(
                    self.surface,
                    self.foreground,
                    (x * self.scale, y * self.scale, self.scale, self.scale)
                )
        pygame.display.flip()


def handle_event(chip, event):
    """forward a pygame event to the interpreter, return False when the user asked to quit"""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key in KEY_MAPPINGS:
            chip.key_down(KEY_MAPPINGS[event.key])
    elif event.type == pygame.KEYUP:
        if event.key in KEY_MAPPINGS:
            chip.key_up(KEY_MAPPINGS[event.key])
    return True


# ******************** ENTRY POINT SECTION
def main(argv=None):
    rom_name = get_rom_arg(argv)
    chip = Chip8(on_beep=beep)
    try:
        chip.load_rom(rom_name)
    except (OSError, Chip8Error) as e:
        sys.exit(f"Cannot load the ROM at path {rom_name}: {e}")
    # pygame initialization
    pygame.init()
    clock = pygame.time.Clock()
    pygame.display.set_caption(os.path.basename(rom_name))
    display = Display()
    # emulation loop
    run = True
    try:
        while run:
            # cycles per second
            clock.tick(CLOCK_SPEED)
            # process user input, loop throught the event queue
            for event in pygame.event.get():
                if not handle_event(chip, event):
                    run = False
            if chip.cycle():    # emulate one machine cycle, redraw only if the screen changed
                display.render(chip.get_pixel_data())
    except Chip8Error as e:
        sys.exit(f"********** THE EMULATOR CRASHED WITH THE FOLLOWING STATE\n{e}\n{chip}")
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
