# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# https://chip-8.github.io/links/
#
# MASTERING CHIP-8
# https://github.com/mattmikolay/chip-8/wiki/Mastering-CHIP%E2%80%908
#
# TEST SUITE
# https://github.com/Timendus/chip8-test-suite
#
# the interpreter core knows nothing about windows or physical keyboards,
# see host.py for the pygame frontend


import os
import random
import sys
import time

import decoder as op
from decoder import decode
from keypad import Keypad
from memory import MEMORY_SIZE, Memory, OutOfBoundsError
from screen import Screen


# ******************** STATIC SECTION
C8_FONTS = [0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
            0x20, 0x60, 0x20, 0x20, 0x70,  # 1
            0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
            0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
            0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
            0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
            0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
            0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
            0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
            0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
            0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
            0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
            0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
            0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
            0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
            0xF0, 0x80, 0xF0, 0x80, 0x80]  # F

ROM_START_ADDRESS = 0x200
FONT_START_ADDRESS = 0x50
FONT_SPRITE_SIZE = 5
NUM_REGISTERS = 16
STACK_SIZE = 16
TIMER_FREQUENCY = 60                                # Hz
TIMER_PERIOD_NS = 1_000_000_000 // TIMER_FREQUENCY
DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False


# ******************** ERRORS SECTION
# all of them are fatal: the loaded program (or the interpreter state) is corrupt
class Chip8Error(Exception):
    reason = "CHIP-8 failure"

    def __init__(self, address):
        super().__init__(f"{self.reason} at address 0x{address:03x}")
        self.address = address

class StackOverflowError(Chip8Error):
    reason = "Stack overflow"

class StackUnderflowError(Chip8Error):
    reason = "Stack underflow"

class FetchError(Chip8Error):
    reason = "Instruction fetch out of memory"

class MemoryAccessError(Chip8Error):
    reason = "Memory access out of bounds"

class RomTooLargeError(Chip8Error):
    reason = "ROM doesn't fit in memory when loaded"


# ******************** UTILITIES SECTION
def debug(msg):
    if DEBUG: print(msg)

def warn(msg):
    print(msg, file=sys.stderr)


# ******************** MEMORY SECTION
# ********** FIXED ARRAY OF 16 RETURN ADDRESSES PLUS THE STACK POINTER
class Stack:
    def __init__(self, size=STACK_SIZE):
        self.addr_list = [0] * size
        self.sp = 0     # number of entries in use

    def __str__(self):
        return str(self.addr_list[:self.sp])

    def append(self, address):
        if self.sp >= len(self.addr_list):
            raise IndexError(f"The CHIP-8 stack can contain at most {len(self.addr_list)} addresses. Limit exceeded")
        self.addr_list[self.sp] = address
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise IndexError("Cannot pop from an empty CHIP-8 stack")
        self.sp -= 1
        return self.addr_list[self.sp]

    def reset(self):
        self.addr_list = [0] * len(self.addr_list)
        self.sp = 0


# ******************** CPU SECTION
class Chip8:
    """
    CHIP-8 interpreter: the host calls cycle() over and over, forwards key events
    through key_down()/key_up() and renders get_pixel_data() whenever cycle() returns True

    clock must return monotonic nanoseconds, timers are driven by it and not by the cycles count
    """
    def __init__(self, on_beep=None, clock=time.monotonic_ns, rng=None):
        self.mem = Memory()
        self.screen = Screen()
        self.keypad = Keypad()
        self.stack = Stack()
        self.on_beep = on_beep
        self.clock = clock
        self.rng = rng if rng is not None else random.Random()
        self.instructions = {
            op.SysCall: self._sys_call,
            op.ClearScreen: self._clear_screen,
            op.Return: self._return,
            op.Jump: self._jump,
            op.Call: self._call_addr,
            op.SkipIfEqual: self._skip_if_eq,
            op.SkipIfNotEqual: self._skip_if_not_eq,
            op.SkipIfRegsEqual: self._skip_if_eq_regs,
            op.SetRegister: self._set_vx,
            op.AddToRegister: self._add_to_vx,
            op.Move: self._set_vx_to_vy,
            op.Or: self._set_vx_or_vy,
            op.And: self._set_vx_and_vy,
            op.Xor: self._set_vx_xor_vy,
            op.AddRegs: self._add_vx_vy,
            op.SubRegs: self._sub_vx_vy,
            op.ShiftRight: self._shr,
            op.SubRegsReversed: self._subn_vx_vy,
            op.ShiftLeft: self._shl,
            op.SkipIfRegsNotEqual: self._skip_if_not_eq_regs,
            op.SetIndex: self._set_idx,
            op.JumpOffset: self._jump_plus,
            op.Random: self._random_byte_and,
            op.Draw: self._to_screen,
            op.SkipIfKey: self._skip_if_pressed,
            op.SkipIfNotKey: self._skip_if_not_pressed,
            op.GetDelay: self._set_vx_dt,
            op.WaitKey: self._wait_keypress,
            op.SetDelay: self._set_dt_vx,
            op.SetSound: self._set_st,
            op.AddToIndex: self._add_to_idx,
            op.FontCharacter: self._select_char,
            op.StoreBCD: self._bcd_repr,
            op.StoreRegisters: self._store_vregs,
            op.LoadRegisters: self._load_vregs,
            op.Unknown: self._unknown,
        }
        self.reset()

    def __str__(self):
        registers = f"PC_REGISTER:0x{self.pc:03x} | IDX_REGISTER:0x{self.idx:03x} | VARIABLE_REGISTERS:{self.v_regs}"
        timers = f"DELAY_TIMER:{self.dt} | SOUND_TIMER:{self.st}"
        stack = f"STACK:{self.stack}"
        flags = f"DRAW:{self.draw} | WAITING_FOR_KEY:{self.waiting_for_key} (V{self.key_register:X})"
        keypad = f"KEYPAD:\n{self.keypad}"
        return f"{registers}\n{timers}\n{stack}\n{flags}\n{keypad}"

    def reset(self):
        """clear the whole state, reinstall the fonts and point the PC at the ROM start address"""
        self.mem.reset()
        self.screen.reset()
        self.keypad.reset()
        self.stack.reset()
        self.v_regs = [0] * NUM_REGISTERS
        self.pc = ROM_START_ADDRESS
        self.op_addr = ROM_START_ADDRESS    # address of the instruction being executed
        self.idx = 0    # specify where the sprites reside in memory
        self.dt = 0     # delay timer, active when non-zero
        self.st = 0     # sound timer, active when non-zero
        now = self.clock()
        self.dt_instant = now
        self.st_instant = now
        self.draw = False
        self.waiting_for_key = False
        self.key_register = 0
        self.mem.write_range(FONT_START_ADDRESS, C8_FONTS)

    def load_program(self, rom):
        """copy the ROM bytes verbatim starting at the ROM start address"""
        try:
            self.mem.write_range(ROM_START_ADDRESS, rom)
        except OutOfBoundsError:
            raise RomTooLargeError(ROM_START_ADDRESS + len(rom)) from None

    def load_rom(self, path):
        """load ROM file from path"""
        with open(path, mode='rb') as f:
            rom = f.read()
        self.load_program(rom)
        debug(f"The ROM at path {path} has been loaded successfully ({len(rom)} bytes)")

    @property
    def draw_needed(self):
        return self.draw

    def get_pixel_data(self):
        return self.screen.get_pixel_data()

    # ********** INPUT
    def key_down(self, key):
        self.keypad.press(key)
        if self.waiting_for_key:
            self.v_regs[self.key_register] = self.keypad.last_key
            self.waiting_for_key = False
            debug(f"key 0x{key:x} stored in V{self.key_register:X}, resuming execution")

    def key_up(self, key):
        self.keypad.release(key)

    # ********** INSTRUCTIONS
    def _sys_call(self, ins):
        debug(f"mem_addr: 0x{self.op_addr:04x}    ignoring machine code routine: {ins}")

    def _clear_screen(self, ins):
        self.screen.reset()
        self.draw = True

    def _return(self, ins):
        """return from a subroutine"""
        try:
            self.pc = self.stack.pop()
        except IndexError:
            raise StackUnderflowError(self.op_addr) from None

    def _jump(self, ins):
        self.pc = ins.address

    def _call_addr(self, ins):
        try:
            self.stack.append(self.pc)
        except IndexError:
            raise StackOverflowError(self.op_addr) from None
        self.pc = ins.address

    def _skip_if_eq(self, ins):
        if self.v_regs[ins.x] == ins.value:
            self._goto_next_instruction()

    def _skip_if_not_eq(self, ins):
        if self.v_regs[ins.x] != ins.value:
            self._goto_next_instruction()

    def _skip_if_eq_regs(self, ins):
        if self.v_regs[ins.x] == self.v_regs[ins.y]:
            self._goto_next_instruction()

    def _skip_if_not_eq_regs(self, ins):
        if self.v_regs[ins.x] != self.v_regs[ins.y]:
            self._goto_next_instruction()

    def _set_vx(self, ins):
        """set the value of one of the 16 variable registers, Vx"""
        self.v_regs[ins.x] = ins.value

    def _add_to_vx(self, ins):
        """add to the value already present in Vx, VF is left untouched"""
        self.v_regs[ins.x] = (self.v_regs[ins.x] + ins.value) & 0xFF

    def _set_vx_to_vy(self, ins):
        self.v_regs[ins.x] = self.v_regs[ins.y]

    def _set_vx_or_vy(self, ins):
        self.v_regs[ins.x] |= self.v_regs[ins.y]

    def _set_vx_and_vy(self, ins):
        self.v_regs[ins.x] &= self.v_regs[ins.y]

    def _set_vx_xor_vy(self, ins):
        self.v_regs[ins.x] ^= self.v_regs[ins.y]

    # for the arithmetic below VF is written last, so it wins when it's also the destination
    def _add_vx_vy(self, ins):
        """set Vx = Vx + Vy, VF = carry"""
        total = self.v_regs[ins.x] + self.v_regs[ins.y]
        self.v_regs[ins.x] = total & 0xFF   # keep only the lowest 8 bits from the result
        self.v_regs[0xF] = 1 if total > 0xFF else 0

    def _sub_vx_vy(self, ins):
        """set Vx = Vx - Vy, VF = NOT borrow"""
        vx, vy = self.v_regs[ins.x], self.v_regs[ins.y]
        self.v_regs[ins.x] = (vx - vy) & 0xFF
        self.v_regs[0xF] = 1 if vx >= vy else 0

    def _subn_vx_vy(self, ins):
        """set Vx = Vy - Vx, VF = NOT borrow"""
        vx, vy = self.v_regs[ins.x], self.v_regs[ins.y]
        self.v_regs[ins.x] = (vy - vx) & 0xFF
        self.v_regs[0xF] = 1 if vy >= vx else 0

    def _shr(self, ins):
        """set Vx = Vx SHR 1, VF = the bit shifted out"""
        value = self.v_regs[ins.x]
        self.v_regs[ins.x] = value >> 1
        self.v_regs[0xF] = value & 0x1

    def _shl(self, ins):
        """set Vx = Vx SHL 1, VF = the bit shifted out"""
        value = self.v_regs[ins.x]
        self.v_regs[ins.x] = (value << 1) & 0xFF
        self.v_regs[0xF] = (value & 0x80) >> 7

    def _set_idx(self, ins):
        self.idx = ins.address

    def _jump_plus(self, ins):
        self.pc = ins.address + self.v_regs[0x0]

    def _random_byte_and(self, ins):
        self.v_regs[ins.x] = self.rng.randint(0, 255) & ins.value

    def _to_screen(self, ins):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        try:
            sprite = self.mem.read_range(self.idx, ins.height)
        except OutOfBoundsError:
            raise MemoryAccessError(self.op_addr) from None
        collision = self.screen.draw_sprite(self.v_regs[ins.x], self.v_regs[ins.y], sprite)
        self.v_regs[0xF] = 1 if collision else 0
        self.draw = True

    def _skip_if_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        if self.keypad.is_pressed(self.v_regs[ins.x] & 0xF):
            self._goto_next_instruction()

    def _skip_if_not_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        if not self.keypad.is_pressed(self.v_regs[ins.x] & 0xF):
            self._goto_next_instruction()

    def _set_vx_dt(self, ins):
        self.v_regs[ins.x] = self.dt

    def _wait_keypress(self, ins):
        """block the fetching of instructions till a key is pressed, its value will end up in Vx"""
        self.waiting_for_key = True
        self.key_register = ins.x
        debug(f"mem_addr: 0x{self.op_addr:04x}    waiting for a key press")

    def _set_dt_vx(self, ins):
        self.dt = self.v_regs[ins.x]
        self.dt_instant = self.clock()

    def _set_st(self, ins):
        self.st = self.v_regs[ins.x]
        self.st_instant = self.clock()

    def _add_to_idx(self, ins):
        """set I = I + Vx, wrapping around the addressable memory"""
        self.idx = (self.idx + self.v_regs[ins.x]) % MEMORY_SIZE

    def _select_char(self, ins):
        """set I to the location of the font sprite for digit Vx"""
        self.idx = FONT_START_ADDRESS + (self.v_regs[ins.x] & 0xF) * FONT_SPRITE_SIZE

    def _bcd_repr(self, ins):
        """store the hundreds digit of Vx in memory at I, the tens digit at I+1, the ones digit at I+2"""
        value = self.v_regs[ins.x]
        self._write_at_idx([value // 100, (value // 10) % 10, value % 10])

    def _store_vregs(self, ins):
        """store registers V0 through Vx (included) in memory starting at location I"""
        self._write_at_idx(self.v_regs[:ins.x+1])

    def _load_vregs(self, ins):
        """read registers V0 through Vx (included) from memory starting at location I"""
        try:
            data = self.mem.read_range(self.idx, ins.x + 1)
        except OutOfBoundsError:
            raise MemoryAccessError(self.op_addr) from None
        self.v_regs[:ins.x+1] = list(data)

    def _unknown(self, ins):
        warn(f"Unknown opcode 0x{ins.word:04x} at address 0x{self.op_addr:03x}, skipping it")

    def _write_at_idx(self, values):
        # all or nothing: a span crossing the end of memory is fatal
        try:
            self.mem.write_range(self.idx, values)
        except OutOfBoundsError:
            raise MemoryAccessError(self.op_addr) from None

    def _goto_next_instruction(self):
        self.pc += 0x2

    # ********** TIMERS
    def update_timers(self):
        """decrement each active timer by one if at least 1/60 s went by since its last decrement"""
        now = self.clock()
        if self.dt > 0 and now - self.dt_instant >= TIMER_PERIOD_NS:
            self.dt -= 1
            self.dt_instant = now
        if self.st > 0 and now - self.st_instant >= TIMER_PERIOD_NS:
            self.st -= 1
            self.st_instant = now
            if self.st == 0:
                self._beep()

    def _beep(self):
        debug("BEEP!")
        if self.on_beep:
            self.on_beep()

    # ********** MAIN LOOP STEP
    def cycle(self):
        """
        emulate one machine cycle (fetch, decode, execute, update timers)
        return True if the screen changed during this cycle
        """
        self.draw = False
        if not self.waiting_for_key:
            self.op_addr = self.pc
            # fetch (each instruction is two bytes long)
            try:
                opcode = self.mem.read_u16(self.pc)
            except OutOfBoundsError:
                raise FetchError(self.pc) from None
            self._goto_next_instruction()
            # decode + execute
            instruction = decode(opcode)
            self.instructions[type(instruction)](instruction)
            self.pc %= MEMORY_SIZE
        self.update_timers()
        return self.draw
