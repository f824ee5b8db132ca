# CHIP-8 OPCODES REFERENCE
# http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#3.1
#
# decoding is a pure function: a 16 bit word always turns into exactly one instruction,
# words that don't match any documented opcode turn into an Unknown instruction


from dataclasses import dataclass


# ******************** INSTRUCTION SHAPES SECTION
# each shape knows how to pull its operands out of the raw word
# and how to print itself in assembly form through the asm template
@dataclass(frozen=True)
class Instruction:
    asm = "???"

    @classmethod
    def from_word(cls, word):
        return cls()

    def __str__(self):
        return self.asm.format(**vars(self))


@dataclass(frozen=True)
class AddressInstruction(Instruction):
    address: int

    @classmethod
    def from_word(cls, word):
        return cls(word & 0x0FFF)


@dataclass(frozen=True)
class RegisterInstruction(Instruction):
    x: int

    @classmethod
    def from_word(cls, word):
        return cls((word & 0x0F00) >> 8)


@dataclass(frozen=True)
class RegisterValueInstruction(Instruction):
    x: int
    value: int

    @classmethod
    def from_word(cls, word):
        return cls((word & 0x0F00) >> 8, word & 0x00FF)


@dataclass(frozen=True)
class RegisterPairInstruction(Instruction):
    x: int
    y: int

    @classmethod
    def from_word(cls, word):
        return cls((word & 0x0F00) >> 8, (word & 0x00F0) >> 4)


# ******************** INSTRUCTIONS SECTION
class ClearScreen(Instruction):
    asm = "CLS"

class Return(Instruction):
    asm = "RET"

class SysCall(AddressInstruction):
    """0NNN, call a machine code routine of the host CPU, ignored by modern interpreters"""
    asm = "SYS 0x{address:03x}"

class Jump(AddressInstruction):
    asm = "JP 0x{address:03x}"

class Call(AddressInstruction):
    asm = "CALL 0x{address:03x}"

class SkipIfEqual(RegisterValueInstruction):
    asm = "SE V{x:X}, {value}"

class SkipIfNotEqual(RegisterValueInstruction):
    asm = "SNE V{x:X}, {value}"

class SkipIfRegsEqual(RegisterPairInstruction):
    asm = "SE V{x:X}, V{y:X}"

class SetRegister(RegisterValueInstruction):
    asm = "LD V{x:X}, {value}"

class AddToRegister(RegisterValueInstruction):
    asm = "ADD V{x:X}, {value}"

class Move(RegisterPairInstruction):
    asm = "LD V{x:X}, V{y:X}"

class Or(RegisterPairInstruction):
    asm = "OR V{x:X}, V{y:X}"

class And(RegisterPairInstruction):
    asm = "AND V{x:X}, V{y:X}"

class Xor(RegisterPairInstruction):
    asm = "XOR V{x:X}, V{y:X}"

class AddRegs(RegisterPairInstruction):
    asm = "ADD V{x:X}, V{y:X}"

class SubRegs(RegisterPairInstruction):
    asm = "SUB V{x:X}, V{y:X}"

class ShiftRight(RegisterInstruction):
    asm = "SHR V{x:X}"

class SubRegsReversed(RegisterPairInstruction):
    asm = "SUBN V{x:X}, V{y:X}"

class ShiftLeft(RegisterInstruction):
    asm = "SHL V{x:X}"

class SkipIfRegsNotEqual(RegisterPairInstruction):
    asm = "SNE V{x:X}, V{y:X}"

class SetIndex(AddressInstruction):
    asm = "LD I, 0x{address:03x}"

class JumpOffset(AddressInstruction):
    asm = "JP V0, 0x{address:03x}"

class Random(RegisterValueInstruction):
    asm = "RND V{x:X}, 0x{value:02x}"

@dataclass(frozen=True)
class Draw(Instruction):
    x: int
    y: int
    height: int
    asm = "DRW V{x:X}, V{y:X}, {height}"

    @classmethod
    def from_word(cls, word):
        return cls((word & 0x0F00) >> 8, (word & 0x00F0) >> 4, word & 0x000F)

class SkipIfKey(RegisterInstruction):
    asm = "SKP V{x:X}"

class SkipIfNotKey(RegisterInstruction):
    asm = "SKNP V{x:X}"

class GetDelay(RegisterInstruction):
    asm = "LD V{x:X}, DT"

class WaitKey(RegisterInstruction):
    asm = "LD V{x:X}, K"

class SetDelay(RegisterInstruction):
    asm = "LD DT, V{x:X}"

class SetSound(RegisterInstruction):
    asm = "LD ST, V{x:X}"

class AddToIndex(RegisterInstruction):
    asm = "ADD I, V{x:X}"

class FontCharacter(RegisterInstruction):
    asm = "LD F, V{x:X}"

class StoreBCD(RegisterInstruction):
    asm = "LD B, V{x:X}"

class StoreRegisters(RegisterInstruction):
    asm = "LD [I], V{x:X}"

class LoadRegisters(RegisterInstruction):
    asm = "LD V{x:X}, [I]"

@dataclass(frozen=True)
class Unknown(Instruction):
    word: int
    asm = "??? 0x{word:04x}"


# ******************** DECODING SECTION
# WATCH OUT: entries order is important!!!
# the first (mask, pattern) couple matching the word wins,
# that's why 00E0 and 00EE must come before the 0NNN catch-all
OPCODE_TABLE = [
    (0xFFFF, 0x00E0, ClearScreen),
    (0xFFFF, 0x00EE, Return),
    (0xF000, 0x0000, SysCall),
    (0xF000, 0x1000, Jump),
    (0xF000, 0x2000, Call),
    (0xF000, 0x3000, SkipIfEqual),
    (0xF000, 0x4000, SkipIfNotEqual),
    (0xF00F, 0x5000, SkipIfRegsEqual),
    (0xF000, 0x6000, SetRegister),
    (0xF000, 0x7000, AddToRegister),
    (0xF00F, 0x8000, Move),
    (0xF00F, 0x8001, Or),
    (0xF00F, 0x8002, And),
    (0xF00F, 0x8003, Xor),
    (0xF00F, 0x8004, AddRegs),
    (0xF00F, 0x8005, SubRegs),
    (0xF00F, 0x8006, ShiftRight),
    (0xF00F, 0x8007, SubRegsReversed),
    (0xF00F, 0x800E, ShiftLeft),
    (0xF00F, 0x9000, SkipIfRegsNotEqual),
    (0xF000, 0xA000, SetIndex),
    (0xF000, 0xB000, JumpOffset),
    (0xF000, 0xC000, Random),
    (0xF000, 0xD000, Draw),
    (0xF0FF, 0xE09E, SkipIfKey),
    (0xF0FF, 0xE0A1, SkipIfNotKey),
    (0xF0FF, 0xF007, GetDelay),
    (0xF0FF, 0xF00A, WaitKey),
    (0xF0FF, 0xF015, SetDelay),
    (0xF0FF, 0xF018, SetSound),
    (0xF0FF, 0xF01E, AddToIndex),
    (0xF0FF, 0xF029, FontCharacter),
    (0xF0FF, 0xF033, StoreBCD),
    (0xF0FF, 0xF055, StoreRegisters),
    (0xF0FF, 0xF065, LoadRegisters),
]


def decode(word: int) -> Instruction:
    """decode a 16 bit word using masks and return the matching instruction"""
    word &= 0xFFFF
    for mask, pattern, kind in OPCODE_TABLE:
        if word & mask == pattern:
            return kind.from_word(word)
    return Unknown(word)
