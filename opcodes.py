import enum, re

from machine import UnknownInstructionError


class Op(enum.Enum):
    CLS = "00E0"
    RET = "00EE"
    JP = "1..."
    CALL = "2..."
    SE_BYTE = "3..."
    SNE_BYTE = "4..."
    SE_REG = "5..0"
    LD_BYTE = "6..."
    ADD_BYTE = "7..."
    LD_REG = "8..0"
    OR = "8..1"
    AND = "8..2"
    XOR = "8..3"
    ADD_REG = "8..4"
    SUB = "8..5"
    SHR = "8..6"
    SUBN = "8..7"
    SHL = "8..E"
    SNE_REG = "9..0"
    LD_I = "A..."
    JP_V0 = "B..."
    RND = "C..."
    DRW = "D..."
    SKP = "E.9E"
    SKNP = "E.A1"
    LD_VX_DT = "F.07"
    LD_KEY = "F.0A"
    LD_DT_VX = "F.15"
    LD_ST_VX = "F.18"
    ADD_I = "F.1E"
    LD_FONT = "F.29"
    LD_BCD = "F.33"
    LD_STORE = "F.55"
    LD_FILL = "F.65"

    def __init__(self, pattern):
        self.regex = re.compile(pattern)


MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP {nnn:#05x}",
    Op.CALL: "CALL {nnn:#05x}",
    Op.SE_BYTE: "SE V{x:X}, {nn:#04x}",
    Op.SNE_BYTE: "SNE V{x:X}, {nn:#04x}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_BYTE: "LD V{x:X}, {nn:#04x}",
    Op.ADD_BYTE: "ADD V{x:X}, {nn:#04x}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}, V{y:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}, V{y:X}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, {nnn:#05x}",
    Op.JP_V0: "JP V0, {nnn:#05x}",
    Op.RND: "RND V{x:X}, {nn:#04x}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_KEY: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I: "ADD I, V{x:X}",
    Op.LD_FONT: "LD F, V{x:X}",
    Op.LD_BCD: "LD B, V{x:X}",
    Op.LD_STORE: "LD [I], V{x:X}",
    Op.LD_FILL: "LD V{x:X}, [I]",
}


class Instruction:
    """A decoded instruction word, tagged with the `Op` it matched."""

    __slots__ = ("op", "word")

    def __init__(self, op, word):
        self.op = op
        self.word = word

    def __repr__(self):
        return f"Instruction({self.op.name}, 0x{self.word:04X})"

    def __eq__(self, other):
        return (isinstance(other, Instruction)
                and (self.op, self.word) == (other.op, other.word))

    @property
    def x(self):
        return (self.word >> 8) & 0xF

    @property
    def y(self):
        return (self.word >> 4) & 0xF

    @property
    def n(self):
        return self.word & 0xF

    @property
    def nn(self):
        return self.word & 0xFF

    @property
    def nnn(self):
        return self.word & 0xFFF

    def mnemonic(self):
        return MNEMONICS[self.op].format(
            x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn
        )


def decode(word):
    ophex = "{:0>4X}".format(word)
    for op in Op:
        if op.regex.fullmatch(ophex):
            return Instruction(op, word)
    raise UnknownInstructionError(f"Unknown OpCode 0x{ophex}")


def disassemble(word):
    try:
        return decode(word).mnemonic()
    except UnknownInstructionError:
        return f"DW 0x{word:04X}"
