import logging, random

from fontset import GLYPH_SIZE
from framebuffer import Framebuffer
from machine import (
    CHIP8Error, PROGRAM_START,
    CallStack, DelayTimer, Keypad, Memory, Registers, State,
)
from opcodes import Op, decode

logger = logging.getLogger(__name__)


class CHIP8:
    def __init__(self, cartdata=bytes(), xor_sprites=False):
        self.memory = Memory()
        self.regs = Registers()
        self.timer = DelayTimer()
        self.keypad = Keypad()
        self.stack = CallStack()
        self.screen = Framebuffer()
        self.state = State.RUNNING
        self.pc = PROGRAM_START
        self.xor_sprites = xor_sprites

        self.drawFlag = False

        self.memory.load(cartdata, PROGRAM_START)

        self.handlers = {
            Op.CLS: self._cls,
            Op.RET: self._ret,
            Op.JP: self._jp,
            Op.CALL: self._call,
            Op.SE_BYTE: self._se_byte,
            Op.SNE_BYTE: self._sne_byte,
            Op.SE_REG: self._se_reg,
            Op.LD_BYTE: self._ld_byte,
            Op.ADD_BYTE: self._add_byte,
            Op.LD_REG: self._ld_reg,
            Op.OR: self._or,
            Op.AND: self._and,
            Op.XOR: self._xor,
            Op.ADD_REG: self._add_reg,
            Op.SUB: self._sub,
            Op.SHR: self._shr,
            Op.SUBN: self._subn,
            Op.SHL: self._shl,
            Op.SNE_REG: self._sne_reg,
            Op.LD_I: self._ld_i,
            Op.JP_V0: self._jp_v0,
            Op.RND: self._rnd,
            Op.DRW: self._drw,
            Op.SKP: self._skp,
            Op.SKNP: self._sknp,
            Op.LD_VX_DT: self._ld_vx_dt,
            Op.LD_KEY: self._ld_key,
            Op.LD_DT_VX: self._ld_dt_vx,
            Op.LD_ST_VX: self._ld_st_vx,
            Op.ADD_I: self._add_i,
            Op.LD_FONT: self._ld_font,
            Op.LD_BCD: self._ld_bcd,
            Op.LD_STORE: self._ld_store,
            Op.LD_FILL: self._ld_fill,
        }

    @property
    def V(self):
        return self.regs.V

    @property
    def waiting(self):
        return self.state is State.WAITING_FOR_KEY

    def fetch(self):
        opcode = self.memory.read_word(self.pc)
        self.pc += 2
        return opcode

    def cycle(self):
        """Run one instruction. Returns False without doing anything while
        the machine is waiting for a key."""
        if self.waiting:
            return False
        pc = self.pc
        opcode = None
        try:
            opcode = self.fetch()
            instruction = decode(opcode)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%#05x: %04X  %s", pc, opcode, instruction.mnemonic())
            self.handlers[instruction.op](instruction)
        except CHIP8Error as e:
            e.locate(pc, opcode)
            raise
        return True

    def run_frame(self, ipf):
        """Run up to `ipf` instructions, then tick the delay timer once."""
        for _ in range(ipf):
            if not self.cycle():
                break
        self.tick_timers()

    def tick_timers(self):
        self.timer.tick()

    def key_down(self, key):
        self.keypad.down(key)

    def key_up(self, key):
        self.keypad.up(key)
        if self.waiting:
            self.regs[self.regs.wake] = key
            self.state = State.RUNNING
            logger.debug("Key %X released, stored in V%X", key, self.regs.wake)

    def skip(self):
        self.pc += 2

    # Instructions

    def _cls(self, ins):
        # 00E0: Clear screen
        self.screen.clear()
        self.drawFlag = True

    def _ret(self, ins):
        # 00EE: Return from subroutine
        self.pc = self.stack.pop()

    def _jp(self, ins):
        # 1nnn: Jump to [nnn]
        self.pc = ins.nnn

    def _call(self, ins):
        # 2nnn: Call subroutine at [nnn]
        self.stack.push(self.pc)
        self.pc = ins.nnn

    def _se_byte(self, ins):
        # 3xnn: Skips next instruction if V[x] equals [nn]
        if self.V[ins.x] == ins.nn:
            self.skip()

    def _sne_byte(self, ins):
        # 4xnn: Skips next instruction if V[x] doesn't equal [nn]
        if self.V[ins.x] != ins.nn:
            self.skip()

    def _se_reg(self, ins):
        # 5xy0: Skips next instruction if V[x] equals V[y]
        if self.V[ins.x] == self.V[ins.y]:
            self.skip()

    def _ld_byte(self, ins):
        # 6xnn: Set V[x] to [nn]
        self.V[ins.x] = ins.nn

    def _add_byte(self, ins):
        # 7xnn: Add [nn] to V[x], Vf untouched
        self.V[ins.x] = (self.V[ins.x] + ins.nn) % 256

    def _ld_reg(self, ins):
        # 8xy0: Set V[x] to V[y]
        self.V[ins.x] = self.V[ins.y]

    def _or(self, ins):
        # 8xy1: Set V[x] to V[x] OR V[y], reset Vf
        self.V[ins.x] |= self.V[ins.y]
        self.V[15] = 0

    def _and(self, ins):
        # 8xy2: Set V[x] to V[x] AND V[y], reset Vf
        self.V[ins.x] &= self.V[ins.y]
        self.V[15] = 0

    def _xor(self, ins):
        # 8xy3: Set V[x] to V[x] XOR V[y], reset Vf
        self.V[ins.x] ^= self.V[ins.y]
        self.V[15] = 0

    def _add_reg(self, ins):
        # 8xy4: Add V[y] to V[x], Vf is the carry
        total = self.V[ins.x] + self.V[ins.y]
        self.V[ins.x] = total % 256
        self.V[15] = int(total > 255)

    def _sub(self, ins):
        # 8xy5: Subtract V[y] from V[x], Vf is 0 on borrow
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vx - vy) % 256
        self.V[15] = int(vy <= vx)

    def _shr(self, ins):
        # 8xy6: Put V[y] shifted right by 1 in V[x], Vf is the bit shifted out
        vy = self.V[ins.y]
        self.V[ins.x] = vy >> 1
        self.V[15] = vy & 1

    def _subn(self, ins):
        # 8xy7: Set V[x] to V[y] minus V[x], Vf is 0 on borrow
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vy - vx) % 256
        self.V[15] = int(vx <= vy)

    def _shl(self, ins):
        # 8xyE: Put V[y] shifted left by 1 in V[x], Vf is the bit shifted out
        vy = self.V[ins.y]
        self.V[ins.x] = (vy << 1) % 256
        self.V[15] = vy >> 7

    def _sne_reg(self, ins):
        # 9xy0: Skips next instruction if V[x] doesn't equal V[y]
        if self.V[ins.x] != self.V[ins.y]:
            self.skip()

    def _ld_i(self, ins):
        # Annn: Set I to [nnn]
        self.regs.I = ins.nnn

    def _jp_v0(self, ins):
        # Bnnn: Jump to [nnn] plus V0
        self.pc = ins.nnn + self.V[0]

    def _rnd(self, ins):
        # Cxnn: Set V[x] to a random number, and bitwise-AND it with [nn]
        self.V[ins.x] = random.randint(0, 255) & ins.nn

    def _drw(self, ins):
        # Dxyn: Draw the [n] byte sprite at I onto the display at V[x], V[y]
        rows = self.memory.read(self.regs.I, ins.n)
        flag = self.screen.draw_sprite(
            self.V[ins.x], self.V[ins.y], rows, xor=self.xor_sprites
        )
        self.V[15] = int(flag)
        self.drawFlag = True

    def _skp(self, ins):
        # Ex9E: Skips next instruction if the key V[x] is pressed
        if self.keypad.pressed(self.V[ins.x]):
            self.skip()

    def _sknp(self, ins):
        # ExA1: Skips next instruction if the key V[x] is not pressed
        if not self.keypad.pressed(self.V[ins.x]):
            self.skip()

    def _ld_vx_dt(self, ins):
        # Fx07: Set V[x] to delay timer
        self.V[ins.x] = self.timer.value

    def _ld_key(self, ins):
        # Fx0A: Stop until a key is released, then store it in V[x]
        self.regs.wake = ins.x
        self.state = State.WAITING_FOR_KEY
        logger.debug("Waiting for a key to store in V%X", ins.x)

    def _ld_dt_vx(self, ins):
        # Fx15: Set delay timer to V[x]
        self.timer.value = self.V[ins.x]

    def _ld_st_vx(self, ins):
        # Fx18: Sound timer, there is no sound channel
        logger.debug("Audio is not implemented, ignoring sound timer %d",
                     self.V[ins.x])

    def _add_i(self, ins):
        # Fx1E: Add V[x] to I
        self.regs.I = (self.regs.I + self.V[ins.x]) & 0xFFFF

    def _ld_font(self, ins):
        # Fx29: Set I to the fontset glyph for the value of V[x]
        self.regs.I = (self.V[ins.x] * GLYPH_SIZE) % len(self.memory)

    def _ld_bcd(self, ins):
        # Fx33: Dump the 3-digit decimal representation of V[x] into
        # memory, starting at I
        value = self.V[ins.x]
        for i, digit in enumerate((value // 100, value // 10 % 10, value % 10)):
            self.memory[self.regs.I + i] = digit

    def _ld_store(self, ins):
        # Fx55: Dump V0..V[x] into memory, starting at I
        for i in range(ins.x + 1):
            self.memory[self.regs.I + i] = self.V[i]
        self.regs.I += ins.x + 1

    def _ld_fill(self, ins):
        # Fx65: Load memory into V0..V[x], starting at I
        for i in range(ins.x + 1):
            self.V[i] = self.memory[self.regs.I + i]
        self.regs.I += ins.x + 1

