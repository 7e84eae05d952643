"""
Unit tests for the data model: memory, registers, timer, keypad, stack.
"""

import pytest

from fontset import fontset
from machine import (
    CallStack, DelayTimer, Keypad, Memory, Registers,
    CHIP8Error, MemoryAddressError, RomTooLargeError,
    StackOverflowError, StackUnderflowError,
    MEMORY_SIZE, PROGRAM_START, STACK_DEPTH,
)


class TestMemory:

    def test_font_at_start(self):
        """The 80 byte font sits at 0x000."""
        mem = Memory()
        assert len(fontset) == 80
        assert mem.read(0, 80) == fontset
        assert mem[0x50] == 0

    def test_font_glyph_zero_and_f(self):
        """Spot check the first and last glyph."""
        mem = Memory()
        assert mem.read(0, 5) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])
        assert mem.read(75, 5) == bytes([0xF0, 0x80, 0xF0, 0x80, 0x80])

    def test_size(self):
        assert len(Memory()) == MEMORY_SIZE == 4096

    def test_read_word_big_endian(self):
        mem = Memory()
        mem[0x300] = 0x12
        mem[0x301] = 0x34
        assert mem.read_word(0x300) == 0x1234

    def test_out_of_range_read(self):
        mem = Memory()
        with pytest.raises(MemoryAddressError):
            mem[0x1000]

    def test_negative_address(self):
        """Negative addresses are not Python indices."""
        mem = Memory()
        with pytest.raises(MemoryAddressError):
            mem[-1]

    def test_out_of_range_write(self):
        mem = Memory()
        with pytest.raises(MemoryAddressError):
            mem[0x1000] = 1

    def test_read_word_at_last_byte(self):
        mem = Memory()
        with pytest.raises(MemoryAddressError):
            mem.read_word(0xFFF)

    def test_read_run_past_end(self):
        mem = Memory()
        with pytest.raises(MemoryAddressError):
            mem.read(0xFFE, 3)

    def test_read_empty_run(self):
        assert Memory().read(0x200, 0) == b""

    def test_load_at_program_start(self):
        mem = Memory()
        mem.load(b"\xAA\xBB")
        assert mem[PROGRAM_START] == 0xAA
        assert mem[PROGRAM_START + 1] == 0xBB

    def test_load_fills_memory_exactly(self):
        mem = Memory()
        mem.load(bytes([1]) * (MEMORY_SIZE - PROGRAM_START))
        assert mem[0xFFF] == 1

    def test_load_too_large(self):
        mem = Memory()
        with pytest.raises(RomTooLargeError):
            mem.load(bytes(MEMORY_SIZE - PROGRAM_START + 1))

    def test_errors_share_a_base(self):
        assert issubclass(MemoryAddressError, CHIP8Error)
        assert issubclass(RomTooLargeError, CHIP8Error)


class TestRegisters:

    def test_zeroed(self):
        regs = Registers()
        assert list(regs.V) == [0] * 16
        assert regs.I == 0
        assert regs.wake == 0

    def test_registers_hold_bytes(self):
        """Storing more than 8 bits is a bug in the caller."""
        regs = Registers()
        regs[3] = 0xFF
        assert regs[3] == 0xFF
        with pytest.raises(ValueError):
            regs[3] = 0x100


class TestDelayTimer:

    def test_tick_decrements(self):
        timer = DelayTimer()
        timer.value = 2
        timer.tick()
        assert timer.value == 1

    def test_floored_at_zero(self):
        timer = DelayTimer()
        timer.value = 1
        timer.tick()
        timer.tick()
        assert timer.value == 0


class TestKeypad:

    def test_down_up(self):
        keys = Keypad()
        keys.down(0xA)
        assert keys.pressed(0xA)
        assert not keys.pressed(0xB)
        keys.up(0xA)
        assert not keys.pressed(0xA)

    def test_keys_are_independent(self):
        keys = Keypad()
        keys.down(1)
        keys.down(2)
        keys.up(1)
        assert keys.pressed(2)

    def test_large_value_not_pressed(self):
        """A register can hold 0x10..0xFF, none of which is a key."""
        assert not Keypad().pressed(0x42)

    def test_bad_key_event(self):
        with pytest.raises(ValueError):
            Keypad().down(16)


class TestCallStack:

    def test_lifo(self):
        stack = CallStack()
        stack.push(0x202)
        stack.push(0x304)
        assert stack.pop() == 0x304
        assert stack.pop() == 0x202
        assert len(stack) == 0

    def test_underflow(self):
        with pytest.raises(StackUnderflowError):
            CallStack().pop()

    def test_overflow(self):
        stack = CallStack()
        for i in range(STACK_DEPTH):
            stack.push(0x200 + i)
        with pytest.raises(StackOverflowError):
            stack.push(0x300)
        assert len(stack) == STACK_DEPTH


class TestErrorMessages:

    def test_plain(self):
        assert str(CHIP8Error("boom")) == "boom"

    def test_located(self):
        e = CHIP8Error("boom").locate(0x204, 0x00EE)
        assert str(e) == "boom (opcode 0x00EE at 0x204)"

    def test_first_location_wins(self):
        e = CHIP8Error("boom").locate(0x204, 0x00EE).locate(0x300, 0x1234)
        assert e.pc == 0x204
        assert e.opcode == 0x00EE

    def test_located_without_opcode(self):
        e = CHIP8Error("boom").locate(0xFFF, None)
        assert str(e) == "boom (at 0xfff)"
