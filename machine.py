import enum, logging

from fontset import fontset

logger = logging.getLogger(__name__)

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
REGISTER_COUNT = 16
KEY_COUNT = 16
STACK_DEPTH = 16


class CHIP8Error(Exception):
    """Base class for every fatal condition raised by the virtual machine.

    The executor stamps the faulting opcode and instruction pointer onto the
    error before it leaves `CHIP8.cycle`, so the message always says where
    the program died.
    """

    def __init__(self, message):
        super().__init__(message)
        self.message = message
        self.pc = None
        self.opcode = None

    def locate(self, pc, opcode):
        if self.pc is None:
            self.pc = pc
            self.opcode = opcode
        return self

    def __str__(self):
        if self.pc is None:
            return self.message
        if self.opcode is None:
            return f"{self.message} (at {self.pc:#05x})"
        return f"{self.message} (opcode 0x{self.opcode:04X} at {self.pc:#05x})"


class UnknownInstructionError(CHIP8Error):
    pass

class StackUnderflowError(CHIP8Error):
    pass

class StackOverflowError(CHIP8Error):
    pass

class MemoryAddressError(CHIP8Error):
    pass

class RomTooLargeError(CHIP8Error):
    pass


class State(enum.Enum):
    RUNNING = "running"
    WAITING_FOR_KEY = "waiting_for_key"


class Memory:
    def __init__(self, size=MEMORY_SIZE):
        self.data = bytearray(size)
        self.load(fontset, 0)

    def __len__(self):
        return len(self.data)

    def _check(self, addr):
        if not 0 <= addr < len(self.data):
            raise MemoryAddressError(f"Address {addr:#x} is outside memory")

    def __getitem__(self, addr):
        self._check(addr)
        return self.data[addr]

    def __setitem__(self, addr, value):
        self._check(addr)
        self.data[addr] = value

    def read(self, addr, length):
        # Sprite rows and register fills read a run of bytes
        if length:
            self._check(addr)
            self._check(addr + length - 1)
        return bytes(self.data[addr:addr + length])

    def read_word(self, addr):
        return self[addr] << 8 | self[addr + 1]

    def load(self, data, offset=PROGRAM_START):
        if offset + len(data) > len(self.data):
            raise RomTooLargeError(
                f"{len(data)} bytes do not fit at {offset:#05x}, "
                f"only {len(self.data) - offset} available"
            )
        self.data[offset:offset + len(data)] = data
        logger.debug("Loaded %d bytes at %#05x", len(data), offset)


class Registers:
    def __init__(self):
        self.V = bytearray(REGISTER_COUNT)
        self.I = 0
        # Register that receives the key once a key-wait completes
        self.wake = 0

    def __getitem__(self, index):
        return self.V[index]

    def __setitem__(self, index, value):
        self.V[index] = value


class DelayTimer:
    def __init__(self):
        self.value = 0

    def tick(self):
        if self.value > 0:
            self.value -= 1


class Keypad:
    def __init__(self):
        self.keys = [False] * KEY_COUNT

    def _check(self, key):
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"No such key: {key!r}")

    def down(self, key):
        self._check(key)
        self.keys[key] = True

    def up(self, key):
        self._check(key)
        self.keys[key] = False

    def pressed(self, key):
        # Programs may test a register holding anything up to 0xFF
        return key < KEY_COUNT and self.keys[key]


class CallStack:
    def __init__(self, depth=STACK_DEPTH):
        self.depth = depth
        self.addresses = []

    def __len__(self):
        return len(self.addresses)

    def push(self, addr):
        if len(self.addresses) == self.depth:
            raise StackOverflowError(
                f"Stack is full ({self.depth} levels), cannot call subroutine"
            )
        self.addresses.append(addr)

    def pop(self):
        if not self.addresses:
            raise StackUnderflowError("Return has nowhere to go")
        return self.addresses.pop()
