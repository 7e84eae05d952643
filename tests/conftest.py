import pytest

from chip8 import CHIP8


def assemble(*words):
    return b"".join(w.to_bytes(2, "big") for w in words)


@pytest.fixture
def make_chip():
    """Build a CHIP8 with the given instruction words loaded at 0x200."""
    def make(*words, **kwargs):
        return CHIP8(assemble(*words), **kwargs)
    return make
