import random

import pytest

from chip8vm.cpu import Chip8CPU
from chip8vm.display import DisplayBuffer
from chip8vm.keypad import Keypad


def assemble(*opcodes: int) -> bytes:
    """Big-endian program bytes for a list of 16-bit opcodes"""
    out = bytearray()
    for op in opcodes:
        out += bytes([(op >> 8) & 0xFF, op & 0xFF])
    return bytes(out)


class FakeClock:
    """
    Monotonic clock that only moves when told to, when slept on, or by
    `drift` seconds per reading (so busy-wait loops make progress).
    """

    def __init__(self, now: float = 100.0, drift: float = 0.0):
        self.now = now
        self.drift = drift
        self.sleeps = []

    def __call__(self) -> float:
        now = self.now
        self.now += self.drift
        return now

    def advance(self, seconds: float):
        self.now += seconds

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def keypad():
    return Keypad()


@pytest.fixture
def cpu(keypad):
    return Chip8CPU(display=DisplayBuffer(), keypad=keypad, rng=random.Random(1234))


@pytest.fixture
def load(cpu):
    """Load opcodes as a ROM and return the CPU"""
    def _load(*opcodes: int) -> Chip8CPU:
        cpu.load_rom(assemble(*opcodes), "test.ch8")
        return cpu
    return _load


@pytest.fixture
def clock():
    return FakeClock()
