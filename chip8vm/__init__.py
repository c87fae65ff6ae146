"""CHIP-8 virtual machine."""

from .audio import BellAudio, NullAudio
from .config import EmulatorConfig
from .cpu import Chip8CPU, EmulatorState, read_rom
from .display import DisplayBuffer
from .errors import (
    Chip8Error,
    ExecutionFault,
    MemoryFault,
    NativeCallError,
    RomLoadError,
    StackOverflowError,
    UnknownOpcodeError,
)
from .keypad import Keypad
from .scheduler import Scheduler
from .timers import TimerUnit

__version__ = "1.0.0"

__all__ = [
    "BellAudio",
    "Chip8CPU",
    "Chip8Error",
    "DisplayBuffer",
    "EmulatorConfig",
    "EmulatorState",
    "ExecutionFault",
    "Keypad",
    "MemoryFault",
    "NativeCallError",
    "NullAudio",
    "RomLoadError",
    "Scheduler",
    "StackOverflowError",
    "TimerUnit",
    "UnknownOpcodeError",
    "read_rom",
]
