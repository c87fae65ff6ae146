"""
Exceptions raised by the CHIP-8 virtual machine.

Load errors are reported before the run loop starts. Execution faults are
terminal for the VM instance: the CPU state is not safe to continue from.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base class for all virtual machine errors"""


class RomLoadError(Chip8Error):
    """ROM could not be read or does not fit in the program region"""


class ExecutionFault(Chip8Error):
    """Fatal fault raised while executing an instruction"""

    def __init__(self, message: str, pc: int, opcode: Optional[int] = None):
        self.pc = pc
        self.opcode = opcode
        if opcode is None:
            detail = f"at ${pc:04X}"
        else:
            detail = f"at ${pc:04X} (opcode ${opcode:04X})"
        super().__init__(f"{message} {detail}")


class StackOverflowError(ExecutionFault):
    pass


class UnknownOpcodeError(ExecutionFault):
    pass


class NativeCallError(ExecutionFault, NotImplementedError):
    """
    0NNN: call a native machine code routine.

    The routine would run on the host CPU of the original machine, so it
    cannot be emulated. This is a permanent limitation.
    """


class MemoryFault(ExecutionFault):
    """Access outside memory, or a write into the font region"""
