"""
CHIP-8 CPU core: memory, register file, call stack and the opcode dispatcher.

The CPU talks to its collaborators only through narrow interfaces: a display
buffer (clear/get_pixel/set_pixel), an input source (sample_keys and
poll_pressed_key) and its own TimerUnit. The scheduler drives cycle() and
TimerUnit.tick() at their own rates.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .config import EmulatorConfig, FONT_4X5, FONT_CHAR_SIZE
from .disasm import disassemble
from .display import DisplayBuffer
from .errors import (
    MemoryFault,
    NativeCallError,
    RomLoadError,
    StackOverflowError,
    UnknownOpcodeError,
)
from .keypad import Keypad
from .timers import TimerUnit

logger = logging.getLogger(__name__)


@dataclass
class EmulatorState:
    """Complete serializable emulator state for save/load"""
    memory: bytes
    v: List[int]
    i: int
    pc: int
    stack: List[int]
    delay_timer: int
    sound_timer: int
    display: List[List[int]]


def read_rom(path) -> bytes:
    """Read a ROM file, raising RomLoadError if it cannot be read"""
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise RomLoadError(f"Cannot read ROM {path}: {e}") from e


class Chip8CPU:
    """
    CHIP-8 CPU with all 35 opcodes.

    The program counter is advanced past the instruction before it is
    executed, so jump and call targets are absolute and skips add 2 more.
    """

    def __init__(self, config: EmulatorConfig = None,
                 display: DisplayBuffer = None,
                 keypad: Keypad = None,
                 rng: Optional[random.Random] = None):
        self.config = config or EmulatorConfig()
        self.display = display or DisplayBuffer(
            self.config.display_width, self.config.display_height)
        self.keypad = keypad or Keypad()
        self.rng = rng or random.Random()
        self.timers = TimerUnit()

        self.rom: Optional[bytes] = None
        self.rom_name = ""
        self.reset()

    def reset(self):
        """Reset to the power-on state, reloading the current ROM if any"""
        cfg = self.config

        # Main memory (4KB)
        self.memory = bytearray(cfg.memory_size)
        self.memory[cfg.font_start:cfg.font_end] = FONT_4X5
        if self.rom is not None:
            start = cfg.program_start
            self.memory[start:start + len(self.rom)] = self.rom

        # Registers
        self.v = [0] * cfg.num_registers  # V0-VF
        self.i = 0
        self.pc = cfg.program_start

        self.stack: List[int] = []
        self.timers.reset()
        self.display.clear()
        self.keys = [False] * cfg.num_keys

        # Address and word of the instruction being executed
        self.op_pc = self.pc
        self.opcode = 0
        self.cycles = 0

    def load_rom(self, data: bytes, name: str = ""):
        """Load ROM into memory starting at the program origin"""
        max_size = self.config.max_rom_size
        if len(data) > max_size:
            raise RomLoadError(
                f"ROM too large: {len(data)} bytes (max {max_size})")

        self.rom = bytes(data)
        self.rom_name = name or "Unknown"
        self.reset()
        logger.info("Loaded %s (%d bytes) at $%03X",
                    self.rom_name, len(data), self.config.program_start)

    @property
    def rom_loaded(self) -> bool:
        return self.rom is not None

    @property
    def delay_timer(self) -> int:
        return self.timers.delay

    @property
    def sound_timer(self) -> int:
        return self.timers.sound

    # ==================== MEMORY ====================

    def _read(self, addr: int) -> int:
        if not 0 <= addr < self.config.memory_size:
            raise MemoryFault(f"Read from ${addr:04X} outside memory",
                              self.op_pc, self.opcode)
        return self.memory[addr]

    def _write(self, addr: int, value: int):
        cfg = self.config
        if not 0 <= addr < cfg.memory_size:
            raise MemoryFault(f"Write to ${addr:04X} outside memory",
                              self.op_pc, self.opcode)
        if cfg.font_start <= addr < cfg.font_end:
            raise MemoryFault(f"Write to ${addr:04X} inside font area",
                              self.op_pc, self.opcode)
        self.memory[addr] = value & 0xFF

    # ==================== EXECUTION ====================

    def sample_input(self):
        """Latch the input source's key-state vector"""
        self.keys = self.keypad.sample_keys()

    def cycle(self) -> int:
        """Fetch, decode and execute one instruction. Returns the opcode"""
        self.op_pc = self.pc
        self.opcode = None
        opcode = (self._read(self.pc) << 8) | self._read(self.pc + 1)
        self.opcode = opcode
        self.pc += 2

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("$%03X  %04X  %s", self.op_pc, opcode,
                         disassemble(opcode))

        self._execute(opcode)
        self.cycles += 1
        return opcode

    def _execute(self, opcode: int):
        """Decode and execute a single opcode"""
        # Extract common fields
        nnn = opcode & 0x0FFF           # 12-bit address
        nn = opcode & 0x00FF            # 8-bit constant
        n = opcode & 0x000F             # 4-bit constant
        x = (opcode >> 8) & 0x0F        # Register X index
        y = (opcode >> 4) & 0x0F        # Register Y index

        # First nibble determines instruction class
        op = opcode >> 12

        if opcode == 0x00E0:
            # 00E0: Clear screen
            self.display.clear()

        elif opcode == 0x00EE:
            # 00EE: Return from subroutine
            if self.stack:
                self.pc = self.stack.pop()

        elif op == 0x0:
            # 0NNN: Call machine code routine
            raise NativeCallError(
                f"Native routine ${nnn:03X} cannot be emulated",
                self.op_pc, opcode)

        elif op == 0x1:
            # 1NNN: Jump to NNN
            self.pc = nnn

        elif op == 0x2:
            # 2NNN: Call subroutine at NNN
            if len(self.stack) >= self.config.stack_size:
                raise StackOverflowError(
                    f"Stack overflow ({self.config.stack_size} levels)",
                    self.op_pc, opcode)
            self.stack.append(self.pc)
            self.pc = nnn

        elif op == 0x3:
            # 3XNN: Skip if VX == NN
            if self.v[x] == nn:
                self.pc += 2

        elif op == 0x4:
            # 4XNN: Skip if VX != NN
            if self.v[x] != nn:
                self.pc += 2

        elif op == 0x5 and n == 0:
            # 5XY0: Skip if VX == VY
            if self.v[x] == self.v[y]:
                self.pc += 2

        elif op == 0x6:
            # 6XNN: VX = NN
            self.v[x] = nn

        elif op == 0x7:
            # 7XNN: VX += NN (no carry)
            self.v[x] = (self.v[x] + nn) & 0xFF

        elif op == 0x8:
            self._execute_8xxx(opcode, x, y, n)

        elif op == 0x9 and n == 0:
            # 9XY0: Skip if VX != VY
            if self.v[x] != self.v[y]:
                self.pc += 2

        elif op == 0xA:
            # ANNN: I = NNN
            self.i = nnn

        elif op == 0xB:
            # BNNN: Jump to NNN + V0
            self.pc = nnn + self.v[0]

        elif op == 0xC:
            # CXNN: VX = random & NN
            self.v[x] = self.rng.randint(0, 255) & nn

        elif op == 0xD:
            # DXYN: Draw sprite
            self._draw(x, y, n)

        elif op == 0xE and nn == 0x9E:
            # EX9E: Skip if key VX pressed
            if self.keys[self.v[x] & 0xF]:
                self.pc += 2

        elif op == 0xE and nn == 0xA1:
            # EXA1: Skip if key VX not pressed
            if not self.keys[self.v[x] & 0xF]:
                self.pc += 2

        elif op == 0xF:
            self._execute_fxxx(opcode, x, nn)

        else:
            self._unknown(opcode)

    def _execute_8xxx(self, opcode: int, x: int, y: int, n: int):
        """Execute 8xxx opcodes (ALU operations). VF is written last"""
        if n == 0x0:
            # 8XY0: VX = VY
            self.v[x] = self.v[y]
        elif n == 0x1:
            # 8XY1: VX |= VY
            self.v[x] |= self.v[y]
        elif n == 0x2:
            # 8XY2: VX &= VY
            self.v[x] &= self.v[y]
        elif n == 0x3:
            # 8XY3: VX ^= VY
            self.v[x] ^= self.v[y]
        elif n == 0x4:
            # 8XY4: VX += VY with carry
            result = self.v[x] + self.v[y]
            self.v[x] = result & 0xFF
            self.v[0xF] = 1 if result > 0xFF else 0
        elif n == 0x5:
            # 8XY5: VX -= VY, VF = NOT borrow
            no_borrow = 1 if self.v[x] >= self.v[y] else 0
            self.v[x] = (self.v[x] - self.v[y]) & 0xFF
            self.v[0xF] = no_borrow
        elif n == 0x6:
            # 8XY6: VX >>= 1
            lsb = self.v[x] & 1
            self.v[x] = self.v[x] >> 1
            self.v[0xF] = lsb
        elif n == 0x7:
            # 8XY7: VX = VY - VX, VF = NOT borrow
            no_borrow = 1 if self.v[y] >= self.v[x] else 0
            self.v[x] = (self.v[y] - self.v[x]) & 0xFF
            self.v[0xF] = no_borrow
        elif n == 0xE:
            # 8XYE: VX <<= 1
            msb = (self.v[x] >> 7) & 1
            self.v[x] = (self.v[x] << 1) & 0xFF
            self.v[0xF] = msb
        else:
            self._unknown(opcode)

    def _execute_fxxx(self, opcode: int, x: int, nn: int):
        """Execute Fxxx opcodes"""
        if nn == 0x07:
            # FX07: VX = delay timer
            self.v[x] = self.timers.delay
        elif nn == 0x0A:
            # FX0A: Wait for key press. Re-executes until a key is down
            key = self.keypad.poll_pressed_key()
            if key is None:
                self.pc -= 2
            else:
                self.v[x] = key
        elif nn == 0x15:
            # FX15: delay timer = VX
            self.timers.delay = self.v[x]
        elif nn == 0x18:
            # FX18: sound timer = VX
            self.timers.sound = self.v[x]
        elif nn == 0x1E:
            # FX1E: I += VX
            self.i = (self.i + self.v[x]) & 0xFFFF
        elif nn == 0x29:
            # FX29: I = font sprite for VX
            self.i = self.config.font_start + self.v[x] * FONT_CHAR_SIZE
        elif nn == 0x33:
            # FX33: Store BCD of VX at I, I+1, I+2
            value = self.v[x]
            self._write(self.i, value // 100)
            self._write(self.i + 1, (value // 10) % 10)
            self._write(self.i + 2, value % 10)
        elif nn == 0x55:
            # FX55: Store V0-VX at I
            for k in range(x + 1):
                self._write(self.i + k, self.v[k])
        elif nn == 0x65:
            # FX65: Load V0-VX from I
            for k in range(x + 1):
                self.v[k] = self._read(self.i + k)
        else:
            self._unknown(opcode)

    def _draw(self, x: int, y: int, n: int):
        """
        DXYN: Draw sprite at (VX, VY) with height N.

        Sprites are XORed onto the display and clipped at the right and
        bottom edges. VF is set to 1 if any pixel is erased (collision).
        """
        width = self.display.width
        height = self.display.height
        px = self.v[x] % width
        py = self.v[y] % height
        collision = False

        for row in range(n):
            if py + row >= height:
                break
            sprite_byte = self._read(self.i + row)

            for col in range(8):
                if px + col >= width:
                    break
                if sprite_byte & (0x80 >> col):
                    if self.display.set_pixel(px + col, py + row, 1):
                        collision = True

        self.v[0xF] = 1 if collision else 0

    def _unknown(self, opcode: int):
        raise UnknownOpcodeError("Unknown opcode", self.op_pc, opcode)

    # ==================== STATE SAVE/LOAD ====================

    def get_state(self) -> EmulatorState:
        """Get complete emulator state for saving"""
        return EmulatorState(
            memory=bytes(self.memory),
            v=list(self.v),
            i=self.i,
            pc=self.pc,
            stack=list(self.stack),
            delay_timer=self.timers.delay,
            sound_timer=self.timers.sound,
            display=self.display.snapshot(),
        )

    def load_state(self, state: EmulatorState):
        """
        Restore emulator state from save. Raises ValueError, leaving the
        current state untouched, if the save does not fit this machine.
        """
        cfg = self.config
        if len(state.memory) != cfg.memory_size:
            raise ValueError(
                f"State memory is {len(state.memory)} bytes, "
                f"expected {cfg.memory_size}")
        if len(state.v) != cfg.num_registers:
            raise ValueError(
                f"State has {len(state.v)} registers, expected {cfg.num_registers}")
        if len(state.stack) > cfg.stack_size:
            raise ValueError(
                f"State stack depth {len(state.stack)} exceeds {cfg.stack_size}")

        # Last check; restore() validates the shape before touching pixels
        self.display.restore(state.display)
        self.memory = bytearray(state.memory)
        self.v = list(state.v)
        self.i = state.i
        self.pc = state.pc
        self.stack = list(state.stack)
        self.timers.delay = state.delay_timer
        self.timers.sound = state.sound_timer

    def dump_registers(self) -> str:
        """Multi-line register dump for debugging"""
        lines = [
            f"PC: ${self.pc:04X}  I: ${self.i:04X}  SP: {len(self.stack)}",
            f"DT: {self.timers.delay:3d}  ST: {self.timers.sound:3d}",
        ]
        for base in range(0, 16, 4):
            lines.append("  " + " ".join(
                f"V{j:X}=${self.v[j]:02X}" for j in range(base, base + 4)))
        return "\n".join(lines)
