"""
Configuration and constants for the CHIP-8 virtual machine.
"""

from dataclasses import dataclass

# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class EmulatorConfig:
    """Emulator configuration settings"""
    # Memory
    memory_size: int = 4096
    program_start: int = 0x200
    program_end: int = 0xEA0      # 0xEA0-0xFFF reserved (VIP stack/display area)
    font_start: int = 0x000

    # Display
    display_width: int = 64
    display_height: int = 32
    pixelsize: int = 8            # Window pixels per CHIP-8 pixel

    # Timing
    cpu_frequency: int = 500      # Instructions per second
    timer_frequency: int = 60     # Timer decrement rate (Hz)

    # Stack
    stack_size: int = 64

    # Registers
    num_registers: int = 16
    num_keys: int = 16

    @property
    def max_rom_size(self) -> int:
        return self.program_end - self.program_start

    @property
    def font_end(self) -> int:
        return self.font_start + len(FONT_4X5)


# Window
STATUS_BAR_HEIGHT = 24

# Colors
COLORS = {
    'bg': '#0C0C0C',
    'pixel_on': '#C0C0C0',
    'pixel_off': '#1A1A1A',
    'status_bg': '#1E1E1E',
    'status_fg': '#707070',
}

# ============================================================================
# CHIP-8 FONT
# ============================================================================

FONT_CHAR_SIZE = 5

# Standard 4x5 font (0-F) - 80 bytes
FONT_4X5 = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# ============================================================================
# KEYBOARD MAPPING
# ============================================================================

# CHIP-8 Hex Keypad    PC Keyboard
#  1 2 3 C             1 2 3 4
#  4 5 6 D      →      Q W E R
#  7 8 9 E             A S D F
#  A 0 B F             Z X C V

KEYBOARD_MAP = {
    '1': 0x1, '2': 0x2, '3': 0x3, '4': 0xC,
    'q': 0x4, 'w': 0x5, 'e': 0x6, 'r': 0xD,
    'a': 0x7, 's': 0x8, 'd': 0x9, 'f': 0xE,
    'z': 0xA, 'x': 0x0, 'c': 0xB, 'v': 0xF,
}
