"""
Audio sinks driven by the sound timer.
"""

import sys


class NullAudio:
    """Audio sink that only records the tone state"""

    def __init__(self):
        self.is_beeping = False

    def set_tone(self, on: bool):
        self.is_beeping = on


class BellAudio(NullAudio):
    """Audio system for CHIP-8 sound timer beeps"""

    def __init__(self, stream=None):
        super().__init__()
        self.stream = stream or sys.stdout

    def set_tone(self, on: bool):
        if on and not self.is_beeping:
            # Terminal bell, once per beep
            self.stream.write('\a')
            self.stream.flush()
        self.is_beeping = on
