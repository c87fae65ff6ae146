"""
Delay and sound timers, decremented at 60Hz.
"""


class TimerUnit:
    """Two independent 8-bit countdown timers"""

    def __init__(self):
        self.delay = 0
        self.sound = 0

    def reset(self):
        self.delay = 0
        self.sound = 0

    def tick(self):
        """Decrement both timers, saturating at 0 (call at 60Hz)"""
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    @property
    def tone_on(self) -> bool:
        return self.sound > 0
