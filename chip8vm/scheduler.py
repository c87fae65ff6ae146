"""Dual-rate run loop for the CHIP-8 virtual machine."""

import logging
import time

from .audio import NullAudio

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Services two periodic obligations against one monotonic clock:

    - opcode ticks at the configured clock speed (sample input, run one
      instruction);
    - frame ticks at a fixed 60Hz (decrement timers, present the display,
      update the tone, poll for quit).

    Each has its own next-due timestamp advanced by its own period, so
    changing the clock speed never moves the frame cadence.
    """

    SLEEP_FRACTION = 0.9

    def __init__(self, cpu, audio=None, clock_speed: float = None,
                 clock=time.monotonic, sleep=time.sleep):
        self.cpu = cpu
        self.audio = audio or NullAudio()
        self.clock = clock
        self.sleep = sleep

        self.frame_period = 1.0 / cpu.config.timer_frequency
        self.set_clock_speed(clock_speed or cpu.config.cpu_frequency)

        self.paused = False
        self.running = False
        self.start()

    def start(self):
        """Restart both schedules from the current clock reading"""
        self.start_time = self.clock()
        self.next_opcode = 0.0
        self.next_frame = 0.0
        self.frames = 0

    def set_clock_speed(self, hz: float):
        if hz <= 0:
            raise ValueError(f"Clock speed must be positive, got {hz}")
        self.clock_speed = hz
        self.opcode_period = 1.0 / hz

    def elapsed(self) -> float:
        return self.clock() - self.start_time

    def time_until_due(self) -> float:
        """Seconds until the sooner of the two next-due timestamps"""
        due = min(self.next_opcode, self.next_frame)
        return max(0.0, due - self.elapsed())

    def step(self) -> bool:
        """One scheduler iteration. Returns True if anything fired"""
        elapsed = self.elapsed()
        fired = False

        if elapsed >= self.next_opcode:
            if not self.paused:
                self.cpu.sample_input()
                self.cpu.cycle()
            self.next_opcode += self.opcode_period
            fired = True

        if elapsed >= self.next_frame:
            self._frame()
            self.next_frame += self.frame_period
            fired = True

        return fired

    def _frame(self):
        timers = self.cpu.timers
        if not self.paused:
            timers.tick()
        self.cpu.display.present()
        self.audio.set_tone(timers.tone_on and not self.paused)
        if self.cpu.keypad.poll_for_quit():
            self.running = False
        self.frames += 1

    def run(self, max_frames: int = None):
        """
        Run until the input source asks to quit, or until max_frames frame
        ticks have run. Execution faults propagate to the caller.
        """
        self.start()
        self.running = True
        logger.info("Running at %g Hz", self.clock_speed)
        try:
            while self.running:
                if max_frames is not None and self.frames >= max_frames:
                    break
                if self.step():
                    # Wake a little early rather than oversleep the next tick
                    self.sleep(self.time_until_due() * self.SLEEP_FRACTION)
        finally:
            self.audio.set_tone(False)
        logger.info("Stopped after %d instructions, %d frames",
                    self.cpu.cycles, self.frames)
