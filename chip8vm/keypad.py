"""
Hex keypad input source.

Keypad holds the 16-key state vector. Frontends feed it through press() and
release(); the CPU samples it once per executed opcode.
"""

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

NUM_KEYS = 16


class Keypad:
    """Headless input source for the 0x0-0xF hex keypad"""

    def __init__(self):
        self.keys: List[bool] = [False] * NUM_KEYS
        self.quit_requested = False

    def press(self, key: int):
        self.keys[key & 0xF] = True

    def release(self, key: int):
        self.keys[key & 0xF] = False

    def release_all(self):
        self.keys = [False] * NUM_KEYS

    def set_key(self, key: int, pressed: bool):
        """Callback form used by the game controller"""
        if pressed:
            self.press(key)
        else:
            self.release(key)

    def request_quit(self):
        logger.info("Quit requested")
        self.quit_requested = True

    def sample_keys(self) -> List[bool]:
        return list(self.keys)

    def is_key_pressed(self, index: int) -> bool:
        return self.keys[index & 0xF]

    def poll_pressed_key(self) -> Optional[int]:
        """Lowest-numbered key currently down, or None. Never blocks"""
        for index, pressed in enumerate(self.keys):
            if pressed:
                return index
        return None

    def poll_for_quit(self) -> bool:
        return self.quit_requested
