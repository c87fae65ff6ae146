"""
Game controller input via pygame joysticks.

The controller is polled from the run loop (no thread). Face/shoulder buttons
and the D-pad map to keypad keys; some buttons also trigger session actions.
"""

import logging
from typing import Callable, Optional

import pygame

logger = logging.getLogger(__name__)


class Chip8Controller:
    """Controller input handler"""

    # Controller button mappings for PS5/Atari style
    BUTTON_SQUARE = 0
    BUTTON_CIRCLE = 1
    BUTTON_CROSS = 2
    BUTTON_TRIANGLE = 3
    BUTTON_L1 = 4
    BUTTON_R1 = 5
    BUTTON_L2 = 6
    BUTTON_R2 = 7
    BUTTON_SHARE = 8
    BUTTON_OPTIONS = 9
    BUTTON_PS = 12
    BUTTON_TOUCHPAD = 13

    BUTTON_TO_KEY = {
        BUTTON_CIRCLE: 0x1,
        BUTTON_SQUARE: 0x2,
        BUTTON_TRIANGLE: 0x3,
        BUTTON_CROSS: 0xC,
        BUTTON_L1: 0x4,
        BUTTON_R1: 0x5,
        BUTTON_L2: 0xD,
        BUTTON_R2: 0xE,
        BUTTON_SHARE: 0x7,
        BUTTON_OPTIONS: 0x8,
        BUTTON_PS: 0x9,
        BUTTON_TOUCHPAD: 0xA,
    }

    # D-pad (as hat) -> keys 8/2/4/6 (up/down/left/right)
    HAT_TO_KEY = {
        (0, 1): 0x8,
        (0, -1): 0x2,
        (-1, 0): 0x4,
        (1, 0): 0x6,
    }

    def __init__(self, on_key_change: Callable[[int, bool], None]):
        self.on_key_change = on_key_change
        self.joystick = None
        self.connected = False

        # Special action callbacks
        self.on_pause_toggle: Optional[Callable] = None
        self.on_speed_increase: Optional[Callable] = None
        self.on_speed_decrease: Optional[Callable] = None

        pygame.init()
        pygame.joystick.init()

    def poll(self):
        """Check connection and drain pending joystick events"""
        pygame.event.pump()
        self._check_connection()
        if not self.connected:
            return

        for event in pygame.event.get(
                [pygame.JOYBUTTONDOWN, pygame.JOYBUTTONUP, pygame.JOYHATMOTION]):
            if event.type == pygame.JOYBUTTONDOWN:
                self._handle_button(event.button, True)
            elif event.type == pygame.JOYBUTTONUP:
                self._handle_button(event.button, False)
            else:
                self._handle_hat(event.value)

    def close(self):
        pygame.quit()

    def _check_connection(self):
        """Check for controller connection/disconnection"""
        count = pygame.joystick.get_count()

        if count > 0 and not self.connected:
            self.joystick = pygame.joystick.Joystick(0)
            self.joystick.init()
            self.connected = True
            logger.info("Controller connected: %s", self.joystick.get_name())
        elif count == 0 and self.connected:
            self.connected = False
            self.joystick = None
            logger.info("Controller disconnected")

    def _handle_button(self, button: int, pressed: bool):
        if pressed:
            if button == self.BUTTON_CROSS and self.on_pause_toggle:
                self.on_pause_toggle()
            elif button == self.BUTTON_R2 and self.on_speed_increase:
                self.on_speed_increase()
            elif button == self.BUTTON_L2 and self.on_speed_decrease:
                self.on_speed_decrease()

        key = self.BUTTON_TO_KEY.get(button)
        if key is not None:
            self.on_key_change(key, pressed)

    def _handle_hat(self, value: tuple):
        """Handle D-pad input"""
        for key in self.HAT_TO_KEY.values():
            self.on_key_change(key, False)
        key = self.HAT_TO_KEY.get(tuple(value))
        if key is not None:
            self.on_key_change(key, True)
