import pytest

from chip8vm.controller import Chip8Controller
from chip8vm.keypad import Keypad


@pytest.fixture
def controller():
    keypad = Keypad()
    ctrl = Chip8Controller(keypad.set_key)
    ctrl.keypad = keypad
    yield ctrl
    ctrl.close()


def test_buttons_map_to_keys(controller) -> None:
    controller._handle_button(Chip8Controller.BUTTON_L1, True)
    assert controller.keypad.is_key_pressed(0x4)
    controller._handle_button(Chip8Controller.BUTTON_L1, False)
    assert not controller.keypad.is_key_pressed(0x4)


def test_action_buttons_fire_callbacks(controller) -> None:
    calls = []
    controller.on_pause_toggle = lambda: calls.append("pause")
    controller.on_speed_increase = lambda: calls.append("faster")
    controller._handle_button(Chip8Controller.BUTTON_CROSS, True)
    controller._handle_button(Chip8Controller.BUTTON_CROSS, False)
    controller._handle_button(Chip8Controller.BUTTON_R2, True)
    assert calls == ["pause", "faster"]
    # Action buttons still drive their keypad key
    assert controller.keypad.is_key_pressed(0xE)


def test_hat_moves_between_directions(controller) -> None:
    controller._handle_hat((0, 1))
    assert controller.keypad.poll_pressed_key() == 0x8
    controller._handle_hat((-1, 0))
    assert controller.keypad.sample_keys()[0x8] is False
    assert controller.keypad.poll_pressed_key() == 0x4
    controller._handle_hat((0, 0))
    assert controller.keypad.poll_pressed_key() is None
