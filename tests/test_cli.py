import sys
import types

from chip8vm.cli import build_parser, main
from chip8vm.errors import RomLoadError

from conftest import assemble


def write_rom(tmp_path, *opcodes, name="prog.ch8"):
    path = tmp_path / name
    path.write_bytes(assemble(*opcodes))
    return str(path)


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["game.ch8"])
    assert args.romfile == "game.ch8"
    assert args.pixelsize == 8
    assert args.clockspeed == 500
    assert args.headless is None
    assert args.verbose is False


def test_parser_options() -> None:
    args = build_parser().parse_args(["-p", "4", "--clockspeed", "1200", "-v", "x.ch8"])
    assert args.pixelsize == 4
    assert args.clockspeed == 1200.0
    assert args.verbose is True


def test_missing_rom_exits_nonzero(tmp_path) -> None:
    assert main([str(tmp_path / "nope.ch8")]) == 1


def test_invalid_clock_speed_exits_nonzero(tmp_path) -> None:
    rom = write_rom(tmp_path, 0x1200)
    assert main([rom, "--clockspeed", "0", "--headless", "1"]) == 1


def test_headless_run_prints_display(tmp_path, capsys) -> None:
    rom = write_rom(tmp_path, 0xA000, 0xD015, 0x1204)
    assert main([rom, "--headless", "3"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 32
    assert lines[0].startswith("####....")
    assert lines[1].startswith("#..#....")


def test_execution_fault_exits_nonzero(tmp_path) -> None:
    rom = write_rom(tmp_path, 0x6001, 0xFFFF)
    assert main([rom, "--headless", "60"]) == 1


def test_oversized_rom_exits_nonzero(tmp_path) -> None:
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(0x1000))
    assert main([str(path), "--headless", "1"]) == 1


class RecordingApp:
    """Stands in for the tk window so the load-failure path runs headless"""

    instances = []

    def __init__(self, config, clock_speed):
        self.closed = False
        self.ran = False
        RecordingApp.instances.append(self)

    def load_rom(self, path):
        raise RomLoadError(f"{path}: ROM too large")

    def run(self):
        self.ran = True

    def close(self):
        self.closed = True


def test_failed_rom_load_closes_window(tmp_path, monkeypatch) -> None:
    gui = types.ModuleType("chip8vm.gui")
    gui.Chip8App = RecordingApp
    monkeypatch.setitem(sys.modules, "chip8vm.gui", gui)
    RecordingApp.instances.clear()

    rom = write_rom(tmp_path, 0x1200)
    assert main([rom]) == 1
    [app] = RecordingApp.instances
    assert app.closed
    assert not app.ran
