"""
Tkinter frontend: canvas renderer, keyboard input source and the
application window that owns the VM and its run loop.
"""

import logging
import os
import pickle
import tkinter as tk
from typing import List, Optional

from .audio import BellAudio
from .config import COLORS, KEYBOARD_MAP, STATUS_BAR_HEIGHT, EmulatorConfig
from .controller import Chip8Controller
from .cpu import Chip8CPU, read_rom
from .display import DisplayBuffer
from .keypad import Keypad
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

MAX_SPEED_MULTIPLIER = 16


class TkRenderer:
    """Tkinter display renderer"""

    def __init__(self, canvas: tk.Canvas, config: EmulatorConfig):
        self.canvas = canvas
        self.width = config.display_width
        self.height = config.display_height
        self.scale = config.pixelsize
        self.scanlines_enabled = False
        self.pixel_rects = {}
        self.scanline_rects = []
        self._shown: Optional[List[List[int]]] = None

        # Pre-create pixel rectangles for efficiency
        self._create_pixels()

    def _create_pixels(self):
        """Pre-create all pixel rectangles"""
        self.canvas.delete("all")
        self.pixel_rects = {}

        for y in range(self.height):
            for x in range(self.width):
                x1 = x * self.scale
                y1 = y * self.scale
                rect = self.canvas.create_rectangle(
                    x1, y1, x1 + self.scale, y1 + self.scale,
                    fill=COLORS['pixel_off'], outline=""
                )
                self.pixel_rects[(x, y)] = rect
        self._shown = None

    def _create_scanlines(self):
        """Create scanline overlay"""
        for rect in self.scanline_rects:
            self.canvas.delete(rect)
        self.scanline_rects = []

        if self.scanlines_enabled and self.scale > 1:
            half = self.scale // 2
            for y in range(self.height):
                top = y * self.scale + half
                rect = self.canvas.create_rectangle(
                    0, top, self.width * self.scale, top + max(1, half // 2),
                    fill="#000000", stipple="gray50", outline=""
                )
                self.scanline_rects.append(rect)

    def toggle_scanlines(self):
        """Toggle scanline effect"""
        self.scanlines_enabled = not self.scanlines_enabled
        self._create_scanlines()

    def render(self, rows: List[List[int]]):
        """Render CHIP-8 display to canvas, touching only changed pixels"""
        shown = self._shown
        for y, row in enumerate(rows):
            for x, pixel in enumerate(row):
                if shown is not None and shown[y][x] == pixel:
                    continue
                color = COLORS['pixel_on'] if pixel else COLORS['pixel_off']
                self.canvas.itemconfig(self.pixel_rects[(x, y)], fill=color)
        self._shown = [row[:] for row in rows]


class TkKeypad(Keypad):
    """Input source fed by tkinter key events and an optional controller"""

    def __init__(self, root: tk.Tk, controller: Chip8Controller = None):
        super().__init__()
        self.root = root
        self.controller = controller
        root.bind("<KeyPress>", self._on_key_down)
        root.bind("<KeyRelease>", self._on_key_up)
        root.bind("<Escape>", lambda e: self.request_quit())
        root.protocol("WM_DELETE_WINDOW", self.request_quit)

    def _on_key_down(self, event):
        key = event.keysym.lower()
        if key in KEYBOARD_MAP:
            self.press(KEYBOARD_MAP[key])

    def _on_key_up(self, event):
        key = event.keysym.lower()
        if key in KEYBOARD_MAP:
            self.release(KEYBOARD_MAP[key])

    def poll_for_quit(self) -> bool:
        """Pump window and controller events, then report the quit flag"""
        if self.controller is not None:
            self.controller.poll()
        if not self.quit_requested:
            self.root.update()
        return self.quit_requested


class Chip8App:
    """Main application window"""

    def __init__(self, config: EmulatorConfig = None, clock_speed: float = None):
        self.config = config or EmulatorConfig()
        cfg = self.config

        self.root = tk.Tk()
        self.root.title("CHIP-8")
        self.root.resizable(False, False)
        self.root.configure(bg=COLORS['bg'])

        self._create_ui()

        # Components
        self.controller = Chip8Controller(self._on_controller_key)
        self.keypad = TkKeypad(self.root, self.controller)
        self.renderer = TkRenderer(self.canvas, cfg)
        self.display = DisplayBuffer(
            cfg.display_width, cfg.display_height, self.renderer)
        self.audio = BellAudio()
        self.cpu = Chip8CPU(cfg, self.display, self.keypad)

        self.base_clock = clock_speed or cfg.cpu_frequency
        self.speed_multiplier = 1
        self.scheduler = Scheduler(self.cpu, self.audio, self.base_clock)

        self._setup_controller_callbacks()
        self._bind_keys()

    def _create_ui(self):
        """Create UI components"""
        cfg = self.config
        self.canvas = tk.Canvas(
            self.root,
            width=cfg.display_width * cfg.pixelsize,
            height=cfg.display_height * cfg.pixelsize,
            bg=COLORS['bg'],
            highlightthickness=0
        )
        self.canvas.pack(side=tk.TOP)

        self.status_label = tk.Label(
            self.root,
            text="No ROM",
            anchor=tk.W,
            height=1,
            fg=COLORS['status_fg'],
            bg=COLORS['status_bg'],
            font=("Courier", 10)
        )
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X, ipady=(STATUS_BAR_HEIGHT - 16) // 2)

    def _bind_keys(self):
        """Bind control keys"""
        self.root.bind("<Control-r>", lambda e: self.reset())
        self.root.bind("<space>", lambda e: self.toggle_pause())
        self.root.bind("<F1>", lambda e: self.decrease_speed())
        self.root.bind("<F2>", lambda e: self.increase_speed())
        self.root.bind("<F3>", lambda e: self.renderer.toggle_scanlines())
        self.root.bind("<F5>", lambda e: self.save_state())
        self.root.bind("<F7>", lambda e: self.load_state())
        self.root.bind("<F12>", lambda e: self.log_debug())

    def _setup_controller_callbacks(self):
        self.controller.on_pause_toggle = self.toggle_pause
        self.controller.on_speed_increase = self.increase_speed
        self.controller.on_speed_decrease = self.decrease_speed

    def _on_controller_key(self, key: int, pressed: bool):
        self.keypad.set_key(key, pressed)

    def _update_status(self):
        state = "Paused" if self.scheduler.paused else "Running"
        self.status_label.config(
            text=f" {self.cpu.rom_name}  |  {state}  |  "
                 f"{self.scheduler.clock_speed:g} Hz ({self.speed_multiplier}×)")

    # ==================== SESSION ACTIONS ====================

    def load_rom(self, path: str):
        """Load ROM from file. Raises RomLoadError"""
        data = read_rom(path)
        self.cpu.load_rom(data, os.path.basename(path))
        self._update_status()

    def reset(self):
        """Reset emulator with current ROM"""
        if self.cpu.rom_loaded:
            logger.info("Reset")
            self.cpu.reset()
            self.display.present()

    def toggle_pause(self):
        self.scheduler.paused = not self.scheduler.paused
        logger.info("Paused" if self.scheduler.paused else "Resumed")
        self._update_status()

    def increase_speed(self):
        if self.speed_multiplier < MAX_SPEED_MULTIPLIER:
            self.speed_multiplier *= 2
            self._apply_speed()

    def decrease_speed(self):
        if self.speed_multiplier > 1:
            self.speed_multiplier //= 2
            self._apply_speed()

    def _apply_speed(self):
        self.scheduler.set_clock_speed(self.base_clock * self.speed_multiplier)
        logger.info("Clock speed %g Hz", self.scheduler.clock_speed)
        self._update_status()

    @property
    def save_path(self) -> str:
        return f"{self.cpu.rom_name}.sav"

    def save_state(self):
        """Save emulator state"""
        if not self.cpu.rom_loaded:
            return
        try:
            with open(self.save_path, 'wb') as f:
                pickle.dump(self.cpu.get_state(), f)
            logger.info("State saved to %s", self.save_path)
        except OSError as e:
            logger.error("Save failed: %s", e)

    def load_state(self):
        """Load emulator state"""
        if not self.cpu.rom_loaded:
            return
        try:
            with open(self.save_path, 'rb') as f:
                state = pickle.load(f)
            self.cpu.load_state(state)
            self.display.present()
            logger.info("State loaded from %s", self.save_path)
        except FileNotFoundError:
            logger.info("No save file %s", self.save_path)
        except (OSError, EOFError, AttributeError, pickle.UnpicklingError,
                ValueError) as e:
            logger.error("Load failed: %s", e)

    def log_debug(self):
        logger.info("\n%s", self.cpu.dump_registers())

    # ==================== RUN ====================

    def run(self):
        """Run until the window is closed. Execution faults propagate"""
        self._update_status()
        try:
            self.scheduler.run()
        finally:
            self.close()

    def close(self):
        """Release the controller and the window"""
        self.controller.close()
        self.root.destroy()
