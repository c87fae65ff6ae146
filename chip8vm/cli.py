#!/usr/bin/env python3
"""
Command line entry point.

    chip8vm ROM [--pixelsize N] [--clockspeed HZ] [--headless FRAMES] [-v]
"""

import argparse
import logging
import os
import sys

from .config import EmulatorConfig
from .errors import Chip8Error

logger = logging.getLogger("chip8vm")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8vm", description="CHIP-8 interpreter")
    parser.add_argument("romfile", help="Path to the ROM image")
    parser.add_argument(
        "-p", "--pixelsize", type=int, default=EmulatorConfig.pixelsize,
        help="Window pixels per CHIP-8 pixel (default: %(default)s)",
    )
    parser.add_argument(
        "-c", "--clockspeed", type=float, default=EmulatorConfig.cpu_frequency,
        help="Instructions per second (default: %(default)s)",
    )
    parser.add_argument(
        "--headless", type=int, metavar="FRAMES", default=None,
        help="Run without a window for FRAMES 60Hz frames, then print the display",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging (traces every instruction)",
    )
    return parser


def run_headless(config: EmulatorConfig, romfile: str, clock_speed: float,
                 frames: int) -> str:
    """Run a ROM without a frontend and return the final display as text"""
    from .cpu import Chip8CPU, read_rom
    from .scheduler import Scheduler

    cpu = Chip8CPU(config)
    cpu.load_rom(read_rom(romfile), os.path.basename(romfile))
    Scheduler(cpu, clock_speed=clock_speed).run(max_frames=frames)
    return cpu.display.dump()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    if not os.path.exists(args.romfile):
        logger.error("Romfile does not exist: %s", args.romfile)
        return 1
    if args.pixelsize < 1 or args.clockspeed <= 0:
        logger.error("Pixel size and clock speed must be positive")
        return 1

    config = EmulatorConfig(pixelsize=args.pixelsize)
    try:
        if args.headless is not None:
            print(run_headless(config, args.romfile, args.clockspeed, args.headless))
        else:
            from .gui import Chip8App

            app = Chip8App(config, args.clockspeed)
            try:
                app.load_rom(args.romfile)
            except Chip8Error:
                app.close()
                raise
            app.run()
    except Chip8Error as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
