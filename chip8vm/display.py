"""
Monochrome display buffer with XOR pixel semantics.
"""

from typing import List


class DisplayBuffer:
    """
    width x height grid of 1-bit pixels.

    The CPU mutates pixels through set_pixel(); present() hands the rows to
    the attached renderer (if any) only when something changed.
    """

    def __init__(self, width: int = 64, height: int = 32, renderer=None):
        self.width = width
        self.height = height
        self.renderer = renderer
        self.pixels = [[0] * width for _ in range(height)]
        self.dirty = True
        self.presented = 0

    def clear(self):
        """Set all pixels to 0"""
        for row in self.pixels:
            for x in range(self.width):
                row[x] = 0
        self.dirty = True

    def get_pixel(self, x: int, y: int) -> int:
        return self.pixels[y][x]

    def set_pixel(self, x: int, y: int, bit: int) -> bool:
        """
        XOR bit into the pixel at (x, y).
        Returns True if the pixel went from set to unset (collision).
        """
        bit &= 1
        if not bit:
            return False
        row = self.pixels[y]
        collision = row[x] == 1
        row[x] ^= 1
        self.dirty = True
        return collision

    def present(self) -> bool:
        """Flush to the renderer if dirty. Returns True if a frame was drawn"""
        if not self.dirty:
            return False
        if self.renderer is not None:
            self.renderer.render(self.pixels)
        self.dirty = False
        self.presented += 1
        return True

    def snapshot(self) -> List[List[int]]:
        return [row[:] for row in self.pixels]

    def restore(self, rows: List[List[int]]):
        if len(rows) != self.height or any(len(r) != self.width for r in rows):
            raise ValueError(
                f"Display snapshot must be {self.width}x{self.height}")
        self.pixels = [[1 if p else 0 for p in row] for row in rows]
        self.dirty = True

    def dump(self, on: str = '#', off: str = '.') -> str:
        """Text rendering of the buffer, one line per row"""
        return "\n".join(
            "".join(on if p else off for p in row) for row in self.pixels)
