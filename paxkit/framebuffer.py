"""Monochrome page buffer for small OLED displays and a running count plot."""

from __future__ import annotations

__all__ = ["PageBuffer", "CurvePlotter", "next_page"]

DISPLAY_WIDTH = 128
DISPLAY_HEIGHT = 64


def next_page(page: int, pages: int) -> int:
    """The page after ``page``, wrapping to 0 after the last of ``pages``."""
    if pages <= 0:
        raise ValueError("a display needs at least one page")
    return 0 if page >= pages - 1 else page + 1


class PageBuffer:
    """Display memory in pages of eight rows; each byte is one column of a page.

    Byte ``y // 8 * width + x`` holds pixel (x, y) in bit ``y % 8``.
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        if width < 2:
            raise ValueError("buffer width must be at least 2")
        if height <= 0 or height % 8:
            raise ValueError("buffer height must be a positive multiple of 8")
        self.width = width
        self.height = height
        self._buf = bytearray(width * height // 8)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return y // 8 * self.width + x

    def draw_pixel(self, x: int, y: int, dot: bool) -> None:
        """Set (``dot`` true) or clear the pixel at (x, y)."""
        idx = self._index(x, y)
        mask = 1 << (y & 7)
        if dot:
            self._buf[idx] |= mask
        else:
            self._buf[idx] &= ~mask & 0xFF

    def pixel(self, x: int, y: int) -> bool:
        """Whether the pixel at (x, y) is set."""
        return bool(self._buf[self._index(x, y)] & (1 << (y & 7)))

    def scroll_horizontal(self, left: bool = True) -> None:
        """Shift every page one column left or right, clearing the freed column."""
        w = self.width
        for start in range(0, len(self._buf), w):
            row = self._buf[start : start + w]
            if left:
                self._buf[start : start + w] = row[1:] + b"\0"
            else:
                self._buf[start : start + w] = b"\0" + row[:-1]

    def scroll_vertical(self, offset: int) -> None:
        """Shift each column's block of ``height // 8`` bytes by ``offset`` bits.

        Positive offsets scroll down, negative ones up.  Each block starts
        at byte ``col * height // 8`` and is read as a little-endian integer.
        """
        if not offset:
            return
        size = self.height // 8
        mask = (1 << (8 * size)) - 1
        for col in range(self.width):
            start = col * size
            value = int.from_bytes(self._buf[start : start + size], "little")
            if offset > 0:
                value = (value << offset) & mask
            else:
                value >>= -offset
            self._buf[start : start + size] = value.to_bytes(size, "little")


class CurvePlotter:
    """Plots one dot per count cycle, scrolling left once the width is used up."""

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.buffer = PageBuffer(width, height)
        self.last_count = 0
        self.col = 0
        self.row = 0

    def _set(self, x: int, y: int, dot: bool) -> bool:
        try:
            self.buffer.draw_pixel(x, y, dot)
        except IndexError:
            return False
        return True

    def plot(self, count: int, reset: bool = False) -> bool:
        """Plot ``count``; ``reset`` starts the next column.

        Returns False if nothing changed.  Dots that fall outside the
        buffer are not drawn.
        """
        count &= 0xFFFF
        if self.last_count == count and not reset:
            return False

        buf = self.buffer
        if reset:
            if self.col < buf.width - 1:
                self.col += 1
            else:
                buf.scroll_horizontal(left=True)
        else:
            self._set(self.col, self.row, False)

        v_scroll = max(0, count - (buf.height - 1))
        if v_scroll:
            buf.scroll_vertical(v_scroll)

        self.row = (buf.height - 1 - count - v_scroll) & 0xFFFF
        self.last_count = count
        self._set(self.col, self.row, True)
        return True