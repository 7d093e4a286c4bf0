"""Frame rendering for systop.

The renderer writes characters at fixed (row, column) cells of a ``Canvas``.
The canvas is the only drawing surface it knows about; the app turns the
canvas into a Rich ``Text`` and hands it to Textual for display.
"""

import math

from rich.style import Style
from rich.text import Text

from systop.models import CpuInfo, Snapshot

BAR_WIDTH = 20  # Including both brackets
CPU_BAR_INTERIOR = BAR_WIDTH - 2
FILL_CHAR = "*"
TEXT_COLUMN = 21
CPU_LIST_ROW = 8
ROWS_PER_CPU = 4

MEMORY_FILL_STYLE = Style(color="red")
MEMORY_BORDER_STYLE = Style(color="cyan", bold=True)
MEMORY_TEXT_STYLE = Style(color="yellow")
CPU_BORDER_STYLE = Style(bold=True)

_BLANK = (" ", Style.null())


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def memory_fill_length(used_mb: float, total_mb: float) -> int:
    """
    Number of filled cells in the memory bar.

    Scaled against the full bar width, so a completely used memory bar draws
    over its closing bracket.
    """
    if not (math.isfinite(used_mb) and math.isfinite(total_mb)) or total_mb <= 0:
        return 0
    return _clamp(math.floor(used_mb * BAR_WIDTH / total_mb), 0, BAR_WIDTH)


def cpu_fill_length(cpu_usage: float) -> int:
    """Number of filled cells in the CPU bar."""
    if not math.isfinite(cpu_usage):
        return 0
    return _clamp(math.floor(cpu_usage * CPU_BAR_INTERIOR / 100), 0, CPU_BAR_INTERIOR)


class Canvas:
    """Grid of styled character cells, addressed by (row, column)."""

    def __init__(self) -> None:
        """Initialize an empty canvas."""
        self._rows: list[list[tuple[str, Style]]] = []

    def clear(self) -> None:
        """Blank every cell."""
        self._rows = []

    def put(self, row: int, col: int, text: str, style: Style | None = None) -> None:
        """Write text starting at a cell. Cells left of column 0 are dropped."""
        if row < 0:
            return
        cell_style = style or Style.null()
        while len(self._rows) <= row:
            self._rows.append([])
        line = self._rows[row]
        for offset, char in enumerate(text):
            x = col + offset
            if x < 0:
                continue
            while len(line) <= x:
                line.append(_BLANK)
            line[x] = (char, cell_style)

    def style_at(self, row: int, col: int) -> Style:
        """Style at a cell, the null style if nothing was drawn there."""
        if row < 0 or col < 0:
            return Style.null()
        try:
            return self._rows[row][col][1]
        except IndexError:
            return Style.null()

    def lines(self) -> list[str]:
        """Plain text of every row, trailing blanks stripped."""
        return ["".join(char for char, _ in line).rstrip() for line in self._rows]

    def to_text(self) -> Text:
        """Build a Rich Text for display."""
        text = Text(no_wrap=True, overflow="crop")
        for index, line in enumerate(self._rows):
            if index:
                text.append("\n")
            for char, style in line:
                text.append(char, style)
        return text


class Renderer:
    """Draws the memory, CPU and per-CPU widgets of a snapshot."""

    def __init__(self, canvas: Canvas | None = None) -> None:
        """
        Initialize the Renderer.

        Args:
            canvas: Surface to draw on. A new one is created if omitted.
        """
        self.canvas = canvas if canvas is not None else Canvas()

    def draw(self, snapshot: Snapshot) -> None:
        """Redraw the whole frame from the snapshot."""
        self.canvas.clear()
        self._draw_memory(snapshot)
        self._draw_cpu_usage(snapshot)
        self._draw_cpu_list(snapshot.cpus)

    def _draw_memory(self, snapshot: Snapshot) -> None:
        canvas = self.canvas
        memory = snapshot.memory

        canvas.put(0, 0, "Used Memory")
        fill = memory_fill_length(memory.used_mb, memory.total_mb)
        canvas.put(1, 1, FILL_CHAR * fill, MEMORY_FILL_STYLE)
        # Brackets go on top of the fill
        canvas.put(1, 0, "[", MEMORY_BORDER_STYLE)
        canvas.put(1, BAR_WIDTH - 1, "]", MEMORY_BORDER_STYLE)

        canvas.put(
            1,
            TEXT_COLUMN,
            f"{memory.used_mb:.0f} MBs of {memory.total_mb:.0f} MBs",
            MEMORY_TEXT_STYLE,
        )
        canvas.put(2, TEXT_COLUMN, f"{memory.available_mb:.0f} MBs available", MEMORY_TEXT_STYLE)

    def _draw_cpu_usage(self, snapshot: Snapshot) -> None:
        canvas = self.canvas

        canvas.put(3, 0, "CPU Usage ")
        fill = cpu_fill_length(snapshot.cpu_usage_percent)
        canvas.put(4, 1, FILL_CHAR * fill)
        canvas.put(4, 0, "[", CPU_BORDER_STYLE)
        canvas.put(4, BAR_WIDTH - 1, "]", CPU_BORDER_STYLE)
        canvas.put(4, TEXT_COLUMN, f"{snapshot.cpu_usage_percent:.2f}%")
        canvas.put(6, 0, f"({snapshot.core_count}) Cores")

    def _draw_cpu_list(self, cpus: tuple[CpuInfo, ...]) -> None:
        # No paging: entries past the bottom of the screen are cropped
        row = CPU_LIST_ROW
        for cpu in cpus:
            self.canvas.put(row, 0, f"Name: {cpu.name}")
            self.canvas.put(row + 1, 0, f"Brand: {cpu.brand}")
            self.canvas.put(row + 2, 0, f"Frequency: {cpu.frequency_mhz} MHz")
            row += ROWS_PER_CPU
