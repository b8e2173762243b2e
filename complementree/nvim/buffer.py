from typing import Any, Mapping, Sequence

from pynvim import Nvim

from ..shared.types import Position

UTF8 = "UTF-8"


def byte_col(line: str, col: int) -> int:
    return len(line[:col].encode(UTF8))


def char_col(line: str, col: int) -> int:
    return len(line.encode(UTF8)[:col].decode(UTF8, errors="ignore"))


class NvimBuffer:
    """
    Current buffer + window, columns translated between chars and nvim's bytes
    """

    def __init__(self, nvim: Nvim) -> None:
        self._nvim = nvim

    def get_line(self, row: int) -> str:
        line, *_ = self._nvim.api.buf_get_lines(0, row, row + 1, True)
        return line

    def set_text(
        self, row: int, col_start: int, row_end: int, col_end: int, lines: Sequence[str]
    ) -> None:
        begin = byte_col(self.get_line(row), col=col_start)
        end = byte_col(self.get_line(row_end), col=col_end)
        self._nvim.api.buf_set_text(0, row, begin, row_end, end, list(lines))

    def get_cursor(self) -> Position:
        row, col = self._nvim.api.win_get_cursor(0)
        line = self.get_line(row - 1)
        return row - 1, char_col(line, col=col)


class NvimDisplay:
    def __init__(self, nvim: Nvim, buffer: NvimBuffer) -> None:
        self._nvim, self._buffer = nvim, buffer

    def complete(self, col: int, items: Sequence[Mapping[str, Any]]) -> None:
        row, _ = self._buffer.get_cursor()
        line = self._buffer.get_line(row)
        self._nvim.funcs.complete(byte_col(line, col=col) + 1, list(items))

    def notify(self, msg: str, error: bool = False) -> None:
        if error:
            self._nvim.err_write(msg + "\n")
        else:
            self._nvim.out_write(msg + "\n")
