# blame_printer.py
import sys

from colorama import Back, Fore, Style

from blame_call_site import CallFrame
from blame_options import BlameOptions


def pad(width: int, value) -> str:
    """Pad `value` on the right up to `width` characters."""
    return str(value).ljust(width)


class TextStyle:
    """ANSI decoration of output rows, identity when disabled."""

    ACCENT = Fore.GREEN
    HIGHLIGHT = Back.RED + Fore.WHITE

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def _apply(self, codes: str, text: str) -> str:
        if not self.enabled:
            return text
        return f"{codes}{text}{Style.RESET_ALL}"

    def accent(self, text: str) -> str:
        return self._apply(self.ACCENT, text)

    def highlight(self, text: str) -> str:
        return self._apply(self.HIGHLIGHT, text)


class BlamePrinter:
    """
    Terminal actions of the "file" and "code" chains.

    Every row is written with its own write() call, nothing is buffered.
    """

    def __init__(self, stream=None, colors: bool | None = None):
        self._stream = stream
        self.colors = colors

    @property
    def stream(self):
        # Resolved on every write so redirected sys.stderr is honoured
        return self._stream if self._stream is not None else sys.stderr

    def style(self) -> TextStyle:
        if self.colors is not None:
            return TextStyle(self.colors)
        isatty = getattr(self.stream, "isatty", None)
        return TextStyle(bool(isatty and isatty()))

    def write_line(self, text: str) -> None:
        stream = self.stream
        stream.write(text + "\n")
        stream.flush()

    def print_path(self, frame: CallFrame, options: BlameOptions) -> None:
        location = options.path_format.format(file=frame.file, line=frame.line, column=frame.column)
        self.write_line(self.style().accent(location))

    def print_sources(self, frame: CallFrame, options: BlameOptions) -> None:
        if not options.sources or not frame.source:
            return

        style = self.style()
        width = len(str(max(frame.source)))
        for number, code in frame.source.items():
            row = options.line_format.format(line=pad(width, number), code=code)
            if number == frame.line:
                row = style.highlight(row)
            self.write_line(row)
