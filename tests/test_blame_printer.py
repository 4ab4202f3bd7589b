"""Tests for location and source rows."""

import io

from colorama import Back, Fore, Style

from blame_call_site import CallFrame
from blame_options import BlameOptions
from blame_printer import BlamePrinter, TextStyle, pad


class RecordingStream(io.StringIO):
    def __init__(self):
        super().__init__()
        self.writes = []

    def write(self, text):
        self.writes.append(text)
        return super().write(text)


def make_frame(line=5, source=None):
    return CallFrame(file="app.py", line=line, column=9, function="main", source=source)


def test_pad_fills_on_the_right() -> None:
    assert pad(3, 7) == "7  "
    assert pad(2, 12) == "12"
    assert pad(1, 100) == "100"


def test_disabled_style_is_identity() -> None:
    style = TextStyle(enabled=False)

    assert style.accent("x") == "x"
    assert style.highlight("x") == "x"


def test_enabled_style_wraps_text() -> None:
    style = TextStyle(enabled=True)

    assert style.accent("x") == f"{Fore.GREEN}x{Style.RESET_ALL}"
    assert style.highlight("x") == f"{Back.RED}{Fore.WHITE}x{Style.RESET_ALL}"


def test_print_path_uses_path_format() -> None:
    stream = io.StringIO()
    BlamePrinter(stream, colors=False).print_path(make_frame(), BlameOptions(path_format="[{file},{line},{column}]"))

    assert stream.getvalue() == "[app.py,5,9]\n"


def test_print_path_accent_when_colored() -> None:
    stream = io.StringIO()
    BlamePrinter(stream, colors=True).print_path(make_frame(), BlameOptions())

    assert stream.getvalue() == f"{Fore.GREEN}app.py:5:9{Style.RESET_ALL}\n"


def test_print_sources_highlights_call_line_only() -> None:
    stream = io.StringIO()
    frame = make_frame(source={4: "a = 1", 5: "print(a)", 6: "b = 2"})
    BlamePrinter(stream, colors=True).print_sources(frame, BlameOptions())

    assert stream.getvalue().splitlines() == [
        "4 | a = 1",
        f"{Back.RED}{Fore.WHITE}5 | print(a){Style.RESET_ALL}",
        "6 | b = 2",
    ]


def test_print_sources_pads_to_widest_number() -> None:
    stream = io.StringIO()
    frame = make_frame(line=9, source={8: "x", 9: "y", 10: "z"})
    BlamePrinter(stream, colors=False).print_sources(frame, BlameOptions())

    assert stream.getvalue().splitlines() == ["8  | x", "9  | y", "10 | z"]


def test_print_sources_one_write_per_row() -> None:
    stream = RecordingStream()
    frame = make_frame(source={4: "a", 5: "b", 6: "c"})
    BlamePrinter(stream, colors=False).print_sources(frame, BlameOptions(line_format="{line}\t{code}"))

    assert stream.writes == ["4\ta\n", "5\tb\n", "6\tc\n"]


def test_print_sources_without_window_prints_nothing() -> None:
    stream = io.StringIO()
    BlamePrinter(stream, colors=False).print_sources(make_frame(source=None), BlameOptions())

    assert stream.getvalue() == ""


def test_print_sources_respects_sources_flag() -> None:
    stream = io.StringIO()
    frame = make_frame(source={5: "print(a)"})
    BlamePrinter(stream, colors=False).print_sources(frame, BlameOptions(sources=False))

    assert stream.getvalue() == ""


def test_default_stream_is_current_stderr(capsys) -> None:
    BlamePrinter().print_path(make_frame(), BlameOptions())

    assert capsys.readouterr().err == "app.py:5:9\n"


def test_auto_colors_follow_tty() -> None:
    class Tty(io.StringIO):
        def isatty(self):
            return True

    assert BlamePrinter(Tty()).style().enabled is True
    assert BlamePrinter(io.StringIO()).style().enabled is False
