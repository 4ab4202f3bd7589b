# blame_call_site.py
import inspect
import linecache
import traceback
from dataclasses import dataclass
from types import FrameType


@dataclass
class CallFrame:
    file: str
    line: int
    column: int
    function: str
    source: dict[int, str] | None = None


def read_source_window(filename: str, line: int, context_size: int,
                       module_globals: dict | None = None) -> dict[int, str] | None:
    """
    Return {line_number: code} for the lines around `line`, clipped to the file.

    None when the source is unavailable (e.g. code typed into the REPL or a
    deleted file) or the line lies outside of it.
    """
    lines = linecache.getlines(filename, module_globals)
    if not lines or line is None or not 1 <= line <= len(lines):
        return None

    first = max(1, line - context_size)
    last = min(len(lines), line + context_size)
    return {number: lines[number - 1].rstrip("\r\n") for number in range(first, last + 1)}


def _column_of(frame: FrameType) -> int:
    positions = inspect.getframeinfo(frame, context=0).positions
    if positions is None or positions.col_offset is None:
        return 1
    return positions.col_offset + 1


def resolve_frames(marker: FrameType, sources: bool = True, context_size: int = 3,
                   limit: int | None = None) -> list[CallFrame]:
    """
    Walk the stack outwards from `marker` and describe every frame.

    frames[0] is the marker frame itself, frames[1] its caller and so on.
    Lines and columns are 1-based.
    """
    frames = []
    for frame, lineno in traceback.walk_stack(marker):
        if limit is not None and len(frames) >= limit:
            break

        filename = frame.f_code.co_filename
        source = None
        if sources:
            source = read_source_window(filename, lineno, context_size, frame.f_globals)

        frames.append(CallFrame(
            file=filename,
            line=lineno,
            column=_column_of(frame),
            function=frame.f_code.co_name,
            source=source,
        ))
    return frames
