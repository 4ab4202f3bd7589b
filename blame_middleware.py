# blame_middleware.py
from typing import Any, Callable, Mapping, Sequence

from blame_logging import get_logger

logger = get_logger()

CHAIN_KEYS = ("console", "file", "code")

# stage(next_, args): call next_() to continue with the same args,
# next_(other_args) to continue with other ones, or never to stop the chain.
Stage = Callable[[Callable[..., Any], Sequence[Any]], Any]


def compose(stages: Sequence[Stage], terminal: Callable[..., Any]) -> Callable[[Sequence[Any]], None]:
    """
    Fold the stages right-to-left around the terminal action.

    The first stage becomes the outermost one. The returned callable takes the
    initial payload; the terminal finally receives it unpacked.
    """
    def run_terminal(args):
        terminal(*args)

    chain = run_terminal
    for stage in reversed(stages):
        chain = _link(stage, chain)
    return chain


def _link(stage: Stage, next_link: Callable[[Sequence[Any]], None]) -> Callable[[Sequence[Any]], None]:
    def run(args):
        def next_(custom_args=None):
            next_link(args if custom_args is None else custom_args)

        stage(next_, args)

    return run


class MiddlewareRegistry:
    """Ordered stages per chain key. Append-only, read at dispatch time."""

    def __init__(self):
        self._stages: dict[str, list[Stage]] = {key: [] for key in CHAIN_KEYS}

    def add(self, key: str, stage: Stage) -> None:
        if key not in self._stages:
            raise ValueError(f"Unknown middleware chain '{key}', expected one of {', '.join(CHAIN_KEYS)}")
        if not callable(stage):
            raise TypeError(f"Middleware stage for '{key}' must be callable, got {type(stage).__name__}")
        self._stages[key].append(stage)
        logger.debug(f"🔧 Middleware added to '{key}' chain ({len(self._stages[key])} stage(s))")

    def add_many(self, stages: Mapping[str, Stage | Sequence[Stage]]) -> None:
        for key, value in stages.items():
            if callable(value):
                self.add(key, value)
            else:
                for stage in value:
                    self.add(key, stage)

    def stages(self, key: str) -> tuple[Stage, ...]:
        return tuple(self._stages[key])

    def dispatch(self, key: str, terminal: Callable[..., Any], payload: Sequence[Any]) -> None:
        """Run the `key` chain with the given payload."""
        stages = self._stages[key]
        if not stages:
            terminal(*payload)
            return
        compose(stages, terminal)(payload)
