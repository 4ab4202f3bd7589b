# blame_registry.py
import inspect
import types
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from blame_logging import get_logger

logger = get_logger()


class BlameTrap:
    """
    Generated wrapper that replaces a trapped method.

    The `is_generated` marker is what tells a trap apart from user code, so a
    trap is never wrapped a second time. Calling the trap hands the original,
    the caller's arguments and the trap's own frame over to `handler`.
    """

    is_generated = True

    def __init__(self, name: str, original: Callable, handler: Callable, bind: bool = True):
        self.name = name
        self.original = original
        self.bind = bind
        self._handler = handler
        self.__wrapped__ = original
        self.__name__ = getattr(original, "__name__", name)
        self.__qualname__ = getattr(original, "__qualname__", name)
        self.__doc__ = getattr(original, "__doc__", None)

    def __call__(self, *args, **kwargs):
        # This frame is the call-site marker: frames[0] of the resolved stack
        marker = inspect.currentframe()
        try:
            return self._handler(self, marker, args, kwargs)
        finally:
            del marker

    def __get__(self, instance, owner=None):
        # Trapped on a class: bind like the function it replaced
        if instance is None or not self.bind:
            return self
        return types.MethodType(self, instance)

    def __repr__(self):
        return f"<BlameTrap {self.name} of {self.original!r}>"


def is_blame_trap(value: Any) -> bool:
    return isinstance(value, BlameTrap) and value.is_generated


def callable_members(target: Any) -> list[str]:
    """Public attribute names of `target` currently holding a routine."""
    names = []
    for name in dir(target):
        if name.startswith("_"):
            continue
        try:
            value = getattr(target, name)
        except Exception:
            # Properties may raise anything, the member is just not trappable
            continue
        if inspect.isroutine(value):
            names.append(name)
    return names


@dataclass
class _Captured:
    original: Callable
    own_attribute: bool
    # What the target's __dict__ held, e.g. a staticmethod wrapping `original`
    stored: Any = None


class TrapRegistry:
    """
    Captured originals of one target object.

    A name present in the registry means the target currently holds a BlameTrap
    for it. Not thread-safe: install/restore must not race with each other or
    with calls in flight on the same target.
    """

    def __init__(self, target: Any, handler: Callable):
        self.target = target
        self._handler = handler
        self._originals: dict[str, _Captured] = {}

    def _own_attributes(self) -> dict:
        try:
            return vars(self.target)
        except TypeError:
            return {}

    def install(self, names: Iterable[str] | None = None) -> list[str]:
        """
        Replace each named routine of the target with a BlameTrap.

        Missing names, non-routines and existing traps are skipped.
        Returns the names trapped by this call.
        """
        if names is None:
            names = callable_members(self.target)

        trapped = []
        for name in names:
            if name in self._originals:
                logger.debug(f"'{name}' is already trapped, skipping")
                continue

            current = getattr(self.target, name, None)
            if current is None:
                logger.debug(f"'{name}' not found on {self.target!r}, skipping")
                continue
            if is_blame_trap(current):
                logger.debug(f"'{name}' already holds a trap, skipping")
                continue
            if not inspect.isroutine(current):
                logger.debug(f"'{name}' is not a function, skipping")
                continue

            stored = self._own_attributes().get(name)
            already_bound = isinstance(inspect.getattr_static(self.target, name, None), (staticmethod, classmethod))
            own_attribute = stored is current or isinstance(stored, (staticmethod, classmethod))
            setattr(self.target, name, BlameTrap(name, current, self._handler, bind=not already_bound))
            self._originals[name] = _Captured(current, own_attribute, stored)
            trapped.append(name)

        if trapped:
            logger.info(f"✅ Trapped {', '.join(trapped)}")
        return trapped

    def restore(self, names: Iterable[str] | None = None) -> list[str]:
        """Put the captured originals back. Untracked names are ignored."""
        if names is None:
            names = list(self._originals)

        restored = []
        for name in names:
            captured = self._originals.pop(name, None)
            if captured is None:
                continue

            if captured.own_attribute:
                setattr(self.target, name, captured.stored)
            elif name in self._own_attributes():
                # The original came from the class, drop the shadowing trap
                delattr(self.target, name)
            else:
                setattr(self.target, name, captured.original)
            restored.append(name)

        if restored:
            logger.info(f"✅ Restored {', '.join(restored)}")
        return restored

    def is_trapped(self, name: str) -> bool:
        return name in self._originals

    def trapped_names(self) -> list[str]:
        return list(self._originals)

    def original(self, name: str) -> Callable | None:
        captured = self._originals.get(name)
        return captured.original if captured else None
