"""Global keyboard listener registry."""

from collections.abc import Callable
from dataclasses import dataclass, field

KeyListener = Callable[[str], None]

ARROW_RIGHT = "ArrowRight"
ARROW_LEFT = "ArrowLeft"
ESCAPE = "Escape"


@dataclass
class KeyBindings:
    """Dispatches key presses to the listeners currently registered."""

    _listeners: list[KeyListener] = field(default_factory=list)

    def add_listener(self, listener: KeyListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: KeyListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def press(self, key: str) -> None:
        """Deliver a key press to a snapshot of the current listeners."""
        for listener in list(self._listeners):
            listener(key)
