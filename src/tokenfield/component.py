"""Component protocols shared by renderable widgets.

A component renders itself into a list of terminal lines for a given width.
Components that take keyboard input also provide ``handle_input``; those
that can hold focus expose a ``focused`` attribute which the host toggles.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = [
    "Component",
    "Focusable",
    "is_focusable",
    "CURSOR_MARKER",
]


class Component(Protocol):
    """A renderable terminal component."""

    def render(self, width: int) -> list[str]:
        """Render the component into a list of terminal lines."""
        ...

    def invalidate(self) -> None:
        """Drop any cached rendering."""
        ...


@runtime_checkable
class Focusable(Protocol):
    """A component that can receive focus."""

    focused: bool


def is_focusable(component: object | None) -> bool:
    """Return ``True`` if *component* implements ``Focusable``."""
    return component is not None and hasattr(component, "focused")


# Zero-width APC marker placed where the hardware cursor should sit. The
# renderer strips it and moves the terminal cursor there instead.
CURSOR_MARKER = "\x1b_tokenfield:c\x07"
