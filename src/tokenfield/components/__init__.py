"""Token field components."""

from tokenfield.components.multi_select import ControlElement, MultiSelect, MultiSelectTheme

__all__ = [
    "ControlElement",
    "MultiSelect",
    "MultiSelectTheme",
]
