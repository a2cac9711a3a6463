"""UI package."""

from .breathing_widget import BreathingWidget, format_elapsed, instruction_text
from .custom_panel import CustomTimingsPanel

__all__ = [
    "BreathingWidget",
    "CustomTimingsPanel",
    "format_elapsed",
    "instruction_text",
]
