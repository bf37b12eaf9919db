"""Formatting and presentation helpers shared by state and interface."""

from .time import format_duration, format_duration_label, round_half_up

__all__ = ["format_duration", "format_duration_label", "round_half_up"]
