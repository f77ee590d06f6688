"""Pomodoro session timer with a self-summarising markdown log."""

__version__ = "1.0.0"
