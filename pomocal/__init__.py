"""Calendar-aware Pomodoro timer backend."""

__version__ = "0.1.0"
