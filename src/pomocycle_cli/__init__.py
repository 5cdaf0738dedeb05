"""pomocycle - a command-line Pomodoro cycle timer."""

__version__ = "0.1.0"
