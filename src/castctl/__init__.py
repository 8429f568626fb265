"""castctl: command-line control of Cast receivers."""

__version__ = "0.1.0"
