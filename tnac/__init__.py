"""Source tracking, value formatting, an interactive shell, a driver and text printers for the tnac calculator language."""

__version__ = "0.1.0"