"""Convert EU clinical trial register result XML files to JSON."""

__version__ = "0.1.0"
