"""Runtime supervisor for a smart-bed controller."""

__version__ = "0.1.0"
