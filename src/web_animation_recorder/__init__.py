"""Record CSS animations from a web page into a frame-accurate video."""

__version__ = "0.1.0"
