"""HTTP message models, servlet routing, byte streams and a cooperative fiber scheduler."""

__version__ = "0.1.0"