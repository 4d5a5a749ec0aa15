"""Konane match system: board engine, wire protocol and match coordination."""

__version__ = "0.1.0"
