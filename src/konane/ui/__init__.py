"""PyQt6 match viewer."""
