"""Knowledge backend: dual-store chunk persistence and grounded answer streaming."""

__version__ = "0.1.0"
