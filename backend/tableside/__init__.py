"""Tableside: QR-code table ordering backend."""

__version__ = "1.0.0"
