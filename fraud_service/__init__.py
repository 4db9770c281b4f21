"""Rule-based transaction fraud detection demo service."""

__version__ = "1.0.0"
