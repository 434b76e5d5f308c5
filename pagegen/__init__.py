"""Intent classification, layout strategies and validated page document generation."""

__version__ = "0.1.0"
