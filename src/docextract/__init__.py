"""Schema-driven report extraction: strict schemas in, Markdown out."""

__version__ = "0.1.0"
