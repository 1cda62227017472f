"""Release engineering for a family of Go projects."""

__version__ = "0.1.0"
