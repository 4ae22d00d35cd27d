"""User directory with credential checks and card-based access verification."""

__version__ = "0.1.0"
