"""Property portfolio back end with tax-pack export."""

__version__ = "0.1.0"
