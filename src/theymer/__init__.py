"""theymer — incremental theme and colour-scheme generation from templates."""

__version__ = "0.3.0"
