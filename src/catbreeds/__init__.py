"""catbreeds - async client and observable state container for The Cat API breed catalog."""

__version__ = "0.1.0"
