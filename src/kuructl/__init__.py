"""kuructl — remote management console for the Kurupira layered daemon."""

__version__ = "0.3.0"
