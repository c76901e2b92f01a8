"""StyleFit: virtual try-on with a generative image model."""

__version__ = "1.0.0"
