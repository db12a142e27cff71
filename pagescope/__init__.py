"""pagescope - observe console and network activity of third-party pages."""

__version__ = "0.1.0"
