"""FatiGat: project time tracking with break-aware productivity scoring."""

__version__ = "0.1.0"
