"""CanvasPal - priority ranking for course assignments."""

__version__ = "0.1.0"
