"""LimoControl: trip dispatch and billing tracker."""

__version__ = "0.1.0"
