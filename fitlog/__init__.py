"""FitLog - local-first data layer for the FitLog fitness tracker."""

__version__ = "1.0.0"
