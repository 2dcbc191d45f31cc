"""Base exception shared by the data layer."""

__all__ = ["FitLogError"]


class FitLogError(Exception):
    """Base error for the FitLog data layer."""

    pass
