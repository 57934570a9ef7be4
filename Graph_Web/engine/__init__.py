"""Scheduling for continuously running layouts."""

from .driver import LayoutDriver

__all__ = ["LayoutDriver"]
