"""JSON line logging helpers."""

from .logger import log_record

__all__ = ["log_record"]
