"""Logging scaffolds for translation activity."""

from .logger import EventLogger, configure_logging

__all__ = ["EventLogger", "configure_logging"]
