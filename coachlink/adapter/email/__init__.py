"""Transactional email adapter."""

from .client import MockEmailNotifier, ResendEmailNotifier

__all__ = ["MockEmailNotifier", "ResendEmailNotifier"]
