"""
Session Package

The single-assignment editing session used by hosts.
"""

from .controller import Session

__all__ = ["Session"]
