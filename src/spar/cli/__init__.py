"""CLI package for spar."""

from .app import app

__all__ = ['app']
