"""Pipelines over a parsed database."""

from .engine import LintEngine

__all__ = ['LintEngine']
