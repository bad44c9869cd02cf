"""Extraction of structured document data from model output."""

from .structurer import ContentStructurer

__all__ = ["ContentStructurer"]
