"""Generators that turn a transformed forest into publishable artifacts."""

from .html_builder import build_viewer_document, render_payload

__all__ = ["build_viewer_document", "render_payload"]
