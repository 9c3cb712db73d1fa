"""Text adapter for render models plus a small console driver."""

from .render import render_lines

__all__ = ["render_lines"]
