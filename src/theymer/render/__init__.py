"""Render pipeline — output paths, template context, sessions."""

from theymer.render.session import Session, render_all

__all__ = ["Session", "render_all"]
