# Node styling by entity type, kept apart from layout logic

from app.visual.visual_style import DEFAULT_STYLE, VISUAL_STYLE, style_for

__all__ = [
    "DEFAULT_STYLE",
    "VISUAL_STYLE",
    "style_for",
]
