from .overlay import draw_hud

__all__ = ["draw_hud"]
