from .Settings import Settings

__all__ = [
    "Settings",
]
