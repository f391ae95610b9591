"""Configuration module: INI scene and observer files.

Components:
    loader: Parses scene and observer files into descriptions
"""

from .loader import load_observer, load_scene

__all__ = [
    "load_observer",
    "load_scene",
]
