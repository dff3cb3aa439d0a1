from . import files

__all__ = ["files"]
