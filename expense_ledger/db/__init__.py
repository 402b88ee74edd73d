from .dal import Database

__all__ = ["Database"]
