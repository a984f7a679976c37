from .commands import ActionDispatcher

__all__ = ["ActionDispatcher"]
