"""Runtime that owns the event loop driving the phase timer."""

from .loop import RuntimeBootstrap, RuntimeEngine, RuntimeHooks

__all__ = ["RuntimeBootstrap", "RuntimeEngine", "RuntimeHooks"]
