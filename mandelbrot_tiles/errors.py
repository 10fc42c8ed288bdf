"""Exceptions raised by the rendering engine."""


class ConfigError(ValueError):
    """Raised when a render configuration cannot be rendered."""


class RenderError(RuntimeError):
    """Raised when a render started but could not produce a complete buffer."""


class RenderCancelled(RenderError):
    """Raised when a render is abandoned through its cancel event."""
