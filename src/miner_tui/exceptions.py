class SurfaceClosedError(RuntimeError):
    """Raised when work is sent to a display surface whose loop has exited."""
