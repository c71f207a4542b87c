"""Error kinds raised by the rendering core."""

from __future__ import annotations


class IFSError(Exception):
    """Base class for every error raised by :mod:`ifs`."""


class InvalidPathName(IFSError, ValueError):
    """Raised when a parameter path name is not in the registry."""

    def __init__(self, name: object, known: tuple[str, ...] = ()) -> None:
        message = f"Unknown parameter path {name!r}"
        if known:
            message += f"; valid choices: {', '.join(known)}"
        super().__init__(message)
        self.name = name


class InvalidFrameCount(IFSError, ValueError):
    """Raised when the requested number of frames is not a positive integer."""


class InvalidWorkerCount(IFSError, ValueError):
    """Raised when the requested number of workers is not a positive integer."""


class RenderPanic(IFSError, RuntimeError):
    """A worker failed while rendering one frame."""

    def __init__(self, index: int | None, message: str | None = None) -> None:
        if message is None:
            message = f"Rendering failed for frame {index}"
        super().__init__(message)
        self.index = index


class RenderCancelled(IFSError, RuntimeError):
    """The render was cancelled before every frame was produced."""


class RenderTimeout(RenderCancelled):
    """The render did not finish within its deadline."""
