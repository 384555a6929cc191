"""Exceptions raised by the non-GUI parts of vidprep."""


class VidPrepError(Exception):
    """Base class for recoverable tool errors."""


class OpenError(VidPrepError):
    """The video file could not be opened or decoded."""


class WriteError(VidPrepError):
    """A frame image could not be encoded or written."""


class MissingSaveDirError(VidPrepError):
    """A save was requested before a save directory was chosen."""
