"""Exception types raised by termcam."""


class TermcamError(Exception):
    """Base class for every error termcam raises on purpose."""


class ConfigurationError(TermcamError):
    """Invalid arguments, frame counts or grid dimensions."""


class ResourceError(TermcamError):
    """A record file could not be created or opened."""


class CaptureError(TermcamError):
    """The capture source failed to produce a usable image."""


class FrameStateError(TermcamError):
    """The reset -> accumulate -> finalize protocol was violated."""
