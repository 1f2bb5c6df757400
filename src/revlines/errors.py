class RevLinesError(Exception):
    """ Base class for errors raised while reading a stream in reverse """


class StreamIOError(RevLinesError):
    """ The underlying stream failed to seek, read or report its length.
    The original OSError (if any) is available as __cause__
    """


class InvalidStateError(RevLinesError):
    """ An internal invariant was broken, or the sequence was pulled after it
    had already failed
    """
