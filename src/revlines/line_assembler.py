from enum import Enum

from .errors import InvalidStateError

LF_BYTE = ord('\n')
CR_BYTE = ord('\r')


class AssemblerState(Enum):
    NEED_MORE_DATA = "need_more_data"
    HAS_COMPLETE_LINE = "has_complete_line"
    EXHAUSTED = "exhausted"


class LineAssembler:
    """ Turns blocks of bytes fed from the end of a stream towards its start
    into complete lines, last line first.

    The assembler does no I/O itself: the caller pushes each block it reads with
    push_block(), pulls lines with pop_line() until that returns None, and calls
    finish() once the start of the stream has been reached.

    Lines are split on b'\\n' and b'\\r\\n', terminators are stripped. A single
    trailing terminator at the very end of the stream closes the last line
    rather than opening an empty one.
    """

    def __init__(self):
        self.state = AssemblerState.NEED_MORE_DATA
        # Most recently pushed block, only head[:self._end] is still unresolved
        self._head = b""
        self._end = 0
        # Older pieces of the line being assembled, sitting right of the head.
        # Rightmost piece first, none of them holds a b'\n'
        self._parts: list[bytes] = []
        self._started = False
        # Whether the line being assembled is followed by a b'\n'
        self._terminated = False
        self._boundary = -1

    @property
    def pending_size(self) -> int:
        """ Number of bytes read but not handed out yet """
        return self._end + sum(len(part) for part in self._parts)

    def push_block(self, block: bytes):
        """ Prepend a block read from right before the bytes pushed so far """
        if self.state is AssemblerState.EXHAUSTED:
            raise InvalidStateError("Can't push data into an exhausted assembler")
        if self.state is AssemblerState.HAS_COMPLETE_LINE:
            raise InvalidStateError("Pop the complete line before pushing more data")
        if not block:
            return

        if self._end:
            self._parts.append(self._head[:self._end])
        self._head, self._end = block, len(block)

        if not self._started:
            self._started = True
            if block[-1] == LF_BYTE:
                # Trailing terminator of the stream, it ends the last line
                self._end -= 1
                self._terminated = True

        self._scan()

    def pop_line(self) -> bytes | None:
        """ Return the next complete line, or None if more data is needed """
        if self.state is not AssemblerState.HAS_COMPLETE_LINE:
            return None

        boundary = self._boundary
        line = self._take_line(boundary + 1)
        self._end = boundary
        self._terminated = True
        self._scan()
        return line

    def finish(self) -> bytes | None:
        """ Signal that the start of the stream was reached and return the
        first line of the stream, if there is one left
        """
        if self.state is AssemblerState.HAS_COMPLETE_LINE:
            raise InvalidStateError("Complete lines are still waiting to be popped")
        if self.state is AssemblerState.EXHAUSTED:
            return None

        self.state = AssemblerState.EXHAUSTED
        # A terminator right after nothing means the stream starts with a blank line
        if not self._end and not self._parts and not self._terminated:
            return None
        line = self._take_line(0)
        self._head, self._end = b"", 0
        return line

    def _scan(self):
        # Only the head can hold a boundary, older parts were searched already
        self._boundary = self._head.rfind(LF_BYTE, 0, self._end)
        if self._boundary < 0:
            self.state = AssemblerState.NEED_MORE_DATA
        else:
            self.state = AssemblerState.HAS_COMPLETE_LINE

    def _take_line(self, start: int) -> bytes:
        """ Join head[start:end] with the older parts into one line """
        if self._parts:
            line = self._head[start:self._end] + b"".join(reversed(self._parts))
            self._parts.clear()
        else:
            line = self._head[start:self._end]
        # The CR of a CRLF pair is only dropped once the whole line is buffered,
        # so a pair split across two blocks is still recognized
        if self._terminated and line and line[-1] == CR_BYTE:
            line = line[:-1]
        return line
