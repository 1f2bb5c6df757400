import re

# Streams exercised by both the assembler and the async iterator tests
SAMPLES = [
    b"",
    b"\n",
    b"\n\n",
    b"\r\n",
    b"a",
    b"a\n",
    b"a\r",
    b"\na",
    b"a\nb\nc\n",
    b"a\nb\nc",
    b"a\n\nb\n",
    b"a\r\nb\r\nc\r\n",
    b"a\r\n\r\nb\nc\r\n\n",
    b"a\rb\r\r\nc",
    b"ABCDEF\nGHIJK\nLMNOPQRST\nUVWXYZ\n",
    b"ABCD\n\nXYZ\n\n\n",
    b"a very long line that spans several chunks\nshort\n",
]


def expected_lines(data: bytes) -> list[bytes]:
    """ Lines of `data` in document order, split the way a forward reader would """
    if not data:
        return []
    lines = re.split(rb"\r?\n", data)
    if data.endswith(b"\n"):
        lines.pop()
    return lines


def rebuild(reversed_lines: list[bytes], data: bytes) -> bytes:
    """ Put the original terminators of `data` back between the lines """
    terminators = re.findall(rb"\r?\n", data)
    return b"".join(line + term for line, term in zip(reversed_lines[::-1], terminators + [b""]))
