"""
Go string literal helpers.

unquote() decodes raw (`...`) and interpreted ("...") literals following the
Go language rules; quote() produces the double-quoted form Go's %q verb
prints, which is how defaults appear in the rendered tables.
"""

import re

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}

_ESCAPE_RE = re.compile(
    r"""\\(?:
        (?P<simple>[abfnrtv\\"])
        | x(?P<hex>[0-9A-Fa-f]{2})
        | (?P<octal>[0-7]{3})
        | u(?P<u4>[0-9A-Fa-f]{4})
        | U(?P<u8>[0-9A-Fa-f]{8})
    )""",
    re.VERBOSE,
)


def unquote(literal: str) -> str:
    """
    Decode a Go string literal.

    Args:
        literal: The literal including its delimiters

    Returns:
        The string value

    Raises:
        ValueError: If the literal is not a well-formed Go string literal
    """
    if len(literal) < 2 or literal[0] != literal[-1]:
        raise ValueError(f"invalid string literal: {literal!r}")

    quote_char = literal[0]
    body = literal[1:-1]

    if quote_char == "`":
        if "`" in body:
            raise ValueError(f"invalid raw string literal: {literal!r}")
        return body.replace("\r", "")

    if quote_char != '"':
        raise ValueError(f"invalid string literal: {literal!r}")
    if "\n" in body:
        raise ValueError(f"newline in string literal: {literal!r}")

    # \x and octal escapes are bytes, so decode through a byte buffer
    out = bytearray()
    pos = 0
    while pos < len(body):
        char = body[pos]
        if char == '"':
            raise ValueError(f"unescaped quote in string literal: {literal!r}")
        if char != "\\":
            out += char.encode("utf-8")
            pos += 1
            continue

        match = _ESCAPE_RE.match(body, pos)
        if match is None:
            raise ValueError(f"invalid escape in string literal: {literal!r}")
        if match.group("simple"):
            out += _SIMPLE_ESCAPES[match.group("simple")].encode("utf-8")
        elif match.group("hex"):
            out.append(int(match.group("hex"), 16))
        elif match.group("octal"):
            value = int(match.group("octal"), 8)
            if value > 0xFF:
                raise ValueError(f"octal escape out of range: {literal!r}")
            out.append(value)
        else:
            code = int(match.group("u4") or match.group("u8"), 16)
            if code > 0x10FFFF or 0xD800 <= code < 0xE000:
                raise ValueError(f"invalid unicode escape: {literal!r}")
            out += chr(code).encode("utf-8")
        pos = match.end()

    return out.decode("utf-8", errors="replace")


def quote(value: str) -> str:
    """
    Return value as a double-quoted Go string literal.

    Printable characters are kept as-is; quotes and backslashes are
    escaped, control characters use the short escapes where Go has one.
    """
    parts = ['"']
    for char in value:
        if char in ('"', "\\"):
            parts.append("\\" + char)
        elif char.isprintable():
            parts.append(char)
        elif char == "\a":
            parts.append("\\a")
        elif char == "\b":
            parts.append("\\b")
        elif char == "\f":
            parts.append("\\f")
        elif char == "\n":
            parts.append("\\n")
        elif char == "\r":
            parts.append("\\r")
        elif char == "\t":
            parts.append("\\t")
        elif char == "\v":
            parts.append("\\v")
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\x{ord(char):02x}")
        elif ord(char) < 0x10000:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(f"\\U{ord(char):08x}")
    parts.append('"')
    return "".join(parts)
