"""
Struct tag parsing.

A struct tag is the conventional `key:"value" key2:"value2"` string attached
to a Go struct field. Lookup follows the scanning rules of Go's
reflect.StructTag: pairs are separated by spaces, keys are runs of
non-space, non-quote, non-colon characters, and values are double-quoted Go
strings. The first malformed pair ends the scan, so keys after it are never
found.
"""

from typing import Iterator, Optional

from envdoc.golang.literals import unquote


class StructTag:
    """
    A parsed view over a struct tag string (delimiters already removed).

    Usage:
        tag = StructTag('envconfig:"PORT" default:"8080"')
        tag.lookup("envconfig")   # "PORT"
        tag.lookup("required")    # None
        tag.get("default")        # "8080"
    """

    def __init__(self, tag: str):
        self.tag = tag

    def __repr__(self) -> str:
        return f"StructTag({self.tag!r})"

    def _pairs(self) -> Iterator[tuple[str, str]]:
        """Yield (key, quoted value) pairs until the tag ends or is malformed."""
        tag = self.tag
        while tag:
            tag = tag.lstrip(" ")
            if not tag:
                return

            i = 0
            while i < len(tag) and tag[i] > " " and tag[i] not in ':"\x7f':
                i += 1
            if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
                return
            key = tag[:i]
            tag = tag[i + 1:]

            # scan the quoted value, honouring backslash escapes
            i = 1
            while i < len(tag) and tag[i] != '"':
                if tag[i] == "\\":
                    i += 1
                i += 1
            if i >= len(tag):
                return
            quoted = tag[:i + 1]
            tag = tag[i + 1:]
            yield key, quoted

    def lookup(self, key: str) -> Optional[str]:
        """
        Return the value stored under key.

        Args:
            key: The tag key to look for (e.g. "envconfig")

        Returns:
            The unquoted value, or None if the key is absent or its value
            is not a valid quoted string. A present key with an empty value
            returns "".
        """
        for name, quoted in self._pairs():
            if name == key:
                try:
                    return unquote(quoted)
                except ValueError:
                    return None
        return None

    def get(self, key: str, default: str = "") -> str:
        """Return the value stored under key, or default if absent."""
        value = self.lookup(key)
        return default if value is None else value
