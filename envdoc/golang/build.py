"""
Go build constraints.

Decides whether a source file is part of a package for a target platform,
the way the go tool does when it loads packages:

    1. A _GOOS, _GOARCH or _GOOS_GOARCH file name suffix must match the target
    2. A //go:build line in the file header must evaluate to true

The target platform comes from the GOOS and GOARCH environment variables
when they are set, otherwise from the running interpreter's platform. Every
go1.N release tag is satisfied, as is the "gc" compiler tag. Legacy
"// +build" lines are not read; gofmt has kept them in sync with //go:build
lines since Go 1.17.
"""

import os
import platform
import re
import sys
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

KNOWN_OS = frozenset({
    "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos",
    "ios", "js", "linux", "nacl", "netbsd", "openbsd", "plan9", "solaris",
    "wasip1", "windows", "zos",
})

UNIX_OS = frozenset({
    "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos",
    "ios", "linux", "netbsd", "openbsd", "solaris",
})

KNOWN_ARCH = frozenset({
    "386", "amd64", "amd64p32", "arm", "armbe", "arm64", "arm64be", "loong64",
    "mips", "mipsle", "mips64", "mips64le", "mips64p32", "mips64p32le", "ppc",
    "ppc64", "ppc64le", "riscv", "riscv64", "s390", "s390x", "sparc",
    "sparc64", "wasm",
})

# GOOS values that also satisfy another OS tag
_OS_IMPLIES = {
    "android": "linux",
    "illumos": "solaris",
    "ios": "darwin",
}

# sys.platform prefix -> GOOS
_HOST_OS = [
    ("linux", "linux"),
    ("darwin", "darwin"),
    ("win32", "windows"),
    ("cygwin", "windows"),
    ("freebsd", "freebsd"),
    ("openbsd", "openbsd"),
    ("netbsd", "netbsd"),
    ("aix", "aix"),
    ("sunos", "solaris"),
]

# platform.machine() -> GOARCH
_HOST_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loong64",
}

_RELEASE_TAG_RE = re.compile(r"go1\.\d+")
_TOKEN_RE = re.compile(r"\s*(\(|\)|!|&&|\|\||[A-Za-z0-9_.]+)")


def host_os() -> str:
    for prefix, goos in _HOST_OS:
        if sys.platform.startswith(prefix):
            return goos
    return "linux"


def host_arch() -> str:
    return _HOST_ARCH.get(platform.machine().lower(), "amd64")


@dataclass(frozen=True)
class BuildContext:
    """
    The target a package is loaded for.

    Attributes:
        goos: Target operating system (e.g. "linux")
        goarch: Target architecture (e.g. "amd64")
        tags: Extra build tags, as given with `go build -tags`
    """
    goos: str
    goarch: str
    tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_environment(cls, tags: Iterable[str] = ()) -> "BuildContext":
        """
        Build the context the go tool would use in this environment.

        Args:
            tags: Extra build tags

        Returns:
            A BuildContext for $GOOS/$GOARCH, or the host platform
        """
        goos = os.environ.get("GOOS") or host_os()
        goarch = os.environ.get("GOARCH") or host_arch()
        extra = set(tags)

        native = goos == host_os() and goarch == host_arch()
        if os.environ.get("CGO_ENABLED", "1" if native else "0") == "1":
            extra.add("cgo")
        return cls(goos=goos, goarch=goarch, tags=frozenset(extra))

    def satisfies(self, tag: str) -> bool:
        """Check whether a single build tag is true for this context."""
        if tag in (self.goos, self.goarch, "gc") or tag in self.tags:
            return True
        if tag == _OS_IMPLIES.get(self.goos):
            return True
        if tag == "unix":
            return self.goos in UNIX_OS
        return bool(_RELEASE_TAG_RE.fullmatch(tag))

    def match_file_name(self, name: str) -> bool:
        """
        Check a file name's _GOOS / _GOARCH suffix.

        The part before the first underscore never counts, so linux.go is
        not constrained while config_linux.go is.
        """
        stem = name[:-3] if name.endswith(".go") else name
        underscore = stem.find("_")
        if underscore < 0:
            return True

        parts = stem[underscore:].split("_")
        if parts[-1] == "test":
            parts = parts[:-1]
        if len(parts) >= 2 and parts[-2] in KNOWN_OS and parts[-1] in KNOWN_ARCH:
            return self.satisfies(parts[-2]) and self.satisfies(parts[-1])
        if parts and parts[-1] in KNOWN_OS:
            return self.satisfies(parts[-1])
        if parts and parts[-1] in KNOWN_ARCH:
            return self.satisfies(parts[-1])
        return True

    def match_source(self, source: bytes) -> bool:
        """
        Evaluate the file's //go:build line, if it has one.

        Raises:
            ValueError: If the //go:build expression is malformed
        """
        expr = build_expression(source)
        if expr is None:
            return True
        return evaluate(expr, self.satisfies)

    def matches(self, name: str, source: bytes) -> bool:
        """Check both the file name and the //go:build line."""
        return self.match_file_name(name) and self.match_source(source)


def build_expression(source: bytes) -> Optional[str]:
    """
    Return the expression of the //go:build line in the file header.

    Only comments and blank lines before the package clause are searched.
    """
    in_block = False
    for raw in source.decode("utf-8", errors="replace").splitlines():
        line = raw.strip()
        if in_block:
            if "*/" in line:
                in_block = False
            continue
        if not line:
            continue
        if line.startswith("//"):
            if line.startswith("//go:build") and line[10:11] in ("", " ", "\t"):
                return line[10:].strip()
            continue
        if line.startswith("/*"):
            in_block = "*/" not in line[2:]
            continue
        return None
    return None


def evaluate(expr: str, satisfies: Callable[[str], bool]) -> bool:
    """
    Evaluate a //go:build expression.

    Grammar (lowest precedence first): a || b, a && b, !a, (a), tag.

    Args:
        expr: The expression text after //go:build
        satisfies: Called with each tag, returns whether it is set

    Returns:
        The value of the expression

    Raises:
        ValueError: If the expression is empty or malformed
    """
    tokens = []
    pos = 0
    expr = expr.rstrip()
    while pos < len(expr):
        match = _TOKEN_RE.match(expr, pos)
        if match is None:
            raise ValueError(f"unexpected character in build expression: {expr!r}")
        tokens.append(match.group(1))
        pos = match.end()
    if not tokens:
        raise ValueError("empty build expression")

    index = 0

    def peek() -> Optional[str]:
        return tokens[index] if index < len(tokens) else None

    def take() -> str:
        nonlocal index
        token = peek()
        if token is None:
            raise ValueError(f"unexpected end of build expression: {expr!r}")
        index += 1
        return token

    def parse_or() -> bool:
        value = parse_and()
        while peek() == "||":
            take()
            right = parse_and()
            value = value or right
        return value

    def parse_and() -> bool:
        value = parse_not()
        while peek() == "&&":
            take()
            right = parse_not()
            value = value and right
        return value

    def parse_not() -> bool:
        token = take()
        if token == "!":
            return not parse_not()
        if token == "(":
            value = parse_or()
            if take() != ")":
                raise ValueError(f"missing ) in build expression: {expr!r}")
            return value
        if token in (")", "&&", "||"):
            raise ValueError(f"unexpected {token} in build expression: {expr!r}")
        return satisfies(token)

    result = parse_or()
    if index != len(tokens):
        raise ValueError(f"unexpected {tokens[index]} in build expression: {expr!r}")
    return result
