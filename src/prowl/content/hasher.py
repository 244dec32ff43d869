"""Content normalizer and hasher.

Strips kind-specific noise (comments, inter-tag whitespace) from raw file
bytes and digests what remains, so that formatting-only edits produce the
same fingerprint as the original file.

Rules per kind:
    markup      comments removed, then whitespace between tags collapsed,
                whitespace after ``<`` and before ``>`` stripped
    script      ``//`` line comments and ``/* */`` block comments removed
    style       same as script
    component   raw bytes
    unknown     raw bytes

Comment stripping always runs before whitespace collapsing so whitespace
inside a comment can never leak into the normalized form.

The rules table is module-level and immutable: a fingerprint stored in
the ledger is always compared against one computed with the same rule.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Callable
from types import MappingProxyType

from prowl._types import FileKind, Fingerprint

_MARKUP_COMMENT = re.compile(rb"<!--.*?-->", re.DOTALL)
_BETWEEN_TAGS = re.compile(rb">\s+<")
_AFTER_OPEN = re.compile(rb"<\s+")
_BEFORE_CLOSE = re.compile(rb"\s+>")
_SCRIPT_COMMENT = re.compile(rb"//[^\n]*|/\*.*?\*/", re.DOTALL)


def _normalize_markup(content: bytes) -> bytes:
    cleaned = _MARKUP_COMMENT.sub(b"", content)
    cleaned = _BETWEEN_TAGS.sub(b"><", cleaned)
    cleaned = _AFTER_OPEN.sub(b"<", cleaned)
    return _BEFORE_CLOSE.sub(b">", cleaned)


def _normalize_script(content: bytes) -> bytes:
    return _SCRIPT_COMMENT.sub(b"", content)


def _passthrough(content: bytes) -> bytes:
    return content


_RULES: MappingProxyType[FileKind, Callable[[bytes], bytes]] = MappingProxyType({
    "markup": _normalize_markup,
    "script": _normalize_script,
    "style": _normalize_script,
    "component": _passthrough,
    "unknown": _passthrough,
})


def normalize(content: bytes, kind: FileKind) -> bytes:
    """Return *content* with the noise for *kind* removed."""
    return _RULES.get(kind, _passthrough)(content)


def fingerprint(content: bytes, kind: FileKind) -> Fingerprint:
    """Normalize *content* for *kind* and return its SHA-256 hex digest.

    Pure function: identical inputs always give identical fingerprints.

    """
    return hashlib.sha256(normalize(content, kind)).hexdigest()
