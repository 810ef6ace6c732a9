"""
rasterpdf — Minimal PDF serializer.

Writes indirect objects straight into a byte buffer and records each
object's offset at the moment it is written, so the cross-reference
table is built from real positions rather than recomputed afterwards.

Output layout:
  %PDF-1.4 header + binary marker comment
  N 0 obj ... endobj   (one per object, in the order written)
  xref table, trailer, startxref, %%EOF
"""

from __future__ import annotations

import math
from typing import Any

PDF_VERSION = "1.4"

# Four bytes > 127 so transfer tools treat the file as binary.
_BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"


class Name(str):
    """A PDF name object, serialized as /Value."""


class Ref:
    """An indirect reference to object `num`, generation 0."""

    __slots__ = ("num",)

    def __init__(self, num: int):
        self.num = num

    def __repr__(self) -> str:
        return f"Ref({self.num})"


def format_number(value: float) -> str:
    """Render a number the way PDF expects: integers bare, reals without exponent."""
    if isinstance(value, bool):
        raise TypeError("booleans are not PDF numbers")
    if not isinstance(value, int) and not math.isfinite(value):
        raise ValueError(f"PDF numbers must be finite, got {value!r}")
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def serialize(value: Any) -> bytes:
    """Serialize a Python value into PDF object syntax."""
    if isinstance(value, Name):
        return b"/" + value.encode("ascii")
    if isinstance(value, Ref):
        return f"{value.num} 0 R".encode("ascii")
    if isinstance(value, bool):
        return b"true" if value else b"false"
    if isinstance(value, (int, float)):
        return format_number(value).encode("ascii")
    if isinstance(value, dict):
        parts = [b"/" + key.encode("ascii") + b" " + serialize(item) for key, item in value.items()]
        return b"<< " + b" ".join(parts) + b" >>"
    if isinstance(value, (list, tuple)):
        return b"[" + b" ".join(serialize(item) for item in value) + b"]"
    if value is None:
        return b"null"
    raise TypeError(f"cannot serialize {type(value).__name__} into PDF")


class PdfWriter:
    """
    Append-only writer for a single PDF file.

    Object numbers are handed out by reserve() so objects can refer to
    each other before they are written; every reserved number must be
    written exactly once before finish().
    """

    def __init__(self, version: str = PDF_VERSION):
        self._buf = bytearray()
        self._offsets: dict[int, int] = {}
        self._next_num = 1
        self._buf += f"%PDF-{version}\n".encode("ascii")
        self._buf += _BINARY_MARKER

    @property
    def offsets(self) -> dict[int, int]:
        return dict(self._offsets)

    def tell(self) -> int:
        return len(self._buf)

    def reserve(self) -> int:
        num = self._next_num
        self._next_num += 1
        return num

    def write_object(self, num: int, obj: dict[str, Any], stream: bytes | None = None) -> int:
        """
        Write object `num` at the current position and return its offset.

        When a stream is given, /Length is set from the actual byte count.
        """
        if num in self._offsets:
            raise ValueError(f"object {num} already written")
        if not 0 < num < self._next_num:
            raise ValueError(f"object {num} was never reserved")

        if stream is not None:
            obj = {**obj, "Length": len(stream)}

        offset = self.tell()
        self._offsets[num] = offset
        self._buf += f"{num} 0 obj\n".encode("ascii")
        self._buf += serialize(obj)
        if stream is not None:
            self._buf += b"\nstream\n"
            self._buf += stream
            self._buf += b"\nendstream"
        self._buf += b"\nendobj\n"
        return offset

    def finish(self, root: int) -> bytes:
        """Append xref table and trailer; return the complete file."""
        size = self._next_num
        missing = [num for num in range(1, size) if num not in self._offsets]
        if missing:
            raise ValueError(f"objects reserved but not written: {missing}")

        xref_offset = self.tell()
        self._buf += f"xref\n0 {size}\n".encode("ascii")
        # Each entry is exactly 20 bytes including the two-byte EOL.
        self._buf += b"0000000000 65535 f \n"
        for num in range(1, size):
            self._buf += f"{self._offsets[num]:010d} 00000 n \n".encode("ascii")

        trailer = {"Size": size, "Root": Ref(root)}
        self._buf += b"trailer\n" + serialize(trailer) + b"\n"
        self._buf += f"startxref\n{xref_offset}\n%%EOF\n".encode("ascii")
        return bytes(self._buf)
