"""Helpers to build synthetic ar archives for tests."""

from debar.ar_reader import AR_MAGIC

# Width of each header field, in header order.
_FIELD_WIDTHS = (16, 12, 6, 6, 8, 10)


def make_header(name, size, timestamp=0, owner_id=0, group_id=0, mode="100644",
                terminator=b"\x60\x0a") -> bytes:
    """Return a 60 byte header. Pass "" to leave a field blank."""
    values = (name, timestamp, owner_id, group_id, mode, size)
    fields = []
    for value, width in zip(values, _FIELD_WIDTHS):
        raw = value if isinstance(value, bytes) else str(value).encode("utf-8")
        assert len(raw) <= width, f"{raw!r} does not fit in {width} bytes"
        fields.append(raw.ljust(width))
    return b"".join(fields) + terminator


def make_member(name, data: bytes, **kwargs) -> bytes:
    """Return header, data and pad byte for one member, GNU style name."""
    pad = b"\n" if len(data) % 2 else b""
    return make_header(name + "/", len(data), **kwargs) + data + pad


def make_archive(members, trailer=b"") -> bytes:
    """Return an archive holding `members`, a list of (name, data) pairs."""
    return AR_MAGIC + b"".join(make_member(name, data) for name, data in members) + trailer
