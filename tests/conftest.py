import struct
import zlib
from typing import Dict, List, Optional, Tuple

import pytest

from exifstream.formats import ByteOrder, FormatCode
from exifstream.tiff_structure import RawEntry

ASCII, BYTE, SHORT, LONG, RATIONAL, UNDEFINED, SRATIONAL = 2, 1, 3, 4, 5, 7, 10

_ORDER = ("IFD0", "EXIF", "Interoperability", "GPS", "IFD1")


class TiffBuilder:
    """Lay out a TIFF block: header, IFDs in walk order, then the value area."""

    def __init__(self, byte_order: str = "<"):
        self.prefix = byte_order
        self.ifds: Dict[str, List[Tuple[int, int, int, bytes]]] = {name: [] for name in _ORDER}

    def add(self, ifd: str, tag: int, fmt: int, count: int, value: bytes) -> "TiffBuilder":
        self.ifds[ifd].append((tag, fmt, count, value))
        return self

    def ascii(self, ifd: str, tag: int, text: str) -> "TiffBuilder":
        data = text.encode("utf-8") + b"\x00"
        return self.add(ifd, tag, ASCII, len(data), data)

    def byte(self, ifd: str, tag: int, *values: int) -> "TiffBuilder":
        return self.add(ifd, tag, BYTE, len(values), bytes(values))

    def short(self, ifd: str, tag: int, *values: int) -> "TiffBuilder":
        return self.add(ifd, tag, SHORT, len(values), struct.pack(f"{self.prefix}{len(values)}H", *values))

    def long(self, ifd: str, tag: int, *values: int) -> "TiffBuilder":
        return self.add(ifd, tag, LONG, len(values), struct.pack(f"{self.prefix}{len(values)}I", *values))

    def rational(self, ifd: str, tag: int, *pairs: Tuple[int, int], signed: bool = False) -> "TiffBuilder":
        code = "ii" if signed else "II"
        data = b"".join(struct.pack(f"{self.prefix}{code}", n, d) for n, d in pairs)
        return self.add(ifd, tag, SRATIONAL if signed else RATIONAL, len(pairs), data)

    def undefined(self, ifd: str, tag: int, data: bytes) -> "TiffBuilder":
        return self.add(ifd, tag, UNDEFINED, len(data), data)

    def build(self) -> bytes:
        p = self.prefix
        present = [name for name in _ORDER if self.ifds[name] or name == "IFD0"]
        if self.ifds["Interoperability"] and "EXIF" not in present:
            present.insert(1, "EXIF")

        entries = {name: list(self.ifds[name]) for name in present}
        pointers = {"EXIF": ("IFD0", 0x8769), "GPS": ("IFD0", 0x8825), "Interoperability": ("EXIF", 0xA005)}
        for target, (owner, tag) in pointers.items():
            if target in present:
                entries[owner].append((tag, LONG, 1, None))

        offsets = {}
        cursor = 8
        for name in present:
            offsets[name] = cursor
            cursor += 2 + 12 * len(entries[name]) + 4

        data_area = bytearray()
        out = bytearray((b"II*\x00" if p == "<" else b"MM\x00*") + struct.pack(f"{p}I", 8))
        for name in present:
            out += struct.pack(f"{p}H", len(entries[name]))
            for tag, fmt, count, value in sorted(entries[name], key=lambda e: e[0]):
                if value is None:
                    target = next(t for t, (o, g) in pointers.items() if g == tag)
                    field = struct.pack(f"{p}I", offsets[target])
                elif len(value) <= 4:
                    field = value.ljust(4, b"\x00")
                else:
                    field = struct.pack(f"{p}I", cursor + len(data_area))
                    data_area += value
                    if len(data_area) % 2:
                        data_area += b"\x00"
                out += struct.pack(f"{p}HHI", tag, fmt, count) + field
            next_ifd = offsets["IFD1"] if name == "IFD0" and "IFD1" in present else 0
            out += struct.pack(f"{p}I", next_ifd)

        return bytes(out + data_area)


def wrap_jpeg(tiff: bytes, scan_size: int = 256) -> bytes:
    """JPEG with APP0, an XMP APP1, the Exif APP1, DQT and some scan data."""
    def segment(marker: int, payload: bytes) -> bytes:
        return bytes([0xFF, marker]) + struct.pack(">H", len(payload) + 2) + payload

    return (
        b"\xff\xd8"
        + segment(0xE0, b"JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00")
        + segment(0xE1, b"http://ns.adobe.com/xap/1.0/\x00<x:xmpmeta/>")
        + segment(0xE1, b"Exif\x00\x00" + tiff)
        + segment(0xDB, bytes(65))
        + segment(0xDA, b"\x00" * 10)
        + bytes(range(256)) * (scan_size // 256 + 1)
        + b"\xff\xd9"
    )


def wrap_png(
    tiff: Optional[bytes],
    idat_size: int = 0,
    exif_prefix: bool = False,
    exif_after_idat: bool = False,
) -> bytes:
    """PNG with IHDR, the eXIf chunk (if any), IDAT of idat_size bytes and IEND."""
    def chunk(kind: bytes, payload: bytes) -> bytes:
        return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", zlib.crc32(kind + payload))

    ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0)
    exif = b""
    if tiff is not None:
        exif = chunk(b"eXIf", (b"Exif\x00\x00" if exif_prefix else b"") + tiff)
    idat = chunk(b"IDAT", bytes(range(256)) * (idat_size // 256)) if idat_size else b""
    body = idat + exif if exif_after_idat else exif + idat
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + body + chunk(b"IEND", b"")


def make_entry(
    fmt: FormatCode,
    payload: bytes,
    byte_order: ByteOrder = ByteOrder.BIG_ENDIAN,
    count: int = 1,
    tag_id: int = 0x0112,
    label: str = "Label",
    value: str = "value",
    ifd: str = "IFD0",
) -> RawEntry:
    return RawEntry(
        tag_id=tag_id,
        format=fmt,
        component_count=count,
        byte_order=byte_order,
        payload=payload,
        label=label,
        preformatted_value=value,
        ifd=ifd,
    )


def build_sample(byte_order: str = "<") -> bytes:
    return (
        TiffBuilder(byte_order)
        .ascii("IFD0", 0x010F, "Canon")
        .ascii("IFD0", 0x0110, "Canon EOS 5D")
        .short("IFD0", 0x0112, 6)
        .rational("IFD0", 0x011A, (72, 1))
        .ascii("IFD0", 0x0132, "2021:01:02 03:04:05")
        .rational("EXIF", 0x829A, (1, 60))
        .rational("EXIF", 0x829D, (28, 10))
        .short("EXIF", 0x8827, 200)
        .undefined("EXIF", 0x9000, b"0230")
        .long("EXIF", 0xA002, 4000)
        .ascii("Interoperability", 0x0001, "R98")
        .undefined("Interoperability", 0x0002, b"0100")
        .ascii("GPS", 0x0001, "N")
        .rational("GPS", 0x0002, (10, 1), (30, 1), (0, 1))
        .ascii("GPS", 0x0003, "W")
        .rational("GPS", 0x0004, (122, 1), (2520, 100), (0, 1))
        .byte("GPS", 0x0005, 0)
        .rational("GPS", 0x0006, (150, 1))
        .short("IFD1", 0x0103, 6)
        .short("IFD1", 0x0112, 1)
        .build()
    )


@pytest.fixture
def tiff_builder():
    return TiffBuilder


@pytest.fixture
def sample_tiff() -> bytes:
    return build_sample("<")


@pytest.fixture
def sample_tiff_be() -> bytes:
    return build_sample(">")


@pytest.fixture
def sample_jpeg(sample_tiff) -> bytes:
    return wrap_jpeg(sample_tiff, scan_size=4096)


@pytest.fixture
def sample_png(sample_tiff) -> bytes:
    return wrap_png(sample_tiff)


@pytest.fixture
def jpeg_file(tmp_path, sample_jpeg):
    path = tmp_path / "sample.jpg"
    path.write_bytes(sample_jpeg)
    return path


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def jpeg_wrapper():
    return wrap_jpeg


@pytest.fixture
def png_wrapper():
    return wrap_png
