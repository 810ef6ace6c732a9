"""Shared test configuration and fixtures for the rasterpdf test suite."""

import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add backend to Python path so imports work
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)


def _encode(img: Image.Image, fmt: str, **params) -> bytes:
    buf = io.BytesIO()
    img.save(buf, fmt, **params)
    return buf.getvalue()


def _gradient(mode: str, size=(64, 48)) -> Image.Image:
    """Deterministic non-flat image so JPEG/Flate have real work to do."""
    w, h = size
    img = Image.new("RGB", size)
    img.putdata([((x * 4) % 256, (y * 5) % 256, ((x + y) * 3) % 256) for y in range(h) for x in range(w)])
    return img.convert(mode)


@pytest.fixture(scope="session")
def rgb_jpeg() -> bytes:
    return _encode(_gradient("RGB"), "JPEG", quality=90)


@pytest.fixture(scope="session")
def gray_jpeg() -> bytes:
    return _encode(_gradient("L"), "JPEG", quality=90)


@pytest.fixture(scope="session")
def cmyk_jpeg() -> bytes:
    return _encode(_gradient("CMYK"), "JPEG", quality=90)


@pytest.fixture(scope="session")
def rgb_png() -> bytes:
    return _encode(_gradient("RGB"), "PNG")


@pytest.fixture(scope="session")
def gray_png() -> bytes:
    return _encode(_gradient("L"), "PNG")


@pytest.fixture(scope="session")
def rgba_png() -> bytes:
    img = _gradient("RGBA")
    img.putalpha(Image.linear_gradient("L").resize(img.size))
    return _encode(img, "PNG")


@pytest.fixture(scope="session")
def la_png() -> bytes:
    img = _gradient("LA")
    img.putalpha(128)
    return _encode(img, "PNG")


@pytest.fixture(scope="session")
def palette_png_transparent() -> bytes:
    img = _gradient("RGB").convert("P", palette=Image.Palette.ADAPTIVE, colors=16)
    return _encode(img, "PNG", transparency=0)


@pytest.fixture(scope="session")
def bilevel_png() -> bytes:
    return _encode(_gradient("1", size=(13, 7)), "PNG")


@pytest.fixture(scope="session")
def gray16_png() -> bytes:
    img = Image.new("I;16", (10, 6))
    img.putdata([i * 1000 for i in range(60)])
    return _encode(img, "PNG")


@pytest.fixture(scope="session")
def bilevel_png_transparent() -> bytes:
    """Black pixels keyed transparent through tRNS."""
    return _encode(_gradient("1", size=(13, 7)), "PNG", transparency=0)


@pytest.fixture(scope="session")
def gray16_png_transparent() -> bytes:
    img = Image.new("I;16", (10, 6))
    img.putdata([i * 1000 for i in range(60)])
    return _encode(img, "PNG", transparency=0)


@pytest.fixture(scope="session")
def mpo_two_frames() -> bytes:
    primary = _gradient("RGB")
    secondary = _gradient("RGB", size=(32, 24))
    return _encode(primary, "MPO", save_all=True, append_images=[secondary], quality=90)


@pytest.fixture(scope="session")
def rgb_gif() -> bytes:
    return _encode(_gradient("RGB").convert("P"), "GIF")


@pytest.fixture(scope="session")
def png_150dpi() -> bytes:
    return _encode(_gradient("RGB", size=(300, 150)), "PNG", dpi=(150, 150))
