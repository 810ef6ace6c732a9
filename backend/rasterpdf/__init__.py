"""rasterpdf — wrap a single raster image in a minimal one-page PDF."""

__version__ = "1.0.0"

from rasterpdf.convert import convert_bytes, convert_file, convert_with_report  # noqa: E402
from rasterpdf.errors import DecodeError, IoError, RasterPDFError  # noqa: E402

__all__ = [
    "__version__",
    "convert_bytes",
    "convert_file",
    "convert_with_report",
    "DecodeError",
    "IoError",
    "RasterPDFError",
]
