"""
rasterpdf command line tool.

    rasterpdf <input_image> <output_pdf> [--dpi N] [--report] [--verify]

Exit status is 0 on success and 1 when the image cannot be decoded,
the resolution gives no usable page size, a file cannot be read or
written, or --verify finds a problem.
"""

import argparse
import math
import sys

from rasterpdf.convert import convert_with_report, read_input, write_output
from rasterpdf.errors import RasterPDFError
from rasterpdf.pdf.verify import PDFVerifier, VerifyExpectations


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not math.isfinite(number) or number <= 0:
        raise argparse.ArgumentTypeError(f"must be a finite positive number: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rasterpdf",
        description="Wrap a single JPEG or PNG image in a one-page PDF.",
    )
    parser.add_argument("input_image", help="Path to the JPEG or PNG image")
    parser.add_argument("output_pdf", help="Where to write the PDF")
    parser.add_argument("--dpi", type=_positive_float, default=None,
                        help="Page resolution; defaults to RASTERPDF_DPI (72 = one point per pixel)")
    parser.add_argument("--report", action="store_true",
                        help="Print the conversion report as JSON")
    parser.add_argument("--verify", action="store_true",
                        help="Check the written PDF's structure before exiting")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        image_bytes = read_input(args.input_image)
        pdf_bytes, report = convert_with_report(image_bytes, args.dpi)
        write_output(args.output_pdf, pdf_bytes)
        if args.verify:
            PDFVerifier().require(pdf_bytes, VerifyExpectations(
                page_size=(report.page_width_pt, report.page_height_pt),
                expect_soft_mask=report.has_soft_mask,
            ))
    except RasterPDFError as exc:
        print(f"Error creating PDF: {exc.message}", file=sys.stderr)
        if exc.suggestion:
            print(f"  {exc.suggestion}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Error creating PDF: {exc}", file=sys.stderr)
        return 1

    if args.report:
        print(report.model_dump_json(indent=2))
    print(f"PDF created successfully: {args.output_pdf}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
