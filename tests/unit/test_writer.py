"""Unit tests for the low-level PDF serializer."""

import re

import pytest
from rasterpdf.pdf.writer import Name, PdfWriter, Ref, format_number, serialize


class TestFormatNumber:
    def test_integers_are_bare(self):
        assert format_number(640) == "640"
        assert format_number(640.0) == "640"

    def test_reals_keep_four_decimals(self):
        assert format_number(213.33333333) == "213.3333"
        assert format_number(0.5) == "0.5"

    def test_negative_zero(self):
        assert format_number(-0.00001) == "0"

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            format_number(True)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError):
            format_number(value)


class TestSerialize:
    def test_name_and_ref(self):
        assert serialize(Name("XObject")) == b"/XObject"
        assert serialize(Ref(7)) == b"7 0 R"

    def test_nested_dict_keeps_insertion_order(self):
        out = serialize({"Type": Name("Page"), "MediaBox": [0, 0, 10, 20.5], "Res": {"A": Ref(3)}})
        assert out == b"<< /Type /Page /MediaBox [0 0 10 20.5] /Res << /A 3 0 R >> >>"

    def test_booleans_and_null(self):
        assert serialize(True) == b"true"
        assert serialize(None) == b"null"

    def test_plain_string_rejected(self):
        with pytest.raises(TypeError):
            serialize("not a name")


class TestPdfWriter:
    def test_offsets_point_at_objects(self):
        w = PdfWriter()
        a, b = w.reserve(), w.reserve()
        w.write_object(a, {"Type": Name("Catalog"), "Pages": Ref(b)})
        w.write_object(b, {"Type": Name("Pages"), "Kids": [], "Count": 0})
        pdf = w.finish(root=a)
        for num, offset in w.offsets.items():
            assert pdf[offset:].startswith(f"{num} 0 obj\n".encode())

    def test_stream_length_is_actual_size(self):
        w = PdfWriter()
        n = w.reserve()
        w.write_object(n, {}, stream=b"\x00\x01binary\xff")
        pdf = w.finish(root=n)
        assert b"/Length 9" in pdf
        assert b"stream\n\x00\x01binary\xff\nendstream" in pdf

    def test_xref_entries_are_twenty_bytes(self):
        w = PdfWriter()
        n = w.reserve()
        w.write_object(n, {"Type": Name("Catalog")})
        pdf = w.finish(root=n)
        table = pdf[pdf.index(b"xref\n"):pdf.index(b"trailer")]
        lines = table.split(b"\n")[2:-1]
        assert lines[0] == b"0000000000 65535 f "
        assert all(len(line) + 1 == 20 for line in lines)

    def test_trailer_and_startxref(self):
        w = PdfWriter()
        n = w.reserve()
        w.write_object(n, {"Type": Name("Catalog")})
        pdf = w.finish(root=n)
        assert b"trailer\n<< /Size 2 /Root 1 0 R >>" in pdf
        startxref = int(re.search(rb"startxref\n(\d+)\n", pdf).group(1))
        assert pdf[startxref:].startswith(b"xref\n0 2\n")
        assert pdf.endswith(b"%%EOF\n")

    def test_header_has_binary_marker(self):
        pdf = PdfWriter().finish(root=0)
        assert pdf.startswith(b"%PDF-1.4\n%")
        assert all(byte > 127 for byte in pdf[10:14])

    def test_unwritten_object_rejected(self):
        w = PdfWriter()
        w.reserve()
        with pytest.raises(ValueError, match="not written"):
            w.finish(root=1)

    def test_double_write_rejected(self):
        w = PdfWriter()
        n = w.reserve()
        w.write_object(n, {})
        with pytest.raises(ValueError, match="already written"):
            w.write_object(n, {})

    def test_unreserved_object_rejected(self):
        with pytest.raises(ValueError, match="never reserved"):
            PdfWriter().write_object(1, {})
