"""
Unit tests for the CSV parser.

Tests quoted-field scanning, header normalization, blank-line handling,
BOM stripping and the empty-input error.
"""
import pytest

from listing_hub.core.exceptions import EmptyInputError
from listing_hub.utils.csv_parser import normalize_header, parse_csv, parse_csv_line


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# parse_csv_line
# ---------------------------------------------------------------------------

class TestParseCsvLine:
    """Tests for the single-line field scanner."""

    def test_quoted_comma_is_literal(self):
        assert parse_csv_line('a,"b,c",d') == ["a", "b,c", "d"]

    def test_doubled_quote_is_escaped_quote(self):
        assert parse_csv_line('"he said ""hi"""') == ['he said "hi"']

    def test_fields_are_trimmed(self):
        assert parse_csv_line("  a ,b  ,  c") == ["a", "b", "c"]

    def test_empty_fields_kept(self):
        assert parse_csv_line("a,,c,") == ["a", "", "c", ""]

    def test_single_field(self):
        assert parse_csv_line("only") == ["only"]


# ---------------------------------------------------------------------------
# normalize_header
# ---------------------------------------------------------------------------

class TestNormalizeHeader:

    @pytest.mark.parametrize("raw", ["Folder Path", "folderPath", " FOLDERPATH ", "folder\tpath"])
    def test_variants_collapse_to_one_key(self, raw):
        assert normalize_header(raw) == "folderpath"


# ---------------------------------------------------------------------------
# parse_csv
# ---------------------------------------------------------------------------

class TestParseCsv:
    """Tests for parse_csv row mapping."""

    def test_rows_keyed_by_normalized_header(self):
        rows = parse_csv("Title,Compare At Price\nShirt,20\n")
        assert rows == [{"title": "Shirt", "compareatprice": "20"}]

    def test_bytes_input_with_bom(self):
        rows = parse_csv("\ufefftitle,price\r\nShirt,10\r\n".encode("utf-8"))
        assert rows == [{"title": "Shirt", "price": "10"}]

    def test_str_input_with_bom(self):
        rows = parse_csv("\ufefftitle\nShirt")
        assert rows[0]["title"] == "Shirt"

    def test_blank_lines_discarded(self):
        rows = parse_csv("title\n\nA\n   \nB\n")
        assert [r["title"] for r in rows] == ["A", "B"]

    def test_missing_trailing_fields_default_empty(self):
        rows = parse_csv("title,description,folderpath\nShirt,Nice\n")
        assert rows[0]["folderpath"] == ""

    def test_extra_fields_ignored(self):
        rows = parse_csv("title\nShirt,extra,more\n")
        assert rows == [{"title": "Shirt"}]

    def test_quoted_description_with_commas(self):
        rows = parse_csv('title,description\nShirt,"Soft, warm, ""cozy"""\n')
        assert rows[0]["description"] == 'Soft, warm, "cozy"'

    def test_file_order_preserved(self):
        rows = parse_csv("id\n3\n1\n2\n")
        assert [r["id"] for r in rows] == ["3", "1", "2"]

    def test_invalid_utf8_bytes_replaced(self):
        rows = parse_csv(b"title,description,folderpath\n\xffbad,d,/x\n")
        assert rows == [{"title": "\ufffdbad", "description": "d", "folderpath": "/x"}]

    @pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x85", "\u2028", "\u2029"])
    def test_only_newline_ends_a_row(self, separator):
        rows = parse_csv(f"title,description\nShirt,Soft{separator}warm\nMug,Big\n")
        assert len(rows) == 2
        assert rows[0]["description"] == f"Soft{separator}warm"

    def test_header_only_raises(self):
        with pytest.raises(EmptyInputError):
            parse_csv("title,description\n")

    def test_empty_input_raises(self):
        with pytest.raises(EmptyInputError):
            parse_csv(b"")
