"""Tests for parsing pasted visitor rows."""

from attendly.services.visitor_import import parse_visitor_import, parse_visitor_line


def test_tab_separated_row_keeps_all_columns():
    visitor = parse_visitor_line("Mary Njeri\t0712 345 678\tmary@example.com\tWestlands")

    assert visitor.name == "Mary Njeri"
    assert visitor.contact == "0712 345 678 | mary@example.com | Westlands"


def test_tabs_win_over_commas():
    visitor = parse_visitor_line("Otieno, John\t0722000000")

    assert visitor.name == "Otieno, John"
    assert visitor.contact == "0722000000"


def test_comma_separated_row():
    visitor = parse_visitor_line("  David Kim , david@example.com ,  ")

    assert visitor.name == "David Kim"
    assert visitor.contact == "david@example.com"


def test_name_only_row():
    visitor = parse_visitor_line("Esther")

    assert visitor.name == "Esther"
    assert visitor.contact == ""


def test_rows_without_name_skipped():
    assert parse_visitor_line("   ") is None
    assert parse_visitor_line("\t0712345678") is None
    assert parse_visitor_line(", someone@example.com") is None


def test_long_fields_truncated():
    visitor = parse_visitor_line("N" * 120 + "\t" + "C" * 600)

    assert len(visitor.name) == 100
    assert len(visitor.contact) == 500


def test_parse_import_skips_blank_lines():
    text = "Name One\t0700000001\n\n   \nName Two,0700000002\r\nName Three\n"

    visitors, truncated = parse_visitor_import(text)

    assert [v.name for v in visitors] == ["Name One", "Name Two", "Name Three"]
    assert [v.contact for v in visitors] == ["0700000001", "0700000002", ""]
    assert truncated is False


def test_parse_import_truncates_at_limit():
    text = "\n".join(f"Visitor {i}" for i in range(12))

    visitors, truncated = parse_visitor_import(text, limit=10)

    assert len(visitors) == 10
    assert visitors[-1].name == "Visitor 9"
    assert truncated is True
