"""Document Numbering - PREFIX-YYYY-NNNN formatting and parsing."""

from shopledger.core.numbering import format_document_number, next_sequence, parse_sequence


def test_format_pads_to_four_digits():
    assert format_document_number("WC", 2026, 1) == "WC-2026-0001"
    assert format_document_number("TXN", 2026, 42) == "TXN-2026-0042"


def test_format_grows_past_9999():
    assert format_document_number("WC", 2026, 12345) == "WC-2026-12345"


def test_parse_sequence_matches_prefix_and_year():
    assert parse_sequence("WC-2026-0007", "WC", 2026) == 7
    assert parse_sequence("WC-2025-0007", "WC", 2026) is None
    assert parse_sequence("TXN-2026-0007", "WC", 2026) is None
    assert parse_sequence(None, "WC", 2026) is None


def test_next_sequence_restarts_each_year():
    assert next_sequence("WC-2026-0009", "WC", 2026) == 10
    assert next_sequence("WC-2025-0009", "WC", 2026) == 1
    assert next_sequence(None, "WC", 2026) == 1
