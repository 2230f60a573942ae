from uuid import UUID

from utils.identity import (
    derive_collection_id,
    derive_id,
    friendly_url_decode,
    friendly_url_replacements,
)


def test_derive_id_is_deterministic():
    assert derive_id("Acme") == derive_id("Acme")


def test_derive_id_normalizes_case_and_spaces():
    assert derive_id("Big History") == derive_id("big-history")
    assert derive_id("BIG HISTORY") == derive_id("big history")


def test_derive_id_reads_digest_in_little_endian_field_order():
    # md5("") = d41d8cd98f00b204e9800998ecf8427e
    assert derive_id("") == UUID("d98c1dd4-008f-04b2-e980-0998ecf8427e")


def test_derive_collection_id_joins_titles_with_separator():
    assert derive_collection_id("Acme", "Main") == derive_id("acme|main")
    assert derive_collection_id("ACME", "MAIN") == derive_collection_id("acme", "main")


def test_derive_collection_id_distinguishes_segments():
    assert derive_collection_id("a", "bc") != derive_collection_id("ab", "c")


def test_friendly_url_round_trip():
    segment = friendly_url_replacements("Big History")

    assert segment == "Big-History"
    assert friendly_url_decode(segment) == "Big History"


def test_friendly_url_percent_encodes_reserved_characters():
    assert friendly_url_replacements("a/b?c") == "a%2Fb%3Fc"
