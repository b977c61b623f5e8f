"""
Tests for id and admin-secret generation.

Run with: pytest Backend/tests/test_identity.py -v
"""
import re

import pytest

from nextup.identity import IdGenerator, SequenceIdGenerator, generate_slug


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Gallari", "gallari"),
        ("Gallari Barbershop", "gallari-barbershop"),
        ("Café Fade", "cafe-fade"),
        ("Hair & Beard!!!", "hair-beard"),
        ("   Trim  Spaces  ", "trim-spaces"),
        ("!!!", ""),
        ("", ""),
    ],
)
def test_generate_slug(name, expected):
    assert generate_slug(name) == expected


def test_generate_slug_is_bounded():
    assert len(generate_slug("a" * 500)) <= 60


def test_new_id_carries_prefix():
    ids = IdGenerator()
    assert re.fullmatch(r"bk_[0-9a-f]{12}", ids.new_id("bk"))
    assert re.fullmatch(r"barber_[0-9a-f]{12}", ids.new_id("barber"))


def test_shop_id_is_slug_with_suffix():
    shop_id = IdGenerator().new_shop_id("Gallari Barbershop")
    assert re.fullmatch(r"gallari-barbershop-[0-9a-f]{6}", shop_id)


def test_shop_id_falls_back_to_generic_token_for_empty_slug():
    assert re.fullmatch(r"shop_[0-9a-f]{12}", IdGenerator().new_shop_id("???"))


def test_ids_do_not_repeat():
    ids = IdGenerator()
    generated = {ids.new_shop_id("Gallari") for _ in range(2000)}
    assert len(generated) == 2000


def test_admin_secret_has_at_least_128_bits():
    secret = IdGenerator().new_admin_secret()
    # token_urlsafe encodes 6 bits per character
    assert len(secret) * 6 >= 128
    assert re.fullmatch(r"[A-Za-z0-9_-]+", secret)


def test_admin_secrets_are_unique_and_unrelated_to_shop():
    ids = IdGenerator()
    secrets_seen = {ids.new_admin_secret() for _ in range(500)}
    assert len(secrets_seen) == 500
    shop_id = ids.new_shop_id("Gallari")
    assert all(shop_id not in s and "gallari" not in s.lower() for s in secrets_seen)


def test_sequence_generator_is_deterministic():
    first = SequenceIdGenerator()
    second = SequenceIdGenerator()
    assert [first.new_id("svc") for _ in range(3)] == [second.new_id("svc") for _ in range(3)]
    assert first.new_id("svc") == "svc_000000000004"
    assert SequenceIdGenerator().new_shop_id("Gallari") == "gallari-000001"
