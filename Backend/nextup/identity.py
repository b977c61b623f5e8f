"""
Identifier and admin-secret generation.

All ids are ``<prefix>_<random hex>``; shop ids are slug-derived when the
shop name yields a usable slug. Randomness comes from ``secrets`` so that the
admin secret, the only credential a shop has, is not predictable.
"""

import re
import secrets
import unicodedata

SHOP_PREFIX = "shop"
BARBER_PREFIX = "barber"
SERVICE_PREFIX = "svc"
BOOKING_PREFIX = "bk"

ID_RANDOM_BYTES = 6
SLUG_SUFFIX_BYTES = 3
ADMIN_SECRET_BYTES = 24  # 192 bits
MAX_SLUG_LENGTH = 60


def generate_slug(name: str) -> str:
    """
    Generate a URL-safe slug from a shop name.

    Examples:
        "Gallari Barbershop" -> "gallari-barbershop"
        "Café Fade"          -> "cafe-fade"
        "!!!"                -> ""
    """
    normalized = unicodedata.normalize("NFKD", name or "")
    ascii_str = normalized.encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_str.lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


class IdGenerator:
    """Produces entity ids and admin secrets."""

    def token(self, nbytes: int) -> str:
        return secrets.token_hex(nbytes)

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{self.token(ID_RANDOM_BYTES)}"

    def new_shop_id(self, name: str) -> str:
        slug = generate_slug(name)
        if not slug:
            return self.new_id(SHOP_PREFIX)
        return f"{slug}-{self.token(SLUG_SUFFIX_BYTES)}"

    def new_admin_secret(self) -> str:
        return secrets.token_urlsafe(ADMIN_SECRET_BYTES)


class SequenceIdGenerator(IdGenerator):
    """
    Deterministic generator for tests and fixtures.

    Tokens are a zero-padded counter, so ids are predictable but still unique.
    Secrets keep the counter too; never use this outside tests.
    """

    def __init__(self, start: int = 1):
        self._counter = start

    def token(self, nbytes: int) -> str:
        value = self._counter
        self._counter += 1
        return format(value, "x").zfill(nbytes * 2)

    def new_admin_secret(self) -> str:
        return f"secret-{self.token(ADMIN_SECRET_BYTES)}"
