"""
Settings parsing.
"""
import pytest
from pydantic import ValidationError

from nextup.core.config import Settings


def test_known_booking_timezone_is_accepted():
    assert Settings(BOOKING_TIMEZONE=" Europe/Tirana ").booking_timezone == "Europe/Tirana"


@pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "", "../etc/passwd"])
def test_unknown_booking_timezone_is_rejected(zone):
    with pytest.raises(ValidationError):
        Settings(BOOKING_TIMEZONE=zone)


def test_origins_and_storage_flags():
    settings = Settings(ALLOWED_ORIGINS="https://a.test, https://b.test,", STORAGE_BACKEND=" Memory ")

    assert settings.allowed_origins_list == ["https://a.test", "https://b.test"]
    assert settings.uses_memory_storage is True
