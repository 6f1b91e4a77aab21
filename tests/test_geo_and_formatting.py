import pytest

from domain.formatting import (
    format_ig_handle, format_phone_for_whatsapp, format_score_with_frequency, format_stat_value, slugify,
)
from domain.geo import cities_for, get_club_coordinates, get_country_center


def test_club_mapped_to_home_city():
    assert get_club_coordinates("Manchester United", "England") == pytest.approx((53.4808, -2.2426))


def test_club_mapping_ignores_wrong_country():
    # Known club, country missing or mismatched: any city with that name
    assert get_club_coordinates("Real Madrid", None) == pytest.approx((40.4168, -3.7038))


def test_city_name_inside_club_name():
    assert get_club_coordinates("Lisbon Rovers", "Portugal") == pytest.approx((38.7223, -9.1393))
    # Only cities of the given country are considered
    assert get_club_coordinates("Lisbon Rovers", "Spain") is None


def test_unknown_club():
    assert get_club_coordinates("Atlantis FC", "Nowhere") is None


def test_country_center_is_mean_of_cities():
    rows = cities_for("Portugal")
    assert rows
    lat, lng = get_country_center("Portugal")
    assert lat == pytest.approx(sum(c["lat"] for c in rows) / len(rows))
    assert lng == pytest.approx(sum(c["lng"] for c in rows) / len(rows))
    assert get_country_center("Atlantis") is None


def test_slugify():
    assert slugify("Player Agreement 2024!") == "player-agreement-2024"
    assert slugify("Image  Rights -- Deal") == "image-rights-deal"
    assert slugify("Ça va") == "a-va"


def test_format_score_with_frequency():
    assert format_score_with_frequency(0.25) == "0.25 (1 in 4)"
    assert format_score_with_frequency(0) == "0 (never)"


def test_format_stat_value():
    assert format_stat_value(3.0) == "3"
    assert format_stat_value(2.345) == "2.3"
    assert format_stat_value(None) == "0"
    assert format_stat_value("n/a") == "n/a"


def test_format_ig_handle():
    assert format_ig_handle("@agency") == "agency"
    assert format_ig_handle("  ") is None
    assert format_ig_handle(None) is None


def test_format_phone_for_whatsapp():
    assert format_phone_for_whatsapp("+44 7700 900123") == "447700900123"
    assert format_phone_for_whatsapp("0034 612 345 678") == "34612345678"
    assert format_phone_for_whatsapp("0612 345 678", "Real Madrid CF") == "34612345678"
    # UK default for a leading trunk zero
    assert format_phone_for_whatsapp("07700 900123") == "447700900123"
    assert format_phone_for_whatsapp("612345678") == "612345678"
