import pytest

from core.types import Point, PollingDistrict, StreetSegment
from processing.annotations import build_description, format_street, format_voter_count
from processing.geometry import format_coordinates, parse_poligon


def test_parse_poligon_swaps_to_lon_lat():
    points = parse_poligon("47.1 19.2,47.3 19.4, 47.5 19.6")
    assert points == [Point(19.2, 47.1), Point(19.4, 47.3), Point(19.6, 47.5)]
    assert points[0].lon == 19.2
    assert points[0].lat == 47.1


def test_parse_poligon_skips_empty_fragments():
    assert parse_poligon("47.1 19.2,,47.3 19.4,") == [Point(19.2, 47.1), Point(19.4, 47.3)]
    assert parse_poligon("") == []


@pytest.mark.parametrize("text", ["47.1", "47.1 19.2 3", "47.1 abc"])
def test_parse_poligon_rejects_malformed_pairs(text):
    with pytest.raises(ValueError, match="Malformed coordinate pair"):
        parse_poligon(text)


def test_format_coordinates_uses_fixed_precision():
    points = [Point(19.1234567, 47.5), Point(19.0, 47.0000004)]
    assert format_coordinates(points) == "19.123457,47.500000,0 19.000000,47.000000,0"
    assert format_coordinates(points, precision=2) == "19.12,47.50,0 19.00,47.00,0"


def test_format_voter_count():
    assert format_voter_count(None) == ""
    assert format_voter_count(812) == "Választópolgárok száma: 812"
    assert format_voter_count(12345) == "Választópolgárok száma: 12 345"


def test_format_street_variants():
    assert format_street(StreetSegment("Kossuth", "tér")) == "Kossuth tér"
    assert format_street(StreetSegment("Fő", "utca", "1", "99", "odd")) == "Fő utca 1-99 (páratlan oldal)"
    assert format_street(StreetSegment("Petőfi", "utca", "2", None, "even")) == "Petőfi utca 2-… (páros oldal)"
    assert format_street(StreetSegment("Béke", None, None, "40")) == "Béke …-40"


def test_build_description():
    district = PollingDistrict(
        number="1",
        polygon=[],
        address="Fő tér 1.",
        voters=1234,
        streets=[StreetSegment("Fő", "utca"), StreetSegment("Kossuth", "tér")],
    )
    assert build_description(district) == (
        "Szavazóhelyiség: Fő tér 1.\n"
        "Választópolgárok száma: 1 234\n"
        "Közterületek:\n"
        "- Fő utca\n"
        "- Kossuth tér"
    )


def test_build_description_without_annotations_is_empty():
    assert build_description(PollingDistrict(number="3", polygon=[])) == ""
