from place_extractor.etl import transform
from place_extractor.models import Coordinates, PlaceDetail, SearchSummary


def test_to_summary_parses_fields():
    summary = transform.to_summary(
        {
            "place_id": "p1",
            "name": "Acme",
            "formatted_address": "Main St",
            "business_status": "OPERATIONAL",
            "geometry": {"location": {"lat": 1.5, "lng": 2.5}},
            "types": ["cafe", "food"],
        }
    )

    assert summary.place_id == "p1"
    assert summary.address == "Main St"
    assert summary.coordinates == Coordinates(lat=1.5, lng=2.5)
    assert summary.types == ("cafe", "food")


def test_to_summary_skips_missing_place_id():
    assert transform.to_summary({"name": "Nameless"}) is None


def test_parse_coordinates_requires_both_values():
    assert transform.parse_coordinates({"location": {"lat": 1}}) is None
    assert transform.parse_coordinates(None) is None


def test_to_detail_parses_fields():
    detail = transform.to_detail(
        {
            "name": "Acme",
            "formatted_phone_number": "(512) 555-0100",
            "international_phone_number": "+1 512-555-0100",
            "url": "https://maps.google.com/?cid=1",
            "website": "https://acme.example",
        }
    )

    assert detail.formatted_phone == "(512) 555-0100"
    assert detail.international_phone == "+1 512-555-0100"
    assert detail.url == "https://maps.google.com/?cid=1"
    assert detail.coordinates is None


def test_merge_record_name_precedence():
    summary = SearchSummary(place_id="p1", name="A")

    assert transform.merge_record(summary, PlaceDetail(name="B")).name == "B"
    assert transform.merge_record(summary, None).name == "A"
    assert transform.merge_record(SearchSummary(place_id="p1"), None).name == "Unknown"


def test_merge_record_empty_detail_values_fall_back_to_summary():
    summary = SearchSummary(place_id="p1", name="A", address="Main St", types=("cafe",))
    record = transform.merge_record(summary, PlaceDetail(name="", address="", types=()))

    assert record.name == "A"
    assert record.address == "Main St"
    assert record.types == ("cafe",)


def test_merge_record_address_sentinel():
    assert transform.merge_record(SearchSummary(place_id="p1"), None).address == "Address unavailable"


def test_merge_record_phone_prefers_formatted_number():
    summary = SearchSummary(place_id="p1")

    both = PlaceDetail(formatted_phone="111", international_phone="+1 111")
    only_international = PlaceDetail(international_phone="+1 111")

    assert transform.merge_record(summary, both).phone == "111"
    assert transform.merge_record(summary, only_international).phone == "+1 111"
    assert transform.merge_record(summary, None).phone is None


def test_merge_record_builds_maps_url_from_coordinates():
    summary = SearchSummary(place_id="p1", coordinates=Coordinates(lat=1, lng=2))
    record = transform.merge_record(summary, None)

    assert "1,2" in record.maps_url
    assert "p1" in record.maps_url
    assert record.maps_url == "https://www.google.com/maps/search/?api=1&query=1,2&query_place_id=p1"


def test_merge_record_prefers_canonical_url_and_detail_coordinates():
    summary = SearchSummary(place_id="p1", coordinates=Coordinates(lat=1, lng=2))
    detail = PlaceDetail(url="https://maps.google.com/?cid=9", coordinates=Coordinates(lat=3, lng=4))
    record = transform.merge_record(summary, detail)

    assert record.maps_url == "https://maps.google.com/?cid=9"
    assert record.coordinates == Coordinates(lat=3, lng=4)


def test_merge_record_without_coordinates_has_no_maps_url():
    record = transform.merge_record(SearchSummary(place_id="p1"), PlaceDetail(name="B"))

    assert record.maps_url is None
    assert record.coordinates is None


def test_merge_record_status_and_website():
    summary = SearchSummary(place_id="p1", business_status="CLOSED_TEMPORARILY")

    assert transform.merge_record(summary, None).business_status == "CLOSED_TEMPORARILY"
    assert transform.merge_record(summary, None).website is None
    detail = PlaceDetail(business_status="OPERATIONAL", website="https://acme.example")
    record = transform.merge_record(summary, detail)
    assert record.business_status == "OPERATIONAL"
    assert record.website == "https://acme.example"


def test_to_result_row_omits_absent_fields():
    summary = SearchSummary(place_id="p1", name="Acme", coordinates=Coordinates(lat=1, lng=2), types=("cafe",))
    row = transform.to_result_row(transform.merge_record(summary, None))

    assert row == {
        "name": "Acme",
        "formattedAddress": "Address unavailable",
        "googleMapsUrl": "https://www.google.com/maps/search/?api=1&query=1,2&query_place_id=p1",
        "latitude": 1,
        "longitude": 2,
        "types": ["cafe"],
    }
