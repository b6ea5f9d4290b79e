import pytest

from dispatch_eta.exceptions import AddressInvalid
from dispatch_eta.services.addresses import is_routable, normalize_address, require_routable, shares_known_locality


@pytest.mark.parametrize(
    "address",
    [
        "Flat 402, Tower B, Sector 20, Navi Mumbai",
        "Palm Beach Road, Vashi",
        "Shivaji colony near market",
    ],
)
def test_is_routable_accepts_numbers_or_address_nouns(address):
    assert is_routable(address)


@pytest.mark.parametrize("address", [None, "", "    ", "Sector 1", "Near the big temple"])
def test_is_routable_rejects_short_or_vague_text(address):
    assert not is_routable(address)


def test_address_nouns_are_case_insensitive():
    assert is_routable("MAIN STREET MARKET")


def test_normalize_strips_noise_and_appends_country():
    normalized = normalize_address("Shop (ground floor) Sector-20, Nerul W")

    assert normalized == "Shop Sector 20, Nerul West, India"


def test_normalize_keeps_existing_country_suffix():
    address = "Flat 402, Tower B, Sector 20, Navi Mumbai, India"

    assert normalize_address(address) == address


def test_normalize_drops_bare_unit_prefix_but_keeps_comma_form():
    assert normalize_address("B-103 Sai Krupa Sector 7 Kharghar") == "Sai Krupa Sector 7 Kharghar, India"
    assert normalize_address("B-103, Sai Krupa Sector 7").startswith("B 103, Sai Krupa")


def test_normalize_expands_opposite_abbreviation():
    assert normalize_address("Oppt-Railway Station, Panvel").startswith("Opposite Railway Station")


def test_normalize_simplifies_very_long_addresses():
    address = (
        "Room 12, Second Floor, Shree Ganesh Krupa Cooperative Housing Society, Behind Old Bus Depot, "
        "Near Municipal School, Panvel, Maharashtra 410206"
    )

    assert normalize_address(address) == "Panvel, Maharashtra, 410206, India"


def test_normalize_empty_address():
    assert normalize_address("") == ""
    assert normalize_address(None) == ""


def test_shares_known_locality():
    assert shares_known_locality("Store A, Sector 10, Navi Mumbai", "Flat 402, Sector 20, navi mumbai")
    assert not shares_known_locality("Andheri East, Mumbai", "Koregaon Park, Pune")


def test_require_routable_raises_for_vague_address():
    assert require_routable("Palm Beach Road, Vashi") == "Palm Beach Road, Vashi"
    with pytest.raises(AddressInvalid):
        require_routable("Belapur")
