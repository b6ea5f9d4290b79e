"""Address validity and normalization heuristics applied before geocoding."""

from __future__ import annotations

import logging
import re

from ..exceptions import AddressInvalid

logger = logging.getLogger(__name__)

MIN_ADDRESS_LENGTH = 10
MAX_NORMALIZED_LENGTH = 100

_ADDRESS_NOUNS = re.compile(
    r"street|road|avenue|lane|drive|circle|boulevard|highway|plaza|sector|colony"
    r"|apartments|flats|towers|building|complex",
    re.IGNORECASE,
)
_DIGIT = re.compile(r"\d+")

_KNOWN_LOCALITIES = (
    "Mumbai", "Delhi", "Kolkata", "Chennai", "Bangalore", "Hyderabad",
    "Pune", "Ahmedabad", "Navi Mumbai", "Panvel", "Nerul",
)
_KNOWN_STATES = (
    "Maharashtra", "Gujarat", "Karnataka", "Tamil Nadu", "Telangana",
    "West Bengal", "Uttar Pradesh", "Rajasthan", "Bihar", "Assam",
)
# Longest names first so "Navi Mumbai" wins over "Mumbai".
_LOCALITY_PATTERN = re.compile(
    r"\b(" + "|".join(sorted(_KNOWN_LOCALITIES, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)
_STATE_PATTERN = re.compile(r"\b(" + "|".join(_KNOWN_STATES) + r")\b", re.IGNORECASE)
_PIN_PATTERN = re.compile(r"\b(\d{6})\b")

_COMPASS = {"W": "West", "E": "East", "N": "North", "S": "South"}


def is_routable(address: str | None) -> bool:
    """Return True if the address looks complete enough to be worth geocoding."""
    if not address or not address.strip():
        return False
    if len(address) < MIN_ADDRESS_LENGTH:
        return False
    return bool(_DIGIT.search(address) or _ADDRESS_NOUNS.search(address))


def require_routable(address: str | None) -> str:
    if not is_routable(address):
        raise AddressInvalid(address or "")
    return address


def normalize_address(address: str | None, suffix: str = "India") -> str:
    """Rewrite free-text address into a form the geocoder resolves more reliably."""
    if not address:
        return ""

    normalized = re.sub(r"\([^)]*\)", " ", address)
    normalized = re.sub(r"[^\w\s,./-]", " ", normalized)
    normalized = re.sub(r"\bOppt-", "Opposite ", normalized, flags=re.IGNORECASE)
    # a bare "B-103 ..." unit prefix confuses the geocoder, "B-103, ..." is kept
    normalized = re.sub(r"^\s*[A-Z]-\d+(?![\d,])\s*", "", normalized)
    normalized = re.sub(r"(\w+)-(\d+)", r"\1 \2", normalized)
    normalized = re.sub(r"\b([WENS])\b", lambda match: _COMPASS[match.group(1)], normalized)
    normalized = re.sub(r"\s+", " ", normalized).strip()

    if len(normalized) > MAX_NORMALIZED_LENGTH:
        simplified = _simplify(normalized, suffix)
        logger.debug(f"Simplified long address {address!r} to {simplified!r}")
        return simplified

    if suffix and not normalized.lower().endswith(suffix.lower()):
        normalized = f"{normalized}, {suffix}"
    logger.debug(f"Normalized address {address!r} to {normalized!r}")
    return normalized


def _simplify(normalized: str, suffix: str) -> str:
    components: list[str] = []
    city = _LOCALITY_PATTERN.search(normalized)
    if city:
        components.append(city.group(0))
    state = _STATE_PATTERN.search(normalized)
    if state:
        components.append(state.group(0))
    pin = _PIN_PATTERN.search(normalized)
    if pin:
        components.append(pin.group(1))
    if suffix:
        components.append(suffix)
    return ", ".join(components)


def shares_known_locality(origin: str, destination: str) -> bool:
    """True when both addresses mention at least one common known city or locality."""
    origin_places = {match.lower() for match in _LOCALITY_PATTERN.findall(origin or "")}
    destination_places = {match.lower() for match in _LOCALITY_PATTERN.findall(destination or "")}
    return bool(origin_places & destination_places)
