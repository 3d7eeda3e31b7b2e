"""
Description text for polling district placemarks.

Builds the human readable annotation shown in map viewers: polling station
address, number of registered voters, and the streets of the district.
"""

from typing import Optional

from core.types import PollingDistrict, StreetSegment

PARITY_LABELS = {
    "even": "páros oldal",
    "odd": "páratlan oldal",
}


def format_voter_count(voters: Optional[int]) -> str:
    """Format the voter count line, e.g. ``Választópolgárok száma: 1 234``."""
    if voters is None:
        return ""
    return f"Választópolgárok száma: {voters:,}".replace(',', ' ')


def format_house_range(from_number: Optional[str], to_number: Optional[str]) -> str:
    if not from_number and not to_number:
        return ""
    return f"{from_number or '…'}-{to_number or '…'}"


def format_street(segment: StreetSegment) -> str:
    """Format one street entry, e.g. ``Fő utca 1-99 (páratlan oldal)``."""
    text = segment.name
    if segment.kind:
        text = f"{text} {segment.kind}"
    house_range = format_house_range(segment.from_number, segment.to_number)
    if house_range:
        text = f"{text} {house_range}"
    if segment.parity:
        text = f"{text} ({PARITY_LABELS[segment.parity]})"
    return text


def build_description(district: PollingDistrict) -> str:
    """Build the full description of a polling district.

    Empty parts are left out, so a district with neither address, voter count
    nor streets gets an empty description.
    """
    lines = []
    if district.address:
        lines.append(f"Szavazóhelyiség: {district.address}")
    voter_line = format_voter_count(district.voters)
    if voter_line:
        lines.append(voter_line)
    if district.streets:
        lines.append("Közterületek:")
        lines.extend(f"- {format_street(segment)}" for segment in district.streets)
    return '\n'.join(lines)
