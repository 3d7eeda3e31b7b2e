"""
KML document builder for settlement maps.

Builds one KML document per settlement: a style per palette color, an optional
settlement outline, and one polygon placemark per polling district.
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Sequence

from core.config import BORDER_COLOR, DISTRICT_COLORS, KML_NS, OUTLINE_COLOR
from core.types import PollingDistrict, Point
from core.utils import add_data, hex_to_kml_abgr
from processing.annotations import build_description
from processing.geometry import format_coordinates
from processing.simplify import close_ring, simplify_ring

NS_KML = {'kml': KML_NS}

OUTLINE_STYLE_ID = "settlementOutline"


def district_style_id(index: int, palette_size: int) -> str:
    return f"style{index % palette_size}"


def add_district_styles(doc, palette: Sequence[str]):
    """Add one polygon style per palette entry (KML ABGR colors)."""
    for i, color in enumerate(palette):
        style = ET.SubElement(doc, 'Style')
        style.set('id', f"style{i}")
        line_style = ET.SubElement(style, 'LineStyle')
        ET.SubElement(line_style, 'color').text = BORDER_COLOR
        ET.SubElement(line_style, 'width').text = '1'
        poly_style = ET.SubElement(style, 'PolyStyle')
        ET.SubElement(poly_style, 'color').text = color


def add_outline_style(doc):
    style = ET.SubElement(doc, 'Style')
    style.set('id', OUTLINE_STYLE_ID)
    line_style = ET.SubElement(style, 'LineStyle')
    ET.SubElement(line_style, 'color').text = hex_to_kml_abgr(OUTLINE_COLOR, 100)
    ET.SubElement(line_style, 'width').text = '3'
    poly_style = ET.SubElement(style, 'PolyStyle')
    ET.SubElement(poly_style, 'fill').text = '0'


def add_polygon(parent, ring: Sequence[Point], precision: int):
    polygon = ET.SubElement(parent, 'Polygon')
    outer = ET.SubElement(polygon, 'outerBoundaryIs')
    linear_ring = ET.SubElement(outer, 'LinearRing')
    ET.SubElement(linear_ring, 'coordinates').text = format_coordinates(ring, precision)


def prepare_ring(points: Sequence[Point], tolerance: Optional[float]) -> list[Point]:
    """Close a ring, simplifying it first unless tolerance is None."""
    if tolerance is None:
        return close_ring(points)
    return simplify_ring(points, tolerance)


def add_district_placemark(doc, district: PollingDistrict, style_id: str,
                           tolerance: Optional[float], precision: int):
    pm = ET.SubElement(doc, 'Placemark')
    ET.SubElement(pm, 'name').text = f"Szavazókör {district.number}"

    description = build_description(district)
    if description:
        ET.SubElement(pm, 'description').text = description

    ET.SubElement(pm, 'styleUrl').text = f"#{style_id}"

    extended = ET.SubElement(pm, 'ExtendedData')
    add_data(extended, 'szk', district.number)
    if district.voters is not None:
        add_data(extended, 'voters', district.voters)
    if district.address:
        add_data(extended, 'address', district.address)

    add_polygon(pm, prepare_ring(district.polygon, tolerance), precision)
    return pm


def build_settlement_kml(name: str, districts: Sequence[PollingDistrict],
                         tolerance: Optional[float] = None, precision: int = 6,
                         outline: Optional[Sequence[Point]] = None,
                         palette: Optional[Sequence[str]] = None) -> ET.ElementTree:
    """Build the KML document of one settlement.

    Args:
        name: Settlement name used as the document name
        districts: Polling districts, one placemark each
        tolerance: Simplification tolerance in degrees, None to keep rings as is
        precision: Decimal digits per coordinate
        outline: Optional settlement boundary ring
        palette: KML ABGR fill colors; defaults to DISTRICT_COLORS at 50% opacity

    Returns:
        ElementTree ready to be written
    """
    if palette is None:
        palette = [hex_to_kml_abgr(color, 50) for color in DISTRICT_COLORS]

    root = ET.Element('kml', {'xmlns': KML_NS})
    doc = ET.SubElement(root, 'Document')
    ET.SubElement(doc, 'name').text = name

    add_district_styles(doc, palette)

    if outline:
        add_outline_style(doc)
        pm = ET.SubElement(doc, 'Placemark')
        ET.SubElement(pm, 'name').text = name
        ET.SubElement(pm, 'styleUrl').text = f"#{OUTLINE_STYLE_ID}"
        add_polygon(pm, prepare_ring(outline, tolerance), precision)

    for index, district in enumerate(districts):
        add_district_placemark(doc, district, district_style_id(index, len(palette)),
                               tolerance, precision)

    ET.indent(root, space='  ')
    return ET.ElementTree(root)


def write_kml(tree: ET.ElementTree, output_path) -> None:
    """Write a KML tree as UTF-8 with an XML declaration."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tree.write(output_path, encoding='utf-8', xml_declaration=True)
