import xml.etree.ElementTree as ET

from core.config import DISTRICT_COLORS
from core.types import Point, PollingDistrict
from core.utils import hex_to_kml_abgr, safe_filename
from processing.kml_document import NS_KML, build_settlement_kml, write_kml

SQUARE = [Point(19.0, 47.0), Point(19.005, 47.0000001), Point(19.01, 47.0),
          Point(19.01, 47.01), Point(19.0, 47.01)]


def districts(count):
    return [PollingDistrict(number=str(i + 1), polygon=SQUARE) for i in range(count)]


def parse(tree):
    return ET.fromstring(ET.tostring(tree.getroot(), encoding='unicode'))


def coordinates(placemark):
    text = placemark.find('.//kml:coordinates', NS_KML).text
    return text.split(' ')


def test_hex_to_kml_abgr_matches_palette():
    assert hex_to_kml_abgr("#ff0000", 50) == "7f0000ff"
    assert hex_to_kml_abgr("#ff8000", 50) == "7f0080ff"
    assert hex_to_kml_abgr("#0080ff", 50) == "7fff8000"
    assert hex_to_kml_abgr("bad", 50) == "ff000000"


def test_safe_filename():
    assert safe_filename('Budapest I. "Vár"/kerület') == 'Budapest I. _Vár__kerület'


def test_document_structure():
    root = parse(build_settlement_kml("Baja & Környéke", districts(2)))
    doc = root.find('kml:Document', NS_KML)
    assert doc.find('kml:name', NS_KML).text == "Baja & Környéke"

    styles = doc.findall('kml:Style', NS_KML)
    assert len(styles) == len(DISTRICT_COLORS)
    assert styles[0].get('id') == 'style0'
    assert styles[0].find('kml:PolyStyle/kml:color', NS_KML).text == '7f0000ff'
    assert styles[0].find('kml:LineStyle/kml:color', NS_KML).text == 'ff000000'

    placemarks = doc.findall('kml:Placemark', NS_KML)
    assert [pm.find('kml:name', NS_KML).text for pm in placemarks] == ["Szavazókör 1", "Szavazókör 2"]


def test_styles_cycle_over_palette():
    root = parse(build_settlement_kml("Szeged", districts(len(DISTRICT_COLORS) + 2)))
    urls = [pm.find('kml:styleUrl', NS_KML).text for pm in root.iter('{http://www.opengis.net/kml/2.2}Placemark')]
    assert urls[0] == '#style0'
    assert urls[len(DISTRICT_COLORS)] == '#style0'
    assert urls[len(DISTRICT_COLORS) + 1] == '#style1'


def test_rings_are_closed_and_simplified():
    root = parse(build_settlement_kml("Baja", districts(1), tolerance=0.0001))
    coords = coordinates(root.find('.//kml:Placemark', NS_KML))
    assert coords[0] == coords[-1] == "19.000000,47.000000,0"
    assert "19.005000,47.000000,0" not in coords
    assert len(coords) == 5


def test_rings_are_closed_without_simplification():
    root = parse(build_settlement_kml("Baja", districts(1), tolerance=None))
    coords = coordinates(root.find('.//kml:Placemark', NS_KML))
    assert len(coords) == len(SQUARE) + 1
    assert coords[0] == coords[-1]


def test_annotations_and_extended_data():
    district = PollingDistrict(number="4", polygon=SQUARE, address="Fő tér 1.", voters=900)
    root = parse(build_settlement_kml("Baja", [district]))
    pm = root.find('.//kml:Placemark', NS_KML)
    assert "Választópolgárok száma: 900" in pm.find('kml:description', NS_KML).text
    data = {d.get('name'): d.find('kml:value', NS_KML).text for d in pm.findall('.//kml:Data', NS_KML)}
    assert data == {'szk': '4', 'voters': '900', 'address': 'Fő tér 1.'}


def test_outline_placemark_comes_first():
    root = parse(build_settlement_kml("Baja", districts(1), outline=SQUARE))
    doc = root.find('kml:Document', NS_KML)
    assert doc.find("kml:Style[@id='settlementOutline']", NS_KML) is not None
    first = doc.find('kml:Placemark', NS_KML)
    assert first.find('kml:name', NS_KML).text == "Baja"
    assert first.find('kml:styleUrl', NS_KML).text == '#settlementOutline'


def test_write_kml(tmp_path):
    path = tmp_path / "out" / "Baja.kml"
    write_kml(build_settlement_kml("Baja", districts(1)), path)
    content = path.read_text(encoding='utf-8')
    assert content.startswith("<?xml version='1.0' encoding='utf-8'?>")
    assert 'xmlns="http://www.opengis.net/kml/2.2"' in content
    assert ET.parse(path).getroot().tag == '{http://www.opengis.net/kml/2.2}kml'
