"""KMZ/KML reader: turns Placemark geometries into shapes.

KMZ is a ZIP archive containing KML. KML coordinates are always WGS84 (EPSG:4326)
in ``longitude,latitude,altitude`` format.
"""

from __future__ import annotations

import io
import zipfile
import xml.etree.ElementTree as ET
from typing import BinaryIO

from loguru import logger

from .models import Coordinate, ShapeDescriptor, ShapeKind

KML_NS = "{http://www.opengis.net/kml/2.2}"


def read_kmz(file: str | bytes | BinaryIO) -> list[ShapeDescriptor]:
    """Read a KMZ (or plain KML) file and return the shapes it contains.

    Polygon outer rings become polygons, LineStrings become polylines and
    Points become single-vertex polylines. A Placemark's ``name`` is used as
    the shape id, otherwise shapes are numbered from 1.

    Args:
        file: Path to a .kmz/.kml file, raw bytes, or a file-like object.
    """
    data = _read_bytes(file)

    # KMZ is a ZIP; plain KML is XML text
    if _is_zip(data):
        kml_text = _extract_kml_from_kmz(data)
    else:
        kml_text = data.decode("utf-8", errors="replace")

    try:
        root = ET.fromstring(kml_text)
    except ET.ParseError as e:
        raise ValueError(f"Invalid KML document: {e}") from e

    shapes = _extract_shapes(root)
    logger.info(f"Read {len(shapes)} shape(s) from KML")
    return shapes


def _read_bytes(file: str | bytes | BinaryIO) -> bytes:
    if isinstance(file, (str, bytes)):
        if isinstance(file, str):
            with open(file, "rb") as f:
                return f.read()
        return file
    return file.read()


def _is_zip(data: bytes) -> bool:
    return data[:4] == b"PK\x03\x04"


def _extract_kml_from_kmz(data: bytes) -> str:
    """Extract the first .kml file from a KMZ (ZIP) archive."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        # Prefer doc.kml, fall back to any .kml
        names = zf.namelist()
        kml_name = next((name for name in names if name.lower() == "doc.kml"), None)
        if kml_name is None:
            kml_name = next((name for name in names if name.lower().endswith(".kml")), None)
        if kml_name is None:
            raise ValueError("No .kml file found in KMZ archive")
        return zf.read(kml_name).decode("utf-8", errors="replace")


def _tag(elem: ET.Element) -> str:
    return elem.tag.replace(KML_NS, "")


def _child(elem: ET.Element, name: str) -> ET.Element | None:
    for child in elem:
        if _tag(child) == name:
            return child
    return None


def _extract_shapes(root: ET.Element) -> list[ShapeDescriptor]:
    """Walk every Placemark and convert its geometries."""
    shapes: list[ShapeDescriptor] = []

    for placemark in (e for e in root.iter() if _tag(e) == "Placemark"):
        name_elem = _child(placemark, "name")
        name = name_elem.text.strip() if name_elem is not None and name_elem.text else None

        found = []
        for elem in placemark.iter():
            tag = _tag(elem)
            if tag == "Polygon":
                outer = _child(elem, "outerBoundaryIs")
                ring = _child(outer, "LinearRing") if outer is not None else None
                coords = _coordinates_of(ring) if ring is not None else []
                # KML rings repeat the first vertex at the end
                if len(coords) > 1 and coords[0] == coords[-1]:
                    coords = coords[:-1]
                found.append((ShapeKind.POLYGON, coords))
            elif tag == "LineString":
                found.append((ShapeKind.POLYLINE, _coordinates_of(elem)))
            elif tag == "Point":
                found.append((ShapeKind.POLYLINE, _coordinates_of(elem)[:1]))

        for n, (kind, coords) in enumerate(found):
            if not coords:
                continue
            if name is None:
                shape_id = str(len(shapes) + 1)
            else:
                shape_id = name if n == 0 else f"{name}-{n + 1}"
            shapes.append(ShapeDescriptor(id=shape_id, kind=kind, boundary=coords))

    return shapes


def _coordinates_of(elem: ET.Element) -> list[Coordinate]:
    coords_elem = _child(elem, "coordinates")
    if coords_elem is None or not coords_elem.text:
        return []
    return _parse_coordinates_text(coords_elem.text)


def _parse_coordinates_text(text: str) -> list[Coordinate]:
    """Parse a KML ``<coordinates>`` text block.

    Format: ``lon,lat[,alt] lon,lat[,alt] ...`` (whitespace-separated tuples).
    Altitude is ignored; waypoint altitude comes from the flight parameters.
    """
    coords: list[Coordinate] = []
    for token in text.strip().split():
        parts = token.split(",")
        if len(parts) < 2:
            continue
        try:
            lon = float(parts[0])
            lat = float(parts[1])
        except ValueError as e:
            raise ValueError(f"Invalid KML coordinate '{token}'") from e
        coords.append(Coordinate(latitude=lat, longitude=lon))
    return coords
