"""Shapefile reader: CRS auto-detection, reprojection to WGS84 and shape conversion."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

import shapefile
from loguru import logger
from pyproj import CRS, Transformer

from .models import Coordinate, ShapeDescriptor, ShapeKind

Ring = list[tuple[float, float]]


def detect_crs(prj_source: str | Path | None) -> tuple[int | None, str | None, bool | None]:
    """Parse CRS from a .prj WKT string or file path.

    Returns (epsg_code, crs_name, is_projected) or (None, None, None) on failure.
    """
    if prj_source is None:
        return None, None, None

    wkt = prj_source if isinstance(prj_source, str) else ""
    if isinstance(prj_source, Path):
        if not prj_source.exists():
            return None, None, None
        wkt = prj_source.read_text()

    if not wkt.strip():
        return None, None, None

    try:
        crs = CRS.from_wkt(wkt)
    except Exception:
        logger.warning("Could not parse .prj WKT, assuming WGS84 coordinates")
        return None, None, None

    epsg = crs.to_epsg()
    return epsg, crs.name, crs.is_projected


def read_shapefile(
    shp_path: str | Path | None = None,
    *,
    shp_file: BinaryIO | None = None,
    shx_file: BinaryIO | None = None,
    dbf_file: BinaryIO | None = None,
    prj_wkt: str | None = None,
) -> list[ShapeDescriptor]:
    """Read a shapefile and return its geometries as shapes in WGS84.

    Supports two modes:
    - File path: pass ``shp_path`` (the .prj is auto-discovered)
    - File objects: pass ``shp_file``, ``shx_file``, ``dbf_file``, and optionally ``prj_wkt``

    Polygon outer rings become polygons (holes are skipped), polyline parts
    become polylines and points become single-vertex polylines.
    """
    if shp_path is not None:
        shp_path = Path(shp_path)
        sf = shapefile.Reader(str(shp_path))
        prj_path = shp_path.with_suffix(".prj")
        if not prj_path.exists():
            # shp_path might already lack an extension (pyshp convention)
            prj_path = Path(str(shp_path) + ".prj")
        epsg, crs_name, is_projected = detect_crs(prj_path if prj_path.exists() else None)
    elif shp_file is not None:
        sf = shapefile.Reader(shp=shp_file, shx=shx_file, dbf=dbf_file)
        epsg, crs_name, is_projected = detect_crs(prj_wkt)
    else:
        raise ValueError("Provide either shp_path or shp_file")

    upper = sf.shapeTypeName.upper()
    kind, rings = _extract_rings(sf, upper)

    if is_projected:
        if epsg is None:
            raise ValueError(f"Projected CRS '{crs_name}' has no EPSG code; cannot reproject to WGS84")
        rings = _to_wgs84(rings, epsg)
    else:
        _check_geographic(rings)

    logger.info(f"Read {len(rings)} {sf.shapeTypeName} shape(s), CRS {crs_name or 'unknown'}")
    return [
        ShapeDescriptor(
            id=str(n),
            kind=kind,
            boundary=[Coordinate(latitude=y, longitude=x) for x, y in ring],
        )
        for n, ring in enumerate(rings, start=1)
        if ring
    ]


def _parts(shape) -> list[Ring]:
    starts = list(shape.parts) or [0]
    ends = starts[1:] + [len(shape.points)]
    return [[tuple(p[:2]) for p in shape.points[s:e]] for s, e in zip(starts, ends)]


def _signed_area(ring: Ring) -> float:
    area = 0.0
    for (x1, y1), (x2, y2) in zip(ring, ring[1:] + ring[:1]):
        area += x1 * y2 - x2 * y1
    return area / 2


def _extract_rings(sf: shapefile.Reader, upper_type: str) -> tuple[ShapeKind, list[Ring]]:
    """Collect vertex lists from every record and part, based on shape type."""
    rings: list[Ring] = []

    if "POLYGON" in upper_type:
        for number, shape in enumerate(sf.shapes(), start=1):
            parts = [ring for ring in _parts(shape) if ring]
            # Outer rings are clockwise in shapefiles, holes counter-clockwise
            outer = [ring for ring in parts if _signed_area(ring) <= 0]
            if not outer and parts:
                logger.warning(f"Polygon record {number} has no clockwise ring; using its rings as outer rings")
                outer = parts
            elif len(outer) < len(parts):
                logger.warning(f"Polygon record {number}: dropped {len(parts) - len(outer)} hole ring(s)")
            for ring in outer:
                if len(ring) > 1 and ring[0] == ring[-1]:
                    ring = ring[:-1]
                rings.append(ring)
        return ShapeKind.POLYGON, rings

    if "POLYLINE" in upper_type or upper_type in ("ARC", "ARCZ", "ARCM"):
        for shape in sf.shapes():
            rings.extend(_parts(shape))
        return ShapeKind.POLYLINE, rings

    if "POINT" in upper_type:
        # POINT / POINTZ / POINTM / MULTIPOINT
        for shape in sf.shapes():
            rings.extend([tuple(p[:2])] for p in shape.points)
        return ShapeKind.POLYLINE, rings

    raise ValueError(f"Unsupported shape type: {upper_type}")


def _to_wgs84(rings: list[Ring], source_epsg: int) -> list[Ring]:
    """Transform projected x/y rings to WGS84 lon/lat."""
    transformer = Transformer.from_crs(f"EPSG:{source_epsg}", "EPSG:4326", always_xy=True)
    converted: list[Ring] = []
    for ring in rings:
        if not ring:
            converted.append([])
            continue
        xs = [x for x, _ in ring]
        ys = [y for _, y in ring]
        lons, lats = transformer.transform(xs, ys)
        converted.append(list(zip(lons, lats)))
    return converted


def _check_geographic(rings: list[Ring]) -> None:
    for ring in rings:
        for x, y in ring:
            if not (-180 <= x <= 180 and -90 <= y <= 90):
                raise ValueError(
                    f"Coordinate ({x}, {y}) is not in degrees; provide a .prj for projected data"
                )
