"""FastAPI server exposing waypoint generation and shape import."""

from __future__ import annotations

import io
import tempfile
import zipfile
from pathlib import Path

import shapefile
from fastapi import FastAPI, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger

from .adapter import CompatibilityAdapter
from .errors import AmbiguousCoordinateError
from .kml_reader import read_kmz
from .models import LegacyWaypointRequest, MissionResult, ShapeDescriptor, ShapesRequest, Waypoint
from .orchestrator import WaypointOrchestrator
from .reader import read_shapefile
from .summary import build_result

app = FastAPI(title="Waypoint Planner", version="0.1.0")

orchestrator = WaypointOrchestrator()
adapter = CompatibilityAdapter()

COMPANION_EXTS = {".shp", ".shx", ".dbf", ".prj"}


@app.exception_handler(AmbiguousCoordinateError)
async def ambiguous_coordinate_handler(request: Request, exc: AmbiguousCoordinateError):
    logger.warning(f"{request.url.path}: {exc}")
    return JSONResponse(
        status_code=422,
        content={
            "detail": str(exc),
            "latitude": exc.latitude,
            "longitude": exc.longitude,
        },
    )


@app.post("/api/waypoints/generate", response_model=list[Waypoint])
def generate_legacy(request: LegacyWaypointRequest):
    """Single-shape request in the flat format of older clients."""
    return adapter.generate_legacy(
        action=request.action,
        unit_type=request.unit_type,
        altitude=request.altitude,
        speed=request.speed,
        angle=request.angle,
        line_spacing=request.line_spacing,
        bounds=request.bounds,
        bounds_type=request.bounds_type,
        starting_index=request.starting_index,
        photo_interval=request.photo_interval,
        use_endpoints_only=request.use_endpoints_only,
        is_north_south=request.is_north_south,
    )


@app.post("/api/waypoints/shapes", response_model=list[Waypoint])
def generate_for_shapes(request: ShapesRequest):
    return orchestrator.generate(request.shapes, request.parameters)


@app.post("/api/waypoints/summary", response_model=MissionResult)
def generate_with_summary(request: ShapesRequest):
    """Waypoints plus legs and mission totals."""
    waypoints = orchestrator.generate(request.shapes, request.parameters)
    return build_result(waypoints)


@app.post("/api/shapes/import", response_model=list[ShapeDescriptor])
async def import_shapes(files: list[UploadFile]):
    """Import shapes from uploaded KMZ/KML or shapefile(s).

    Accepts:
    - A single .kmz or .kml file
    - A single .zip containing shapefile components
    - Multiple files (.shp, .shx, .dbf, and optionally .prj)
    """
    filename = (files[0].filename or "").lower() if len(files) == 1 else ""

    try:
        if filename.endswith((".kmz", ".kml")):
            shapes = await _handle_kmz(files[0])
        elif filename.endswith(".zip"):
            shapes = await _handle_zip(files[0])
        else:
            shapes = await _handle_multi_file(files)
    except (ValueError, zipfile.BadZipFile, shapefile.ShapefileException) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return shapes


async def _handle_zip(upload: UploadFile) -> list[ShapeDescriptor]:
    """Extract shapefile from a zip archive and read it."""
    content = await upload.read()

    with tempfile.TemporaryDirectory() as extract_dir:
        with zipfile.ZipFile(io.BytesIO(content)) as zf:
            zf.extractall(extract_dir)

        shp_files = sorted(Path(extract_dir).rglob("*.shp"))
        if not shp_files:
            raise HTTPException(status_code=400, detail="No .shp file found in zip archive")
        return read_shapefile(shp_files[0])


async def _handle_kmz(upload: UploadFile) -> list[ShapeDescriptor]:
    """Read a KMZ or KML file upload."""
    content = await upload.read()
    return read_kmz(io.BytesIO(content))


async def _handle_multi_file(files: list[UploadFile]) -> list[ShapeDescriptor]:
    """Read a shapefile from multiple uploaded component files."""
    file_map: dict[str, bytes] = {}
    for f in files:
        ext = Path(f.filename or "").suffix.lower()
        if ext in COMPANION_EXTS:
            file_map[ext] = await f.read()

    if ".shp" not in file_map:
        raise HTTPException(status_code=400, detail="Missing required .shp file")

    shp_file = io.BytesIO(file_map[".shp"])
    shx_file = io.BytesIO(file_map[".shx"]) if ".shx" in file_map else None
    dbf_file = io.BytesIO(file_map[".dbf"]) if ".dbf" in file_map else None

    prj_wkt = None
    if ".prj" in file_map:
        prj_wkt = file_map[".prj"].decode("utf-8", errors="replace")

    return read_shapefile(
        shp_file=shp_file,
        shx_file=shx_file,
        dbf_file=dbf_file,
        prj_wkt=prj_wkt,
    )
