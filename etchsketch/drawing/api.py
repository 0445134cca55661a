import os
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from ..utils import ImageDecodeError, decode_data_url, image_to_data_url
from .ingestion.models import DrawingCreate, StrokeRequest, StrokeResponse
from .stroke_engine.pipeline import generate_stroke
from .stroke_engine.simplification import MAX_STORED_POINTS, simplify_path
from .storage.drawings import DrawingReadError, DrawingStore, PointLimitExceeded
from .vision.description import describe_image

load_dotenv()

logger = logging.getLogger("drawings")

router = APIRouter(prefix="/api/v1", tags=["drawing"])

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def get_store() -> DrawingStore:
    return DrawingStore(os.environ.get("DRAWINGS_DATA_DIR", os.path.join("data", "drawings")))


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("/draw-from-image")
async def draw_from_image(
    image: Optional[UploadFile] = File(None),
    canvasWidth: int = Form(600),
    canvasHeight: int = Form(400),
):
    """
    Returns the upload as a reusable data URL plus a short description.
    The stroke itself is generated by /strokes/generate from that data URL.
    """
    if image is None:
        return _error("No image file provided", 400)

    mime_type = image.content_type or "image/png"
    if not mime_type.startswith("image/"):
        return _error("Please select an image file", 400)

    contents = await image.read(MAX_UPLOAD_BYTES + 1)
    if len(contents) > MAX_UPLOAD_BYTES:
        return _error(f"Image is larger than {MAX_UPLOAD_BYTES // (1024 * 1024)} MB", 400)

    data_url = image_to_data_url(contents, mime_type)
    analysis = await run_in_threadpool(describe_image, data_url)
    logger.info("Prepared upload %s for %dx%d canvas", image.filename, canvasWidth, canvasHeight)

    return JSONResponse({
        "analysis": analysis,
        "imageData": data_url,
        "success": True,
    })


@router.post("/strokes/generate", response_model=StrokeResponse)
def generate_strokes(request: StrokeRequest):
    """
    Runs edge extraction + path building on a data URL image.
    An empty `points` list means nothing survived edge filtering.
    """
    try:
        image = decode_data_url(request.image_data)
    except ImageDecodeError as e:
        return _error(str(e), 400)

    points = generate_stroke(image, request.canvas_width, request.canvas_height)
    return StrokeResponse(points=points, count=len(points))


@router.post("/drawings")
def save_drawing(drawing: DrawingCreate, store: DrawingStore = Depends(get_store)):
    name = drawing.name.strip()
    if not name:
        return _error("Please enter a name for your drawing", 400)
    if not drawing.points:
        return _error("No drawing to save", 400)

    # Long strokes are thinned here so the store limit is never hit
    points = simplify_path(drawing.points, MAX_STORED_POINTS)
    handle = (drawing.twitter_handle or "").strip() or None
    to_save = drawing.model_copy(update={"name": name, "twitter_handle": handle, "points": points})

    try:
        drawing_id = store.save(to_save)
    except PointLimitExceeded as e:
        return _error(str(e), 400)
    except OSError:
        logger.exception("Failed to save drawing")
        return _error("Failed to save drawing", 503)

    return {"id": drawing_id}


@router.get("/drawings/{drawing_id}")
def get_drawing(drawing_id: str, store: DrawingStore = Depends(get_store)):
    try:
        drawing = store.get(drawing_id)
    except (OSError, DrawingReadError):
        logger.exception("Failed to read drawing %s", drawing_id)
        return _error("Failed to load drawing", 503)

    if drawing is None:
        return _error("Drawing not found", 404)
    return drawing.model_dump(by_alias=True)


@router.get("/drawings")
def list_drawings(
    numItems: int = Query(12, gt=0, le=100),
    cursor: Optional[str] = None,
    store: DrawingStore = Depends(get_store),
):
    try:
        page = store.list(numItems, cursor)
    except ValueError as e:
        return _error(str(e), 400)
    except OSError:
        logger.exception("Failed to list drawings")
        return _error("Failed to load drawings", 503)

    return page.model_dump(by_alias=True)
