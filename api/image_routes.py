from fastapi import APIRouter, Request, status
from fastapi.responses import Response
from models.images import ImageUploadResponse
from services.blobs import BlobStore
from services.errors import NotFoundError
from api.depends import BLOB_STORE, ORIGIN

import logging

logger = logging.getLogger(__name__)

images_router = APIRouter(tags=["images"])

IMAGE_CACHE_CONTROL = "public, max-age=31536000, immutable"


# POST /upload
@images_router.post("/upload", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image_route(
    request: Request,
    origin: str = ORIGIN,
    blobs: BlobStore = BLOB_STORE
):
    """
    Store the raw request body as an image. The Content-Type header must be image/*.
    Returns the key and the URL to reference from a variation's HTML.
    """
    # Header first, then the running total, so an oversized body is never held in full
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit():
        blobs.check_size(int(content_length))

    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        blobs.check_size(received)
        chunks.append(chunk)

    data = b"".join(chunks)
    key = blobs.put(data, request.headers.get("content-type"))
    return ImageUploadResponse(key=key, url=f"{origin}/images/{key}")


# GET /images/{key}
@images_router.get("/images/{key}")
def get_image_route(key: str, blobs: BlobStore = BLOB_STORE):
    blob = blobs.get(key)
    if blob is None:
        raise NotFoundError("Image not found")
    return Response(content=blob.data, media_type=blob.content_type, headers={"Cache-Control": IMAGE_CACHE_CONTROL})
