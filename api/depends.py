import os
from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from config import config
from data.database import get_db
from services.blobs import get_blob_store
from services.registry import TestRegistry
from services.selector import get_rng

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)


def get_origin(request: Request) -> str:
    """Base URL used in generated links: PUBLIC_BASE_URL when set, else the request's own origin."""
    if config.public_base_url:
        return config.public_base_url
    return f"{request.url.scheme}://{request.url.netloc}"


def get_registry(db: Session = Depends(get_db)) -> TestRegistry:
    return TestRegistry(db)


# --- DEPENDENCY INJECTION SETUP ---
DB_DEPENDENCY = Depends(get_db)
ORIGIN = Depends(get_origin)
REGISTRY = Depends(get_registry)
RNG = Depends(get_rng)
BLOB_STORE = Depends(get_blob_store)
