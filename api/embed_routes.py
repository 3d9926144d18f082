import random
from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session
from services.errors import NotFoundError
from services.registry import TestRegistry
from services.selector import VariationSelector, should_record_impression
from api.depends import DB_DEPENDENCY, ORIGIN, REGISTRY, RNG, templates

import logging

logger = logging.getLogger(__name__)

embed_router = APIRouter(
    prefix="/embed",
    tags=["embed"],
)

JAVASCRIPT_MEDIA_TYPE = "application/javascript"


# GET /embed/{test_id}
@embed_router.get("/{test_id}", response_class=HTMLResponse)
def embed_page_route(
    request: Request,
    test_id: str,
    db: Session = DB_DEPENDENCY,
    registry: TestRegistry = REGISTRY,
    rng: random.Random = RNG
):
    """Render one randomly chosen variation as a standalone page. Every page load counts as a view."""
    try:
        test = registry.get_test(test_id)
    except NotFoundError:
        return templates.TemplateResponse(
            request, "not_found.html", {"title": "Test Not Found"}, status_code=status.HTTP_404_NOT_FOUND
        )

    selector = VariationSelector(db, rng)
    served = selector.serve(test)
    selector.record_impression(test, served.variation)

    return templates.TemplateResponse(
        request, "embed.html", {"test": test, "variation": served.variation, "content": served.content}
    )


# GET /embed/{test_id}/script.js
@embed_router.get("/{test_id}/script.js")
def embed_script_route(
    request: Request,
    test_id: str,
    container: str | None = None,
    db: Session = DB_DEPENDENCY,
    origin: str = ORIGIN,
    registry: TestRegistry = REGISTRY,
    rng: random.Random = RNG
):
    """
    JavaScript that injects a randomly chosen variation into the embedding page.
    The view is only recorded for loads referred by another site.
    """
    # Missing tests answer with the JSON error body via the NotFoundError handler
    test = registry.get_test(test_id)

    selector = VariationSelector(db, rng)
    served = selector.serve(test)

    referer = request.headers.get("referer")
    if should_record_impression(referer, origin):
        selector.record_impression(test, served.variation)
    else:
        logger.debug("script load for test %s not counted, referer=%r", test_id, referer)

    response = templates.TemplateResponse(
        request,
        "embed_script.js",
        {"test": test, "variation": served.variation, "content": served.content, "container": container},
        media_type=JAVASCRIPT_MEDIA_TYPE,
    )
    response.headers["Access-Control-Allow-Origin"] = "*"
    # Each load must flip its own coin
    response.headers["Cache-Control"] = "no-store"
    return response
