from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session
from services import analytics
from services.errors import NotFoundError
from services.registry import TestRegistry, embed_code
from api.depends import DB_DEPENDENCY, ORIGIN, REGISTRY, templates

analytics_router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
)


# GET /analytics/{test_id}
@analytics_router.get("/{test_id}", response_class=HTMLResponse)
def analytics_page_route(
    request: Request,
    test_id: str,
    db: Session = DB_DEPENDENCY,
    origin: str = ORIGIN,
    registry: TestRegistry = REGISTRY
):
    """View counts and shares per variation, plus the snippet to embed the test."""
    try:
        test = registry.get_test(test_id)
    except NotFoundError:
        return templates.TemplateResponse(
            request, "not_found.html", {"title": "Test Not Found"}, status_code=status.HTTP_404_NOT_FOUND
        )

    summary = analytics.summarize(db, test.id)
    return templates.TemplateResponse(
        request,
        "analytics.html",
        {"test": test, "summary": summary, "embed_code": embed_code(origin, test.id)},
    )
