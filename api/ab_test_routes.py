from fastapi import APIRouter, status
from models.ab_tests import ABTestCreate, ABTestView
from services.registry import TestRegistry
from api.depends import ORIGIN, REGISTRY

import logging

logger = logging.getLogger(__name__)

tests_router = APIRouter(
    prefix="/tests",
    tags=["tests"],
)


# POST /tests
@tests_router.post(
    "",
    response_model=ABTestView,
    status_code=status.HTTP_201_CREATED
)
def create_test_route(
    test_data: ABTestCreate,
    origin: str = ORIGIN,
    registry: TestRegistry = REGISTRY
):
    """Create a new A/B test from two HTML variations."""
    return registry.create(test_data, origin)


# GET /tests
@tests_router.get("", response_model=list[ABTestView])
def list_tests_route(origin: str = ORIGIN, registry: TestRegistry = REGISTRY):
    return registry.list_tests(origin)


# GET /tests/{test_id}
@tests_router.get("/{test_id}", response_model=ABTestView)
def get_test_route(test_id: str, origin: str = ORIGIN, registry: TestRegistry = REGISTRY):
    """Fetch one test. Unknown ids raise NotFoundError, rendered as a 404 {error} body."""
    return registry.get(test_id, origin)
