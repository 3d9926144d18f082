from pydantic import BaseModel
from urllib.parse import urlsplit
from sqlalchemy.orm import Session
from data.database import Test, View, new_id
from data.store import Store
import random
import logging

logger = logging.getLogger(__name__)

VARIATION_A = "A"
VARIATION_B = "B"

# Reads from os.urandom, no state to guard between threads
_SYSTEM_RANDOM = random.SystemRandom()


def get_rng() -> random.Random:
    """Dependency returning the randomness source used for variation choice."""
    return _SYSTEM_RANDOM


class ServedVariation(BaseModel):
    variation: str
    content: str


def choose(test: Test, rng: random.Random) -> str:
    """Fair coin flip between A and B for test. No stickiness: every call is independent of the test and the viewer."""
    return VARIATION_A if rng.random() < 0.5 else VARIATION_B


def _origin_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}".lower()


def should_record_impression(referer: str | None, own_origin: str) -> bool:
    """
    Script loads are only counted when they come from another site: a missing
    referer, or one from this service (the analytics page previewing the
    snippet), is not counted.
    """
    if not referer or not referer.strip():
        return False
    return _origin_of(referer.strip()) != own_origin.rstrip("/").lower()


class VariationSelector:
    def __init__(self, db: Session, rng: random.Random | None = None):
        self.store = Store(db)
        self.rng = rng or _SYSTEM_RANDOM

    def serve(self, test: Test) -> ServedVariation:
        variation = choose(test, self.rng)
        return ServedVariation(variation=variation, content=test.content_for(variation))

    def record_impression(self, test: Test, variation: str) -> View:
        view = self.store.record_view(View(id=new_id(), test_id=test.id, variation=variation))
        logger.info("impression recorded for test %s variation %s", test.id, variation)
        return view
