from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from data.database import Test, View, VARIATIONS
from services.errors import ValidationError, DanglingReferenceError
import logging

logger = logging.getLogger(__name__)

REQUIRED_TEST_FIELDS = ("name", "variation_a", "variation_b")


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class Store:
    """The only component that talks to the database. No business rules live here."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, obj):
        try:
            self.db.add(obj)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Database write failed for %r", obj)
            raise
        self.db.refresh(obj)
        return obj

    # --- Tests ---

    def create_test(self, test: Test) -> Test:
        missing = [field for field in REQUIRED_TEST_FIELDS if _is_blank(getattr(test, field))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        self._commit(test)
        logger.info("created test %s (%s)", test.id, test.name)
        return test

    def get_test(self, test_id: str) -> Test | None:
        return self.db.get(Test, test_id)

    def list_tests(self) -> list[Test]:
        stmt = select(Test).order_by(Test.created_at, Test.id)
        return list(self.db.scalars(stmt).all())

    # --- Views ---

    def record_view(self, view: View) -> View:
        if view.variation not in VARIATIONS:
            raise ValidationError(f"Unknown variation {view.variation!r}")

        # Explicit check so the reference holds even where the engine does not enforce foreign keys
        if view.test_id is None or self.db.get(Test, view.test_id) is None:
            raise DanglingReferenceError(f"View references unknown test {view.test_id!r}")

        self._commit(view)
        logger.debug("recorded view %s for test %s variation %s", view.id, view.test_id, view.variation)
        return view

    def count_views_by_variation(self, test_id: str) -> dict[str, int]:
        stmt = (
            select(View.variation, func.count(View.id))
            .where(View.test_id == test_id)
            .group_by(View.variation)
        )
        return {variation: count for variation, count in self.db.execute(stmt).all()}
