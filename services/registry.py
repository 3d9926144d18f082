from sqlalchemy.orm import Session
from data.database import Test, new_id
from data.store import Store
from models.ab_tests import ABTestCreate, ABTestView
from services.errors import ValidationError, NotFoundError
import logging

logger = logging.getLogger(__name__)

EMBED_CODE_TEMPLATE = """<script>
  (function() {{
    const script = document.createElement('script');
    script.src = '{script_url}';
    script.async = true;
    document.head.appendChild(script);
  }})();
</script>"""


def embed_url(origin: str, test_id: str) -> str:
    return f"{origin}/embed/{test_id}"


def analytics_url(origin: str, test_id: str) -> str:
    return f"{origin}/analytics/{test_id}"


def script_url(origin: str, test_id: str) -> str:
    return f"{embed_url(origin, test_id)}/script.js"


def embed_code(origin: str, test_id: str) -> str:
    """The snippet a site owner pastes into their page to load the test."""
    return EMBED_CODE_TEMPLATE.format(script_url=script_url(origin, test_id))


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


class TestRegistry:
    """Creates and reads tests, adding the derived embed/analytics fields."""
    __test__ = False

    def __init__(self, db: Session):
        self.store = Store(db)

    def to_view(self, test: Test, origin: str) -> ABTestView:
        origin = origin.rstrip("/")
        return ABTestView(
            **test.to_dict(),
            embed_url=embed_url(origin, test.id),
            analytics_url=analytics_url(origin, test.id),
            embed_code=embed_code(origin, test.id),
        )

    def create(self, data: ABTestCreate, origin: str) -> ABTestView:
        if not (_present(data.name) and _present(data.variation_a) and _present(data.variation_b)):
            logger.info("rejected test creation, required fields missing")
            raise ValidationError("Name, variation A, and variation B are required")

        test = Test(
            id=new_id(),
            name=data.name,
            description=data.description,
            variation_a=data.variation_a,
            variation_b=data.variation_b,
        )
        test = self.store.create_test(test)
        return self.to_view(test, origin)

    def get_test(self, test_id: str) -> Test:
        """Fetch the stored test or raise NotFoundError."""
        test = self.store.get_test(test_id)
        if test is None:
            logger.info("test %s not found", test_id)
            raise NotFoundError("Test not found")
        return test

    def get(self, test_id: str, origin: str) -> ABTestView:
        return self.to_view(self.get_test(test_id), origin)

    def list_tests(self, origin: str) -> list[ABTestView]:
        return [self.to_view(test, origin) for test in self.store.list_tests()]
