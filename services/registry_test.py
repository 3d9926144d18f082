import unittest
from unittest.mock import MagicMock, patch
from datetime import datetime, timezone
from data.database import Test
from models.ab_tests import ABTestCreate
from services.errors import ValidationError, NotFoundError
from services.registry import TestRegistry, embed_code

ORIGIN = "https://ab.example.com"


def stored_test(**overrides):
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    fields = dict(
        id="abc123", name="Headline", description=None,
        variation_a="<b>A</b>", variation_b="<b>B</b>",
        created_at=now, updated_at=now,
    )
    fields.update(overrides)
    return Test(**fields)


@patch("services.registry.Store")
class TestRegistryService(unittest.TestCase):

    def test_create_persists_and_enriches(self, mock_store_cls):
        store = mock_store_cls.return_value

        def fake_create(test):
            test.created_at = test.updated_at = datetime.now(timezone.utc)
            return test
        store.create_test.side_effect = fake_create

        registry = TestRegistry(MagicMock())
        view = registry.create(
            ABTestCreate(name="Headline", variationA="<b>A</b>", variationB="<b>B</b>"), ORIGIN + "/"
        )

        store.create_test.assert_called_once()
        self.assertTrue(view.id)
        self.assertEqual(view.embed_url, f"{ORIGIN}/embed/{view.id}")
        self.assertEqual(view.analytics_url, f"{ORIGIN}/analytics/{view.id}")
        self.assertEqual(view.embed_code, embed_code(ORIGIN, view.id))

    def test_create_generates_fresh_ids(self, mock_store_cls):
        mock_store_cls.return_value.create_test.side_effect = lambda t: stored_test(id=t.id)
        registry = TestRegistry(MagicMock())
        data = ABTestCreate(name="n", variationA="a", variationB="b")

        ids = {registry.create(data, ORIGIN).id for _ in range(5)}
        self.assertEqual(len(ids), 5)

    def test_create_rejects_missing_fields(self, mock_store_cls):
        registry = TestRegistry(MagicMock())
        invalid = [
            ABTestCreate(variationA="a", variationB="b"),
            ABTestCreate(name="n", variationB="b"),
            ABTestCreate(name="n", variationA="a"),
            ABTestCreate(name="n", variationA="", variationB="b"),
            ABTestCreate(name="n", variationA="a", variationB="\n  "),
        ]
        for data in invalid:
            with self.assertRaises(ValidationError):
                registry.create(data, ORIGIN)

        mock_store_cls.return_value.create_test.assert_not_called()

    def test_get_unknown(self, mock_store_cls):
        mock_store_cls.return_value.get_test.return_value = None
        with self.assertRaises(NotFoundError) as ctx:
            TestRegistry(MagicMock()).get("missing", ORIGIN)
        self.assertEqual(ctx.exception.message, "Test not found")

    def test_list_enriches_each_item(self, mock_store_cls):
        mock_store_cls.return_value.list_tests.return_value = [stored_test(id="one"), stored_test(id="two")]

        views = TestRegistry(MagicMock()).list_tests(ORIGIN)

        self.assertEqual([v.embed_url for v in views], [f"{ORIGIN}/embed/one", f"{ORIGIN}/embed/two"])

    def test_view_json_uses_camel_case(self, mock_store_cls):
        mock_store_cls.return_value.get_test.return_value = stored_test()

        data = TestRegistry(MagicMock()).get("abc123", ORIGIN).model_dump(by_alias=True)

        self.assertEqual(
            set(data),
            {"id", "name", "description", "variationA", "variationB", "createdAt",
             "updatedAt", "embedUrl", "analyticsUrl", "embedCode"},
        )


class TestEmbedCode(unittest.TestCase):

    def test_snippet_only_depends_on_script_url(self):
        snippet = embed_code(ORIGIN, "abc123")
        self.assertTrue(snippet.startswith("<script>"))
        self.assertTrue(snippet.endswith("</script>"))
        self.assertIn(f"script.src = '{ORIGIN}/embed/abc123/script.js';", snippet)
        self.assertEqual(snippet.replace("abc123", "other"), embed_code(ORIGIN, "other"))


if __name__ == "__main__":
    unittest.main()
