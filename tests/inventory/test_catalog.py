"""Tests for Catalog — exact names, aliases, groups, YAML loading."""

import pytest

from inventory.catalog import AliasEntry, Catalog, CatalogError, default_catalog
from shared_types import AliasPolicy


@pytest.fixture
def catalog():
    return default_catalog()


class TestExactMatch:
    def test_case_insensitive(self, catalog):
        r = catalog.resolve("large TO GO cups")
        assert r.matched
        assert r.items == ["Large to go cups"]

    def test_whitespace_trimmed(self, catalog):
        assert catalog.resolve("  Oat   milk ").items == ["Oat milk"]

    def test_exact_name_never_ambiguous(self, catalog):
        # "Icing sugar" is also inside the ambiguous "sugar" alias
        r = catalog.resolve("Icing sugar")
        assert r.matched
        assert not r.ambiguous


class TestAliases:
    def test_single_alias(self, catalog):
        r = catalog.resolve("oat")
        assert r.matched
        assert r.items == ["Oat milk"]

    def test_ask_alias_is_ambiguous(self, catalog):
        r = catalog.resolve("cups")
        assert r.ambiguous
        assert not r.matched
        assert r.items == [
            "Large to go cups",
            "Regular to go cups",
            "Espresso to go cups",
            "Cold to go cups",
        ]

    def test_expand_alias_matches_all(self, catalog):
        r = catalog.resolve("fruits")
        assert r.matched
        assert len(r.items) == 5

    def test_category_umbrella(self, catalog):
        r = catalog.resolve("all milks")
        assert r.matched
        assert r.items == catalog.categories["Milk"]

    def test_unknown(self, catalog):
        r = catalog.resolve("unicorn sprinkles")
        assert r.unknown
        assert not r.matched

    def test_empty_phrase(self, catalog):
        assert catalog.resolve("").unknown


class TestDefinition:
    def test_items_follow_category_order(self):
        c = Catalog({"A": ["x", "y"], "B": ["z"]})
        assert c.items == ["x", "y", "z"]
        assert c.category_of("z") == "B"
        assert c.category_of("nope") is None

    def test_alias_to_unknown_item_rejected(self):
        with pytest.raises(CatalogError):
            Catalog({"A": ["x"]}, [AliasEntry("why", ["y"])])

    def test_alias_targets_canonicalised(self):
        c = Catalog({"A": ["Oat milk"]}, [AliasEntry("oats", ["oat MILK"])])
        assert c.resolve("oats").items == ["Oat milk"]

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "categories:\n"
            "  Bags: [Small bags, Large bags]\n"
            "aliases:\n"
            "  - phrase: bags\n"
            "    items: [Small bags, Large bags]\n"
            "    policy: ask\n"
        )
        c = Catalog.from_yaml(path)
        assert c.aliases["bags"].policy == AliasPolicy.ASK
        assert c.resolve("bags").ambiguous

    def test_from_yaml_bad_policy(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "categories:\n  A: [x, y]\naliases:\n  - phrase: q\n    items: [x, y]\n    policy: maybe\n"
        )
        with pytest.raises(CatalogError, match="policy"):
            Catalog.from_yaml(path)

    def test_from_yaml_invalid(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("categories: [unclosed")
        with pytest.raises(CatalogError):
            Catalog.from_yaml(path)

    def test_empty_categories_rejected(self):
        with pytest.raises(CatalogError):
            Catalog.from_dict({"categories": {}})
