"""Catalog of tracked supplies and alias resolution.

Multi-item aliases carry an explicit policy: ``expand`` updates every listed
item ("fruits"), ``ask`` turns the phrase into a clarification ("cups").
"""

from dataclasses import dataclass, field
from pathlib import Path

import structlog
import yaml

from shared_types import AliasPolicy

logger = structlog.get_logger()


class CatalogError(ValueError):
    """Catalog definition is invalid."""


DEFAULT_CATEGORIES: dict[str, list[str]] = {
    "Milk": ["Whole milk", "Skim milk", "Oat milk", "Almond milk", "Soy milk", "Heavy cream"],
    "Coffee & Tea": ["Espresso beans", "Decaf beans", "Matcha", "Chai concentrate", "Earl grey tea"],
    "Cups & Lids": [
        "Large to go cups",
        "Regular to go cups",
        "Espresso to go cups",
        "Cold to go cups",
        "Hot lids",
        "Cold lids",
    ],
    "Packaging": ["Small pastry bags", "Large pastry bags", "Cake boxes", "Napkins", "Straws"],
    "Baking": ["Flour", "Butter", "Eggs", "White sugar", "Brown sugar", "Icing sugar", "Yeast"],
    "Fruit": ["Strawberries", "Raspberries", "Blueberries", "Lemons", "Bananas"],
}

DEFAULT_ALIASES: list[dict] = [
    {"phrase": "oat", "items": ["Oat milk"]},
    {"phrase": "almond", "items": ["Almond milk"]},
    {"phrase": "soy", "items": ["Soy milk"]},
    {"phrase": "skim", "items": ["Skim milk"]},
    {"phrase": "cream", "items": ["Heavy cream"]},
    {"phrase": "beans", "items": ["Espresso beans"]},
    {"phrase": "coffee", "items": ["Espresso beans"]},
    {"phrase": "decaf", "items": ["Decaf beans"]},
    {"phrase": "chai", "items": ["Chai concentrate"]},
    {"phrase": "tea", "items": ["Earl grey tea"]},
    {"phrase": "icing", "items": ["Icing sugar"]},
    {
        "phrase": "cups",
        "items": ["Large to go cups", "Regular to go cups", "Espresso to go cups", "Cold to go cups"],
        "policy": "ask",
    },
    {"phrase": "lids", "items": ["Hot lids", "Cold lids"], "policy": "ask"},
    {"phrase": "bags", "items": ["Small pastry bags", "Large pastry bags"], "policy": "ask"},
    {"phrase": "sugar", "items": ["White sugar", "Brown sugar", "Icing sugar"], "policy": "ask"},
    {"phrase": "milk", "items": ["Whole milk", "Skim milk"], "policy": "ask"},
    {
        "phrase": "fruits",
        "items": ["Strawberries", "Raspberries", "Blueberries", "Lemons", "Bananas"],
        "policy": "expand",
    },
    {
        "phrase": "berries",
        "items": ["Strawberries", "Raspberries", "Blueberries"],
        "policy": "expand",
    },
]


@dataclass
class AliasEntry:
    phrase: str
    items: list[str]
    policy: AliasPolicy = AliasPolicy.EXPAND


@dataclass
class Resolution:
    """Outcome of resolving one raw item phrase."""

    phrase: str
    items: list[str] = field(default_factory=list)
    ambiguous: bool = False

    @property
    def matched(self) -> bool:
        return bool(self.items) and not self.ambiguous

    @property
    def unknown(self) -> bool:
        return not self.items


def _norm(phrase: str) -> str:
    return " ".join(phrase.lower().split())


class Catalog:
    """Static category -> items mapping plus the alias table."""

    def __init__(self, categories: dict[str, list[str]], aliases: list[AliasEntry] | None = None):
        self.categories = {cat: list(items) for cat, items in categories.items()}
        self._by_name: dict[str, str] = {}
        for items in self.categories.values():
            for name in items:
                self._by_name[_norm(name)] = name
        self.aliases: dict[str, AliasEntry] = {}
        for entry in aliases or []:
            self.add_alias(entry)

    @property
    def items(self) -> list[str]:
        """All canonical names, in category then display order."""
        names = []
        for members in self.categories.values():
            names.extend(members)
        return names

    def category_of(self, item: str) -> str | None:
        for cat, members in self.categories.items():
            if item in members:
                return cat
        return None

    def add_alias(self, entry: AliasEntry) -> None:
        missing = [name for name in entry.items if _norm(name) not in self._by_name]
        if missing:
            raise CatalogError(f"Alias '{entry.phrase}' points at unknown items: {missing}")
        if not entry.items:
            raise CatalogError(f"Alias '{entry.phrase}' has no items")
        canonical = [self._by_name[_norm(name)] for name in entry.items]
        self.aliases[_norm(entry.phrase)] = AliasEntry(entry.phrase, canonical, entry.policy)

    def resolve(self, phrase: str) -> Resolution:
        """Map a raw phrase to canonical names.

        Exact names win over aliases, so an oracle that already picked a
        specific item never triggers a clarification.
        """
        key = _norm(phrase or "")
        if not key:
            return Resolution(phrase=phrase)

        exact = self._by_name.get(key)
        if exact:
            return Resolution(phrase=phrase, items=[exact])

        alias = self.aliases.get(key)
        if alias:
            if len(alias.items) > 1 and alias.policy == AliasPolicy.ASK:
                return Resolution(phrase=phrase, items=list(alias.items), ambiguous=True)
            return Resolution(phrase=phrase, items=list(alias.items))

        group = self._category_group(key)
        if group:
            return Resolution(phrase=phrase, items=group)

        return Resolution(phrase=phrase)

    def _category_group(self, key: str) -> list[str] | None:
        """'all milks' / 'milk' category umbrella -> every item in that category."""
        if key.startswith("all "):
            key = key[4:]
        for cat, members in self.categories.items():
            cat_key = _norm(cat)
            if key in (cat_key, cat_key + "s", cat_key.rstrip("s")):
                return list(members)
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "Catalog":
        categories = data.get("categories") or {}
        if not isinstance(categories, dict) or not categories:
            raise CatalogError("Catalog needs a non-empty 'categories' mapping")
        aliases = []
        for raw in data.get("aliases") or []:
            try:
                policy = AliasPolicy(raw.get("policy", AliasPolicy.EXPAND))
            except ValueError:
                raise CatalogError(f"Invalid alias policy for '{raw.get('phrase')}': {raw.get('policy')}")
            aliases.append(AliasEntry(raw["phrase"], list(raw.get("items", [])), policy))
        return cls(categories, aliases)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Catalog":
        path = Path(path).expanduser()
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid YAML in catalog file: {e}")
        catalog = cls.from_dict(data)
        logger.info("catalog.loaded", path=str(path), items=len(catalog.items))
        return catalog


def default_catalog() -> Catalog:
    return Catalog.from_dict({"categories": DEFAULT_CATEGORIES, "aliases": DEFAULT_ALIASES})
