"""Static vocabulary catalog bundled with the package."""
import json
from collections import Counter
from pathlib import Path

from frenchie.models import Category, Collection, CollectionCount, Gender, Level, VocabularyItem

CONTENT_DIR = Path(__file__).parent / "content"
DEFAULT_CATALOG_PATH = CONTENT_DIR / "vocabulary.json"

COLLECTION_NAMES = {
    Collection.GREETINGS: "Greetings",
    Collection.DAILY_ROUTINES: "Daily Routines",
    Collection.DAILY_EXPRESSIONS: "Daily Expressions",
    Collection.FOOD: "Food & Dining",
    Collection.BEAUTY: "Beauty & Cosmetics",
    Collection.TRAVEL: "Travel",
    Collection.NATURE: "Nature",
    Collection.CONJUNCTIONS: "Conjunctions",
    Collection.TIME: "Time",
    Collection.SHOPPING: "Shopping",
    Collection.EMOTIONS: "Emotions",
    Collection.FAMILY: "Family & Friends",
    Collection.WORK: "Work",
    Collection.HEALTH: "Health",
    Collection.WEATHER: "Weather",
    Collection.GENERAL: "General",
}

REQUIRED_FIELDS = ("id", "french", "english", "level", "category")


class CatalogError(ValueError):
    """Catalog data is missing fields, has bad values or duplicate ids."""


def item_from_dict(data: dict) -> VocabularyItem:
    """Build a VocabularyItem from a catalog record (camelCase keys)."""
    missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
    if missing:
        raise CatalogError(f"vocabulary record {data.get('id', '?')} missing {', '.join(missing)}")
    try:
        return VocabularyItem(
            id=str(data["id"]),
            french=data["french"],
            english=data["english"],
            example_fr=data.get("exampleFr", ""),
            example_en=data.get("exampleEn", ""),
            level=Level(data["level"]),
            category=Category(data["category"]),
            gender=Gender(data.get("gender") or "none"),
            collection=Collection(data.get("collection") or "general"),
        )
    except ValueError as e:
        raise CatalogError(f"vocabulary record {data['id']}: {e}") from e


def build_catalog(records: list[dict]) -> list[VocabularyItem]:
    items = [item_from_dict(r) for r in records]
    seen = set()
    for item in items:
        if item.id in seen:
            raise CatalogError(f"duplicate vocabulary id: {item.id}")
        seen.add(item.id)
    return items


def load_catalog(path: str | Path | None = None) -> list[VocabularyItem]:
    """Load the vocabulary list once; callers keep and pass the result around."""
    data = json.loads(Path(path or DEFAULT_CATALOG_PATH).read_text(encoding="utf-8"))
    return build_catalog(data["vocabulary"])


def get_item(catalog: list[VocabularyItem], item_id: str) -> VocabularyItem | None:
    for item in catalog:
        if item.id == item_id:
            return item
    return None


def list_collections(catalog: list[VocabularyItem]) -> list[CollectionCount]:
    """Collections that hold at least one item, in display order, with item counts."""
    counts = Counter(item.collection for item in catalog)
    return [
        CollectionCount(collection=c, name=COLLECTION_NAMES[c], count=counts[c])
        for c in Collection
        if counts[c] > 0
    ]


def items_in_collection(catalog: list[VocabularyItem], collection: Collection | str) -> list[VocabularyItem]:
    collection = Collection(collection)
    return [item for item in catalog if item.collection == collection]
