"""Import custom vocabulary lists from various file formats."""
import csv
import json
from pathlib import Path

from frenchie.catalog import CatalogError, build_catalog
from frenchie.models import VocabularyItem

# CSV headers accepted as aliases for the catalog's field names
CSV_ALIASES = {
    "example_fr": "exampleFr",
    "example_en": "exampleEn",
    "term": "french",
    "translation": "english",
    "topic": "collection",
}


class ImportFormatError(CatalogError):
    """The file could not be turned into vocabulary records."""


def _records_from_mapping(data) -> list[dict]:
    if isinstance(data, dict):
        data = data.get("vocabulary")
    if not isinstance(data, list):
        raise ImportFormatError("expected a list of records or a 'vocabulary' key")
    return data


def read_records(file_path: str) -> list[dict]:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        try:
            return _records_from_mapping(json.loads(path.read_text(encoding="utf-8")))
        except json.JSONDecodeError as e:
            raise ImportFormatError(f"invalid JSON in {path.name}: {e}") from e
    elif suffix in (".yaml", ".yml"):
        import yaml
        try:
            return _records_from_mapping(yaml.safe_load(path.read_text(encoding="utf-8")))
        except yaml.YAMLError as e:
            raise ImportFormatError(f"invalid YAML in {path.name}: {e}") from e
    elif suffix == ".csv":
        with path.open(newline="", encoding="utf-8") as f:
            return [
                {CSV_ALIASES.get(k.strip(), k.strip()): (v or "").strip() for k, v in row.items() if k}
                for row in csv.DictReader(f)
            ]
    raise ImportFormatError(f"unsupported file type: {suffix or path.name}")


def import_file(file_path: str) -> list[VocabularyItem]:
    """Read a vocabulary file into catalog items. Raises ImportFormatError on bad input."""
    records = read_records(file_path)
    if not records:
        raise ImportFormatError(f"{Path(file_path).name} contains no vocabulary")
    try:
        return build_catalog(records)
    except ImportFormatError:
        raise
    except CatalogError as e:
        raise ImportFormatError(str(e)) from e
