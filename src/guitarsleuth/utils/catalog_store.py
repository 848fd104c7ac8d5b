"""Loading catalog and quiz configuration files.

A catalog file is YAML (or JSON, chosen by a ``.json`` suffix) with up to five
top-level lists: ``models``, ``patterns``, ``approved_guitars``, ``features``
and ``model_features``. Patterns and approved guitars refer to models by
``model_id``; the loader resolves those references so the engines receive
fully linked records.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from guitarsleuth.models.catalog import Catalog, CatalogModel
from guitarsleuth.models.quiz import QuizCategory

# Logger for this module
logger = logging.getLogger(__name__)

DEFAULT_QUIZ_CATEGORIES = "quiz_categories.yaml"
STR_TAG = "tag:yaml.org,2002:str"
NULL_TAG = "tag:yaml.org,2002:null"

# Fields that identify records. They are kept as the text written in the
# file: YAML would read 5014 as an int and 0451234 as an octal number.
_ID_FIELDS = {
    "id",
    "model_id",
    "feature_id",
    "serial_number",
    "prefix",
    "serial_range_start",
    "serial_range_end",
}


class CatalogError(ValueError):
    """Raised when a catalog or quiz file cannot be parsed or validated."""


class CatalogLoader(yaml.SafeLoader):
    """SafeLoader that reads id fields as plain strings."""

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            return super().construct_mapping(node, deep=deep)
        for key_node, value_node in node.value:
            if (
                isinstance(key_node, yaml.ScalarNode)
                and key_node.value in _ID_FIELDS
                and isinstance(value_node, yaml.ScalarNode)
                and value_node.tag != NULL_TAG
            ):
                value_node.tag = STR_TAG
        return super().construct_mapping(node, deep=deep)


def _read_document(path: Path) -> Any:
    """Parse a YAML or JSON document.

    Raises:
        FileNotFoundError: If *path* does not exist.
        CatalogError: If the document is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.load(text, Loader=CatalogLoader)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogError(f"Could not parse {path}: {e}") from e


def _stringify_ids(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: str(value) if key in _ID_FIELDS and value is not None else value
        for key, value in row.items()
    }


def _rows(data: Dict[str, Any], section: str) -> List[Dict[str, Any]]:
    rows = data.get(section) or []
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise CatalogError(f"'{section}' must be a list of mappings")
    return [_stringify_ids(r) for r in rows]


def _link_models(
    rows: List[Dict[str, Any]], models: Dict[str, CatalogModel], section: str
) -> List[Dict[str, Any]]:
    """Replace ``model_id`` with the referenced model record."""
    linked = []
    for row in rows:
        row = dict(row)
        model_id = row.pop("model_id", None)
        if model_id is not None:
            model = models.get(model_id)
            if model is None:
                logger.warning("%s row refers to unknown model %s", section, model_id)
            row["model"] = model
        linked.append(row)
    return linked


def parse_catalog(data: Any, source: str = "<catalog>") -> Catalog:
    """Validate an already parsed catalog document.

    Raises:
        CatalogError: If the document does not describe a valid catalog.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise CatalogError(f"{source}: top level must be a mapping")
    try:
        models = [CatalogModel.model_validate(r) for r in _rows(data, "models")]
        by_id = {m.id: m for m in models}

        patterns = _link_models(_rows(data, "patterns"), by_id, "patterns")

        approved = []
        for row in _link_models(
            _rows(data, "approved_guitars"), by_id, "approved_guitars"
        ):
            model = row.pop("model", None)
            if model is not None and not row.get("model_name"):
                row["model_name"] = model.name
            approved.append(row)

        features = _rows(data, "features")
        feature_categories = {f.get("id"): f.get("category") for f in features}
        model_features = []
        for row in _rows(data, "model_features"):
            if not row.get("category"):
                row["category"] = feature_categories.get(row.get("feature_id"))
            model_features.append(row)

        catalog = Catalog.model_validate(
            {
                "models": models,
                "patterns": patterns,
                "approved_guitars": approved,
                "features": features,
                "model_features": model_features,
            }
        )
    except ValidationError as e:
        raise CatalogError(f"{source}: invalid catalog: {e}") from e

    logger.debug(
        "Loaded catalog %s: %d models, %d patterns, %d approved guitars, "
        "%d features, %d model features",
        source,
        len(catalog.models),
        len(catalog.patterns),
        len(catalog.approved_guitars),
        len(catalog.features),
        len(catalog.model_features),
    )
    return catalog


def load_catalog(path: Optional[Path]) -> Catalog:
    """Load a catalog file, or return an empty catalog when *path* is None.

    An empty catalog means "no external evidence": lookups fall back to the
    serial alone and matching returns nothing.
    """
    if path is None:
        return Catalog()
    return parse_catalog(_read_document(path), source=str(path))


def load_quiz_categories(path: Optional[Path] = None) -> List[QuizCategory]:
    """Load the ordered quiz categories.

    Args:
        path: A YAML file with a list of categories. When None, the packaged
            default list is used.

    Raises:
        CatalogError: If the file is malformed.
    """
    if path is None:
        text = (
            resources.files("guitarsleuth.data")
            .joinpath(DEFAULT_QUIZ_CATEGORIES)
            .read_text(encoding="utf-8")
        )
        data = yaml.load(text, Loader=CatalogLoader)
        source = DEFAULT_QUIZ_CATEGORIES
    else:
        data = _read_document(path)
        source = str(path)

    if isinstance(data, dict):
        data = data.get("categories")
    if not isinstance(data, list):
        raise CatalogError(f"{source}: expected a list of quiz categories")
    try:
        return [QuizCategory.model_validate(item) for item in data]
    except ValidationError as e:
        raise CatalogError(f"{source}: invalid quiz category: {e}") from e
