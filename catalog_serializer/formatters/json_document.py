"""JSON document formatter.

WHY: API clients that prefer JSON get the same records as XML clients,
as an array of single-key wrapper objects (``[{"song": {...}}, ...]``).
JSON has no envelope, so the output mode's header/footer never apply.

HOW: Each EntityRecord becomes ``{kind: {"id": ..., **fields}}``.
References and tag aggregates turn into small objects. The finished
array is validated against catalog_document.schema.json before it is
returned, the same way a malformed document would be caught anywhere
else in the pipeline.

RULES:
- Pretty-printed (indent=2), UTF-8, non-ASCII kept as-is
- Key order follows the record's field order, with "id" first
- None fields are omitted
- Empty input renders "[]"
- Schema validation runs when CATALOG_VALIDATE_JSON is true; raises
  jsonschema.ValidationError on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import jsonschema

from catalog_serializer import config
from catalog_serializer.core.ir import EntityRecord, Ref, TagAggregate
from catalog_serializer.formatters.base import BaseFormatter, FormatterOutput

SCHEMA_PATH = Path(__file__).resolve().parent / "catalog_document.schema.json"

_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def get_schema() -> Dict[str, Any]:
    """Load the bundled document schema, cached after the first call."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _to_json(value: Any) -> Any:
    if isinstance(value, Ref):
        return {"id": value.id, "name": value.name}
    if isinstance(value, TagAggregate):
        return {"id": value.id, "name": value.name, "count": value.count}
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    return value


def record_to_dict(record: EntityRecord) -> Dict[str, Any]:
    body: Dict[str, Any] = {"id": record.id}
    for key, value in record.fields.items():
        if value is None:
            continue
        body[key] = _to_json(value)
    return {record.kind: body}


def error_document(code: int, message: str) -> str:
    """The JSON error envelope ``{"error": {"code": ..., "message": ...}}``."""
    return dumps({"error": {"code": code, "message": message}})


class JsonDocumentFormatter(BaseFormatter):
    """Formatter that renders records as a pretty-printed JSON array."""

    def __init__(self, validate: Optional[bool] = None) -> None:
        self.validate = config.VALIDATE_JSON if validate is None else validate

    @property
    def name(self) -> str:
        return "JSON"

    def render(
        self,
        records: Sequence[EntityRecord],
        container: Optional[str] = None,
        title: Optional[str] = None,
    ) -> FormatterOutput:
        document: List[Dict[str, Any]] = [record_to_dict(r) for r in records]
        if self.validate:
            jsonschema.validate(instance=document, schema=get_schema())
        return FormatterOutput(suffix=".json", content=dumps(document), media_type="application/json")

    def render_single(self, key: str, value: str = "") -> FormatterOutput:
        return FormatterOutput(suffix=".json", content=dumps({key: value}), media_type="application/json")
