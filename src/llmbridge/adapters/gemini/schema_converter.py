"""JSON Schema to Gemini responseSchema conversion"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional

# Fields the Gemini OpenAPI-subset Schema object accepts
GEMINI_SCHEMA_FIELDS = frozenset(
    {
        "type",
        "format",
        "title",
        "description",
        "nullable",
        "enum",
        "items",
        "minItems",
        "maxItems",
        "properties",
        "required",
        "propertyOrdering",
        "anyOf",
        "minimum",
        "maximum",
    }
)

MAX_DEPTH = 50


class GeminiSchemaConverter:
    """Convert JSON Schema to the Gemini Schema dialect

    Pipeline per node: resolve $ref against $defs, fold ``anyOf`` with a
    null branch into ``nullable``, expand type lists into ``anyOf``, drop
    ``enum`` from non-string types, drop unknown keywords and record
    ``propertyOrdering`` for objects.
    """

    def __init__(self, defs: Optional[Dict[str, Any]] = None) -> None:
        self.defs = defs or {}

    def convert(self, schema: Any, depth: int = 0) -> Any:
        if depth > MAX_DEPTH:
            raise ValueError(f"Schema nesting exceeds {MAX_DEPTH} levels")
        if isinstance(schema, list):
            return [self.convert(item, depth + 1) for item in schema]
        if not isinstance(schema, dict):
            return schema

        node = self._resolve_ref(schema)
        node = self._fold_nullable(node)
        node = self._expand_type_list(node)

        result: Dict[str, Any] = {}
        for key, value in node.items():
            if key not in GEMINI_SCHEMA_FIELDS:
                continue
            if key == "properties" and isinstance(value, dict):
                result[key] = {name: self.convert(sub, depth + 1) for name, sub in value.items()}
            elif key in ("items", "anyOf"):
                result[key] = self.convert(value, depth + 1)
            else:
                result[key] = copy.deepcopy(value)

        if "enum" in result and result.get("type") not in (None, "string"):
            result.pop("enum")
        if result.get("type") == "object" and result.get("properties"):
            result.setdefault("propertyOrdering", list(result["properties"]))
        return result

    def _resolve_ref(self, node: Dict[str, Any]) -> Dict[str, Any]:
        ref = node.get("$ref")
        if not isinstance(ref, str):
            return node
        name = ref.rsplit("/", 1)[-1]
        if name not in self.defs:
            raise ValueError(f"Reference {ref} not found in $defs")
        merged = dict(self.defs[name])
        merged.update({k: v for k, v in node.items() if k != "$ref"})
        return merged

    @staticmethod
    def _fold_nullable(node: Dict[str, Any]) -> Dict[str, Any]:
        branches = node.get("anyOf")
        if not isinstance(branches, list):
            return node
        non_null = [b for b in branches if not (isinstance(b, dict) and b.get("type") == "null")]
        if len(non_null) == len(branches):
            return node
        if len(non_null) == 1 and isinstance(non_null[0], dict):
            folded = {k: v for k, v in node.items() if k != "anyOf"}
            folded.update(non_null[0])
            folded["nullable"] = True
            return folded
        folded = dict(node)
        folded["anyOf"] = non_null
        folded["nullable"] = True
        return folded

    @staticmethod
    def _expand_type_list(node: Dict[str, Any]) -> Dict[str, Any]:
        types = node.get("type")
        if not isinstance(types, list):
            return node
        rest = {k: v for k, v in node.items() if k != "type"}
        concrete = [t for t in types if t != "null"]
        if len(concrete) < len(types):
            rest["nullable"] = True
        if len(concrete) == 1:
            rest["type"] = concrete[0]
            return rest
        rest["anyOf"] = [{"type": t} for t in concrete]
        return rest


def convert_json_schema_to_gemini(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a JSON Schema (with optional $defs) to a Gemini responseSchema"""
    defs = schema.get("$defs") or schema.get("definitions")
    return GeminiSchemaConverter(defs).convert(schema)
