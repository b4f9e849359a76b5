"""Export JSON schemas for the public API bodies."""

import json
from pathlib import Path

from pydantic import BaseModel, TypeAdapter

from backend.smartcite.models import (
    CitationResult,
    FollowupRequest,
    FollowupResponse,
    GenerateCitationsRequest,
    UploadResponse,
    UploadTextRequest,
)

SCHEMA_MODELS: list[type[BaseModel]] = [
    UploadTextRequest,
    UploadResponse,
    FollowupRequest,
    FollowupResponse,
    GenerateCitationsRequest,
    CitationResult,
]


def build_schemas() -> dict[str, dict]:
    """Build wire-format (by alias) schemas keyed by file stem."""
    schemas = {model.__name__: model.model_json_schema(by_alias=True) for model in SCHEMA_MODELS}
    schemas["GenerateCitationsResponse"] = TypeAdapter(list[CitationResult]).json_schema(
        by_alias=True
    )
    return schemas


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for name, schema in build_schemas().items():
        path = schemas_dir / f"{name}.schema.json"
        with open(path, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Exported {name} schema to {path}")


if __name__ == "__main__":
    main()
