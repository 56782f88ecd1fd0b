"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

This script builds the application and serializes its OpenAPI schema to the
interfaces/openapi.json file so that front-end clients and documentation tools
can consume a stable contract without running the server.

Usage:
    python -m task_api.generate_openapi [output_path]

Notes:
- The script ensures the 'tasks' and 'health' tags are present in the OpenAPI tags metadata.
- Default output path is relative to the working directory: interfaces/openapi.json
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

from fastapi import FastAPI

from .main import create_app, openapi_tags
from .repositories import InMemoryRepository
from .settings import Settings

DEFAULT_OUTPUT = os.path.join("interfaces", "openapi.json")


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema contains the expected tags metadata. This does not
    override existing tag definitions unless missing.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def build_openapi_schema(app: Optional[FastAPI] = None) -> Dict[str, Any]:
    """Return the OpenAPI schema of the given (or a fresh, storage-free) application."""
    if app is None:
        app = create_app(Settings(seed_on_startup=False), repository=InMemoryRepository())
    schema = app.openapi()
    _ensure_tags(schema)
    return schema


# PUBLIC_INTERFACE
def generate_openapi(out_path: str = DEFAULT_OUTPUT) -> str:
    """Generate the OpenAPI schema file and return the written file path."""
    schema = build_openapi_schema()
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return out_path


def main() -> None:
    out_path = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_OUTPUT)
    print(f"Wrote OpenAPI schema to: {out_path}")


if __name__ == "__main__":
    main()
