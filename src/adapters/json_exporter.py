"""JSON export of the collections view.

Why JSON:
- Interoperability with storefront builds and other pipelines.
- Lets a render be persisted without depending on any markup layer.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import CollectionsPage


def export_page_json(*, page: CollectionsPage, output_path: Path) -> Path:
    """Export a `CollectionsPage` as UTF-8 JSON with stable formatting."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = page.model_dump(mode="json")
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
