"""
Loading provider extractions from disk.

The validator itself never touches files; this helper exists for the demo
entry point and for replaying saved provider outputs.
"""

from __future__ import annotations

import json
from pathlib import Path

from .exceptions import ExtractionLoadError
from .models import ExtractedData


def load_extraction(path: str | Path) -> ExtractedData:
    """Read one provider's JSON output into an ExtractedData.

    Raises:
        ExtractionLoadError: if the file is missing, not JSON, or not an object.
    """
    resolved = Path(path)

    try:
        with resolved.open(encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ExtractionLoadError(
            f"Cannot read extraction file '{resolved}': {e}",
            details={"path": str(resolved)},
        ) from e
    except json.JSONDecodeError as e:
        raise ExtractionLoadError(
            f"Extraction file '{resolved}' is not valid JSON: {e.msg} (line {e.lineno})",
            details={"path": str(resolved), "line": e.lineno},
        ) from e

    if not isinstance(data, dict):
        raise ExtractionLoadError(
            f"Extraction file '{resolved}' must contain a JSON object, "
            f"got {type(data).__name__}",
            details={"path": str(resolved)},
        )

    return ExtractedData.model_validate(data)
