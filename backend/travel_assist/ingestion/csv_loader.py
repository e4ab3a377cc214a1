"""
CSV ingestion for the package catalog and the hospital directory.

Each row is parsed and validated into a typed, frozen record. Malformed
rows (discount outside 0-100, negative price, unknown accessibility level,
end date before start date, unparsable numbers, duplicate ids) are never
clamped:
  - lenient mode (default): the row is rejected, logged, and skipped
  - strict mode: the first bad row raises IngestionError
A file that cannot be decoded or tokenized raises IngestionError in
either mode.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple, Type, TypeVar, Union
import csv
import logging

from pydantic import BaseModel, ValidationError

from travel_assist.catalog.errors import IngestionError
from travel_assist.catalog.models import Hospital, Package
from travel_assist.core.config import settings
from travel_assist.core.monitoring import track_performance

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _clean_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Strip cells and drop empty ones so model defaults apply."""
    cleaned = {}
    for key, value in row.items():
        if key is None:
            # DictReader puts surplus cells under None
            continue
        key = key.strip()
        if isinstance(value, str):
            value = value.strip()
        if value in ("", None):
            continue
        cleaned[key] = value
    return cleaned


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "row"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def _read_rows(path: Path) -> Iterator[Tuple[int, Dict[str, Any]]]:
    if not path.is_file():
        raise IngestionError(f"Catalog source not found: {path}")
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        try:
            for row in reader:
                cleaned = _clean_row(row)
                if not cleaned:
                    continue
                yield reader.line_num, cleaned
        except (UnicodeDecodeError, csv.Error) as e:
            # Raised in lenient mode too: no later row can be trusted
            raise IngestionError(
                f"Unreadable catalog source {path.name}: {e}", line=reader.line_num or None
            ) from e


def _load(
    path: Union[str, Path],
    model: Type[RecordT],
    strict: Optional[bool],
) -> Tuple[RecordT, ...]:
    strict = settings.ingestion_strict if strict is None else strict
    path = Path(path)

    records = []
    seen_ids = set()
    rejected = 0

    for line, row in _read_rows(path):
        try:
            record = model.model_validate(row)
            if record.id in seen_ids:
                raise IngestionError(f"duplicate id {record.id}", line=line)
        except ValidationError as e:
            if strict:
                raise IngestionError(_describe(e), line=line) from e
            rejected += 1
            logger.warning(
                f"Rejected {model.__name__} row at {path.name}:{line}: {_describe(e)}",
                extra={"csv_line": line},
            )
            continue
        except IngestionError as e:
            if strict:
                raise
            rejected += 1
            logger.warning(f"Rejected {model.__name__} row at {path.name}: {e}", extra={"csv_line": line})
            continue

        seen_ids.add(record.id)
        records.append(record)

    logger.info(f"Loaded {len(records)} {model.__name__} records from {path.name} ({rejected} rejected)")
    return tuple(records)


@track_performance("load_packages")
def load_packages(path: Union[str, Path], strict: Optional[bool] = None) -> Tuple[Package, ...]:
    """Parse travel_packages.csv into an immutable tuple of Package records."""
    return _load(path, Package, strict)


@track_performance("load_hospitals")
def load_hospitals(path: Union[str, Path], strict: Optional[bool] = None) -> Tuple[Hospital, ...]:
    """Parse travel_hospitals.csv into an immutable tuple of Hospital records."""
    return _load(path, Hospital, strict)
