# backend/birdsurvey/services/locations/seed.py
"""Load the survey site list into the ``locations`` table.

CSV header: ``id,site_code,site_name`` (``id`` may be blank). Rows are
matched on ``site_code``; existing sites get their name (and id, when given)
updated, unknown ones are inserted.
"""

import csv
from pathlib import Path
from typing import Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from birdsurvey.errors import SurveyValidationError
from birdsurvey.logging_utils import get_logger
from birdsurvey.models.location import Location

LOGGER = get_logger(__name__)

REQUIRED_COLUMNS = ("site_code", "site_name")


def read_locations_csv(path: Path) -> list[dict]:
    # Excel 保存の BOM 付き CSV も読めるように utf-8-sig
    with Path(path).open(newline="", encoding="utf-8-sig") as fh:
        reader = csv.DictReader(fh)
        missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise SurveyValidationError(f"{path}: missing column(s) {', '.join(missing)}")
        return [row for row in reader if any((v or "").strip() for v in row.values())]


def _parse_id(raw: Optional[str], line: int) -> Optional[int]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise SurveyValidationError(f"row {line}: id must be an integer, got {raw!r}")


def seed_locations(db: Session, rows: Iterable[Mapping[str, str]]) -> tuple[int, int]:
    """Upsert locations by ``site_code``. Returns ``(inserted, updated)``."""
    existing = {loc.site_code: loc for loc in db.query(Location).all()}
    inserted = updated = 0
    for line, row in enumerate(rows, start=2):
        code = (row.get("site_code") or "").strip()
        name = (row.get("site_name") or "").strip()
        if not code or not name:
            raise SurveyValidationError(f"row {line}: site_code and site_name are required")
        location_id = _parse_id(row.get("id"), line)

        loc = existing.get(code)
        if loc is None:
            loc = Location(id=location_id, site_code=code, site_name=name)
            db.add(loc)
            existing[code] = loc
            inserted += 1
            continue
        if location_id is not None:
            loc.id = location_id
        loc.site_name = name
        updated += 1

    db.commit()
    LOGGER.info("Seeded locations: %s inserted, %s updated", inserted, updated)
    return inserted, updated
