"""
CSV import and export for the player roster.
"""

import csv
import io
from typing import Any, Dict, List, Optional

from app.models import Player, Gender, ErrorKind, OperationResult
from app.core.config import MIN_SKILL, MAX_SKILL
from app.core.logging_config import get_logger

logger = get_logger(__name__)

CSV_FIELDS = ["name", "gender", "skill"]


def validate_record(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Normalise one roster record.

    Returns:
        {name, gender, skill} with gender as a Gender and skill as an int,
        or None when the record is invalid
    """
    name = str(record.get("name") or "").strip()
    if not name:
        return None

    gender_value = str(record.get("gender") or "").strip()
    try:
        gender = Gender(gender_value)
    except ValueError:
        return None

    try:
        skill = int(str(record.get("skill")).strip())
    except (TypeError, ValueError):
        return None
    if not MIN_SKILL <= skill <= MAX_SKILL:
        return None

    return {"name": name, "gender": gender, "skill": skill}


def parse_roster_csv(text: str) -> OperationResult:
    """
    Parse CSV text with a name,gender,skill header.

    Invalid rows are dropped. The import only fails when no valid row is left.

    Returns:
        OperationResult holding {"records": [...], "skipped": int}
    """
    reader = csv.DictReader(io.StringIO(text.strip()))
    if not reader.fieldnames or not set(CSV_FIELDS).issubset(
        f.strip().lower() for f in reader.fieldnames
    ):
        return OperationResult.failure(
            ErrorKind.VALIDATION_FAILURE, f"CSV header must contain: {', '.join(CSV_FIELDS)}"
        )

    records = []
    skipped = 0
    for row in reader:
        normalised = {(k or "").strip().lower(): v for k, v in row.items()}
        record = validate_record(normalised)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.warning("Skipped %d invalid roster row(s)", skipped)

    if not records:
        return OperationResult.failure(ErrorKind.VALIDATION_FAILURE, "No valid players found in CSV")

    return OperationResult.ok({"records": records, "skipped": skipped})


def export_roster_csv(players: List[Player]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    for player in sorted(players, key=lambda p: p.name.lower()):
        writer.writerow({"name": player.name, "gender": player.gender.value, "skill": player.skill})
    return buffer.getvalue()
