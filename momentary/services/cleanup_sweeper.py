"""Cleanup Sweeper — nulls every field of the records a task touched, then hints reclamation.

Invariants:
    - Shallow: one level of fields per record, nested objects are replaced not visited
    - Keys are never deleted; non-record values are ignored
    - Immutable records are skipped and counted, never raise
    - A record that rejects any field is counted as skipped, its other fields stay nulled
    - Exactly one reclamation hint per sweep() call, after all records are nulled
    - The hint is best-effort: a failing hint is logged, never raised

Design Decisions:
    - Reclamation hint injected: tests count hints instead of watching the gc
    - SweepReport returned for logging; it holds counts only, never values
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from momentary.core.runtime_protocols import ReclamationHint
from momentary.core.sanitize import RecordKind, classify_record, null_record_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepReport:
    records_swept: int = 0
    fields_nulled: int = 0
    records_skipped: int = 0


class CleanupSweeper:
    """Shallow sanitizer shared by nothing — one per task."""

    def __init__(self, reclamation_hint: ReclamationHint):
        self._reclamation_hint = reclamation_hint

    def sweep(self, records: Sequence[object]) -> SweepReport:
        swept = nulled = skipped = 0
        for record in records:
            kind = classify_record(record)
            if kind is RecordKind.IMMUTABLE:
                skipped += 1
                continue
            if kind is RecordKind.NOT_A_RECORD:
                continue
            outcome = null_record_fields(record)
            nulled += outcome.nulled
            if outcome.rejected:
                skipped += 1
            else:
                swept += 1
        try:
            self._reclamation_hint()
        except Exception:
            logger.warning("Reclamation hint failed", exc_info=True)
        report = SweepReport(swept, nulled, skipped)
        logger.debug(
            f"Swept {swept} record(s)",
            extra={"fields_nulled": nulled, "records_skipped": skipped},
        )
        return report
