"""RECURRENCE-ID reconciliation for ICS normalization.

Events with a RECURRENCE-ID share their UID with a recurring master. Each such
exception is folded into its master as a suppressed occurrence (a skip date)
and is never emitted as a record of its own.
"""

import logging

from .datetime_utils import calendar_date
from .models import Diagnostic, DiagnosticKind, NormalizedEvent, RecurringEvent, SingleEvent

logger = logging.getLogger(__name__)


class RecurrenceReconciler:
    """Merges recurrence exceptions into the skip dates of their recurring master."""

    def reconcile(
        self,
        base_events: list[tuple[str, NormalizedEvent]],
        exceptions: list[tuple[str, NormalizedEvent]],
    ) -> tuple[list[NormalizedEvent], list[Diagnostic]]:
        """Fold recurrence exceptions into their base events.

        Args:
            base_events: (uid, event) pairs for sources without RECURRENCE-ID,
                in extraction order
            exceptions: (uid, event) pairs for sources with RECURRENCE-ID,
                in extraction order

        Returns:
            Tuple of (one base event per UID, in order of first appearance;
            diagnostics for every superseded base and every exception that
            could not be merged)
        """
        diagnostics: list[Diagnostic] = []

        # One record per UID: a later definition replaces an earlier one but
        # keeps the position where the UID first appeared
        bases_by_uid: dict[str, NormalizedEvent] = {}
        for uid, event in base_events:
            previous = bases_by_uid.get(uid)
            if previous is not None:
                logger.warning(
                    "Duplicate UID %s: base event %s replaced by %s", uid, previous.id, event.id
                )
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.DUPLICATE_UID,
                        uid=uid,
                        message="Base event replaced by a later event with the same UID",
                        detail=previous.id,
                    )
                )
            bases_by_uid[uid] = event

        merged_count = 0

        for uid, exception in exceptions:
            base = bases_by_uid.get(uid)
            if base is None:
                logger.debug("Dropping recurrence exception %s: no base event", uid)
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.ORPHAN_EXCEPTION,
                        uid=uid,
                        message="Recurrence exception has no base event",
                        detail=exception.id,
                    )
                )
                continue

            if not isinstance(base, RecurringEvent) or not isinstance(exception, SingleEvent):
                logger.warning(
                    "Recurrence exception was recurring or base event was not recurring: "
                    "base=%s exception=%s",
                    base.id,
                    exception.id,
                )
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.MERGE_INVALID,
                        uid=uid,
                        message="Recurrence exception was recurring or base event was not recurring",
                        detail=exception.id,
                    )
                )
                continue

            if base.add_skip_date(calendar_date(exception.date)):
                merged_count += 1

        if merged_count:
            logger.debug("Merged %d recurrence exceptions into skip dates", merged_count)

        return list(bases_by_uid.values()), diagnostics
