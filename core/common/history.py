"""
Field history for tracked entities.

Every update of a tracked entity appends one change-log row per changed
field (old and new value as text). Reports read the log backwards to
recover what a field held at the end of a past year: the oldest change
made after that year still carries the value as it was, in its
`old_value`.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Sequence

from django.utils import timezone


@dataclass(frozen=True)
class FieldChange:
    updated_at: datetime
    old_value: str | None
    new_value: str | None

    @property
    def year(self) -> int:
        ts = self.updated_at
        if timezone.is_aware(ts):
            ts = timezone.localtime(ts)
        return ts.year


def as_text(value: Any) -> str | None:
    """
    Text form used by the change log, so stored values and log values
    compare equal.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return str(value)


def effective_value(current: Any, changes: Iterable[FieldChange], year: int) -> str | None:
    """
    Value of a field as of Dec 31 of `year`.

    Changes made during `year` itself stay applied; every change made
    after it is undone by taking the old value of the earliest one.
    """
    for change in sorted(changes, key=lambda c: c.updated_at):
        if change.year > year:
            return change.old_value
    return as_text(current)


class ChangeHistory:
    """
    Change log of many entities, grouped per (entity_id, field) and kept
    in chronological order.
    """

    def __init__(self, changes: dict[tuple[int, str], list[FieldChange]] | None = None):
        self._changes = {
            key: sorted(items, key=lambda c: c.updated_at)
            for key, items in (changes or {}).items()
        }

    @classmethod
    def load(cls, log_model, entity_ids: Iterable[int], fields: Sequence[str], entity_field: str = "employee_id"):
        ids = list(entity_ids)
        grouped: dict[tuple[int, str], list[FieldChange]] = defaultdict(list)
        if not ids:
            return cls(grouped)

        rows = (
            log_model.objects.filter(**{f"{entity_field}__in": ids, "changed_field__in": list(fields)})
            .order_by("updated_at", "id")
            .values_list(entity_field, "changed_field", "old_value", "new_value", "updated_at")
        )
        for entity_id, field, old, new, ts in rows:
            grouped[(entity_id, field)].append(FieldChange(updated_at=ts, old_value=old, new_value=new))
        return cls(grouped)

    def changes(self, entity_id: int, field: str) -> list[FieldChange]:
        return self._changes.get((entity_id, field), [])

    def resolve(self, entity_id: int, field: str, current: Any, year: int) -> str | None:
        return effective_value(current, self.changes(entity_id, field), year)


def diff_fields(before: dict[str, Any], after: dict[str, Any], fields: Sequence[str]) -> list[tuple[str, str | None, str | None]]:
    """
    [(field, old_text, new_text)] for each field present in `after` whose
    text form differs from `before`.
    """
    out = []
    for field in fields:
        if field not in after:
            continue
        old, new = as_text(before.get(field)), as_text(after[field])
        if old != new:
            out.append((field, old, new))
    return out


def record_changes(log_model, *, entity_field: str, entity_id: int, changes, null_as: str | None = None, at=None) -> list:
    """
    Appends one log row per (field, old, new). Call inside the same
    transaction as the entity write.
    """
    ts = at or timezone.now()
    rows = [
        log_model(
            **{entity_field: entity_id},
            changed_field=field,
            old_value=old if old is not None else null_as,
            new_value=new if new is not None else null_as,
            updated_at=ts,
        )
        for field, old, new in changes
    ]
    if rows:
        log_model.objects.bulk_create(rows)
    return rows
