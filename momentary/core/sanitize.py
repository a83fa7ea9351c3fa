"""Record Sanitization — shallow field nulling for mutable records.

Invariants:
    - Shallow only: nested objects are replaced by None, never descended into
    - Keys are never deleted: a nulled dict keeps its key set
    - Non-record values (numbers, strings, lists, tuples) are left untouched
    - Immutable records (frozen models, frozen dataclasses, mapping proxies) are skipped
    - Slot-only objects are records: their set slots are nulled like attributes
    - A field that refuses None never aborts the pass: it is counted as rejected

Design Decisions:
    - Returns counts instead of raising on skips: sanitization is best-effort,
      the caller decides whether a skip matters
"""

import dataclasses
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

from pydantic import BaseModel, ValidationError

_NON_RECORD_TYPES = (str, bytes, bytearray, int, float, complex, bool, list, tuple, set, frozenset)


class RecordKind(str, Enum):
    """How a value is treated by null_record_fields."""
    MAPPING = "mapping"
    OBJECT = "object"
    IMMUTABLE = "immutable"
    NOT_A_RECORD = "not_a_record"


class NullingOutcome(NamedTuple):
    nulled: int
    rejected: int = 0


def _slot_names(cls: type) -> list[str]:
    names = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(s for s in slots if s not in ("__dict__", "__weakref__"))
    return names


def classify_record(value: object) -> RecordKind:
    if value is None or isinstance(value, _NON_RECORD_TYPES) or isinstance(value, type):
        return RecordKind.NOT_A_RECORD
    if isinstance(value, MappingProxyType):
        return RecordKind.IMMUTABLE
    if isinstance(value, dict):
        return RecordKind.MAPPING
    if isinstance(value, BaseModel):
        if value.model_config.get("frozen"):
            return RecordKind.IMMUTABLE
        return RecordKind.OBJECT
    if dataclasses.is_dataclass(value):
        params = getattr(value, "__dataclass_params__", None)
        if params is not None and params.frozen:
            return RecordKind.IMMUTABLE
        return RecordKind.OBJECT
    if hasattr(value, "__dict__") or _slot_names(type(value)):
        return RecordKind.OBJECT
    return RecordKind.NOT_A_RECORD


def _object_field_names(record: object) -> list[str]:
    if isinstance(record, BaseModel):
        return list(type(record).model_fields)
    if dataclasses.is_dataclass(record):
        return [f.name for f in dataclasses.fields(record)]
    names = list(getattr(record, "__dict__", {}))
    # unset slots raise AttributeError on read; leave them alone
    names.extend(
        name for name in _slot_names(type(record))
        if name not in names and hasattr(record, name)
    )
    return names


def null_record_fields(record: object) -> NullingOutcome:
    """Set every own field of `record` to None.

    Fields the record refuses (validated assignment, read-only slots) keep their
    value and are counted as rejected.
    """
    kind = classify_record(record)
    if kind is RecordKind.MAPPING:
        for key in list(record):
            record[key] = None
        return NullingOutcome(len(record))
    if kind is RecordKind.OBJECT:
        nulled = rejected = 0
        for name in _object_field_names(record):
            try:
                setattr(record, name, None)
            except (ValidationError, AttributeError, TypeError):
                rejected += 1
            else:
                nulled += 1
        return NullingOutcome(nulled, rejected)
    return NullingOutcome(0)
