"""Flat bulk document records"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union
from .formatting import decimal_or_nan, iso_timestamp


FieldValue = Union[float, int, str]


@dataclass(frozen=True)
class Record:
    """Ordered, immutable list of document fields.

    Every record starts with the timestamp, ``name`` and ``type`` fields;
    fields added with :meth:`with_field` follow in call order.
    """
    fields: Tuple[Tuple[str, FieldValue], ...]

    @classmethod
    def start(cls, timestamp_field: str, name: str, meter_type: str, wall_time: int) -> "Record":
        return cls((
            (timestamp_field, iso_timestamp(wall_time)),
            ("name", name),
            ("type", meter_type),
        ))

    def with_field(self, name: str, value: FieldValue) -> "Record":
        return Record(self.fields + ((name, value),))

    @property
    def name(self) -> str:
        return self.fields[1][1]

    @property
    def type(self) -> str:
        return self.fields[2][1]

    def field_names(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.fields)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.fields)

    def to_json(self) -> str:
        """Render as a single-line JSON object, preserving field order"""
        parts = []
        for key, value in self.fields:
            if isinstance(value, str):
                rendered = json.dumps(value, ensure_ascii=False)
            else:
                rendered = decimal_or_nan(value)
            parts.append(f"{json.dumps(key, ensure_ascii=False)}:{rendered}")
        return "{" + ",".join(parts) + "}"
