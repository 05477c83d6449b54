"""Bulk API payload construction"""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List
from ..encoder import RecordEncoder
from ..models import Meter


@dataclass(frozen=True)
class BulkPayload:
    """Newline-delimited action/document pairs for one batch"""
    body: str
    index_name: str
    record_count: int
    meter_count: int

    def encode(self) -> bytes:
        return self.body.encode("utf-8")


class BulkPayloadBuilder:
    """Wraps encoded records in bulk ``index`` actions"""

    def __init__(self, index: str, index_date_format: str, encoder: RecordEncoder):
        self.index = index
        self.index_date_format = index_date_format
        self.encoder = encoder

    def index_name(self, wall_time: int) -> str:
        """Dated index name, e.g. metrics-2024-03 for the default pattern"""
        instant = datetime.fromtimestamp(wall_time / 1000, tz=timezone.utc)
        return f"{self.index}-{instant.strftime(self.index_date_format)}"

    @staticmethod
    def action_line(index_name: str) -> str:
        return json.dumps({"index": {"_index": index_name, "_type": "doc"}}, separators=(",", ":"))

    def build(self, batch: List[Meter], wall_time: int) -> BulkPayload:
        """Build the payload for a batch; the index name is shared by every record"""
        index_name = self.index_name(wall_time)
        action = self.action_line(index_name)

        lines = []
        record_count = 0
        for meter in batch:
            for record in self.encoder.encode(meter, wall_time):
                lines.append(action)
                lines.append(record.to_json())
                record_count += 1

        body = "".join(line + "\n" for line in lines)
        return BulkPayload(
            body=body,
            index_name=index_name,
            record_count=record_count,
            meter_count=len(batch),
        )
