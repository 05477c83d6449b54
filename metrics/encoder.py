"""Encodes meters into flat bulk document records"""
from typing import Iterator
from .formatting import decimal_or_whole
from .models import (
    Counter,
    DistributionSummary,
    FunctionCounter,
    FunctionTimer,
    Gauge,
    GenericMeter,
    HistogramSnapshot,
    LongTaskTimer,
    Meter,
    TimeGauge,
    TimeUnit,
    Timer,
)
from .records import Record


class UnsupportedMeterError(TypeError):
    """Raised for objects that are not one of the known meter shapes"""


class RecordEncoder:
    """Maps one meter and a wall-clock time to one or more records.

    Timer values are converted from the meter's own time unit into
    ``base_time_unit``; distribution summaries are written as-is. Encoding is
    deterministic, so re-encoding a meter means calling :meth:`encode` again.
    """

    def __init__(self, timestamp_field_name: str = "@timestamp",
                 base_time_unit: TimeUnit = TimeUnit.MILLISECONDS):
        self.timestamp_field_name = timestamp_field_name
        self.base_time_unit = base_time_unit

    def encode(self, meter: Meter, wall_time: int) -> Iterator[Record]:
        """Lazily yield the records for a meter"""
        # TimeGauge is checked before Gauge so its value gets converted
        if isinstance(meter, TimeGauge):
            yield self._start(meter, wall_time).with_field(
                "count", meter.time_unit.convert(meter.value, self.base_time_unit))
        elif isinstance(meter, Gauge):
            yield self._start(meter, wall_time).with_field("count", meter.value)
        elif isinstance(meter, (Counter, FunctionCounter)):
            yield self._start(meter, wall_time).with_field("count", meter.count)
        elif isinstance(meter, Timer):
            yield from self._write_timer(meter, wall_time)
        elif isinstance(meter, FunctionTimer):
            yield (self._start(meter, wall_time)
                   .with_field("count", meter.count)
                   .with_field("sum", meter.total(self.base_time_unit))
                   .with_field("mean", meter.mean(self.base_time_unit)))
        elif isinstance(meter, DistributionSummary):
            yield from self._write_summary(meter, wall_time)
        elif isinstance(meter, LongTaskTimer):
            yield (self._start(meter, wall_time)
                   .with_field("activeTasks", meter.active_tasks)
                   .with_field("duration", meter.time_unit.convert(meter.duration, self.base_time_unit)))
        elif isinstance(meter, GenericMeter):
            record = self._start(meter, wall_time)
            for measurement in meter.measure():
                record = record.with_field(measurement.statistic.tag_value_representation, measurement.value)
            yield record
        else:
            raise UnsupportedMeterError(f"Unsupported meter type: {type(meter).__name__}")

    def _start(self, meter: Meter, wall_time: int) -> Record:
        return Record.start(self.timestamp_field_name, meter.id.name, meter.id.type.value, wall_time)

    def _derived(self, name: str, wall_time: int) -> Record:
        return Record.start(self.timestamp_field_name, name, "gauge", wall_time)

    def _write_timer(self, timer: Timer, wall_time: int) -> Iterator[Record]:
        unit = timer.time_unit
        base = self.base_time_unit
        snap = timer.snapshot
        yield (self._start(timer, wall_time)
               .with_field("count", snap.count)
               .with_field("sum", unit.convert(snap.total, base))
               .with_field("mean", unit.convert(snap.mean, base))
               .with_field("max", unit.convert(snap.max, base)))
        yield from self._write_distribution(
            timer.id.name, snap, wall_time, lambda value: unit.convert(value, base))

    def _write_summary(self, summary: DistributionSummary, wall_time: int) -> Iterator[Record]:
        snap = summary.snapshot
        yield (self._start(summary, wall_time)
               .with_field("count", snap.count)
               .with_field("sum", snap.total)
               .with_field("mean", snap.mean)
               .with_field("max", snap.max))
        yield from self._write_distribution(summary.id.name, snap, wall_time, lambda value: value)

    def _write_distribution(self, meter_name: str, snap: HistogramSnapshot, wall_time: int,
                            scale) -> Iterator[Record]:
        """Percentile and histogram bucket records, one per snapshot entry"""
        percentile_name = f"{meter_name}.percentile"
        for value_at_percentile in snap.percentile_values:
            yield (self._derived(percentile_name, wall_time)
                   .with_field("phi", decimal_or_whole(value_at_percentile.percentile))
                   .with_field("value", scale(value_at_percentile.value)))

        histogram_name = f"{meter_name}.histogram"
        for count_at_bucket in snap.histogram_counts:
            yield (self._derived(histogram_name, wall_time)
                   .with_field("le", decimal_or_whole(scale(count_at_bucket.bucket)))
                   .with_field("value", count_at_bucket.count))
