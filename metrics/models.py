"""Meter data models read from the registry at export time"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple, Union


class MeterType(Enum):
    """Declared meter types"""
    COUNTER = "counter"
    GAUGE = "gauge"
    TIMER = "timer"
    DISTRIBUTION_SUMMARY = "distribution_summary"
    LONG_TASK_TIMER = "long_task_timer"
    OTHER = "other"


class Statistic(Enum):
    """Measurement statistics; the value is the tag representation"""
    COUNT = "count"
    TOTAL = "total"
    TOTAL_TIME = "totalTime"
    MAX = "max"
    VALUE = "value"
    UNKNOWN = "unknown"
    ACTIVE_TASKS = "activeTasks"
    DURATION = "duration"

    @property
    def tag_value_representation(self) -> str:
        return self.value


class TimeUnit(Enum):
    """Time units, valued in nanoseconds"""
    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60 * 1_000_000_000
    HOURS = 3_600 * 1_000_000_000
    DAYS = 86_400 * 1_000_000_000

    def convert(self, value: float, to_unit: "TimeUnit") -> float:
        """Convert a value expressed in this unit into another unit"""
        if self is to_unit or math.isnan(value):
            return value
        return value * self.value / to_unit.value


@dataclass(frozen=True)
class MeterId:
    """Stable meter identity"""
    name: str
    type: MeterType
    tags: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Measurement:
    """Single statistic reading of a generic meter"""
    statistic: Statistic
    value: float


@dataclass(frozen=True)
class ValueAtPercentile:
    percentile: float
    value: float


@dataclass(frozen=True)
class CountAtBucket:
    """Cumulative count of samples at or below the bucket bound"""
    bucket: float
    count: float


@dataclass(frozen=True)
class HistogramSnapshot:
    """Statistical snapshot precomputed by the registry"""
    count: int
    total: float
    max: float
    percentile_values: Tuple[ValueAtPercentile, ...] = ()
    histogram_counts: Tuple[CountAtBucket, ...] = ()

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass(frozen=True)
class Counter:
    name: str
    count: float
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, MeterType.COUNTER, tuple(sorted(self.tags.items())))


@dataclass(frozen=True)
class FunctionCounter:
    """Counter whose count is sampled from a function by the registry"""
    name: str
    count: float
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, MeterType.COUNTER, tuple(sorted(self.tags.items())))


@dataclass(frozen=True)
class Gauge:
    name: str
    value: float
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, MeterType.GAUGE, tuple(sorted(self.tags.items())))


@dataclass(frozen=True)
class TimeGauge:
    """Gauge reporting a duration in ``time_unit``"""
    name: str
    value: float
    time_unit: TimeUnit = TimeUnit.SECONDS
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, MeterType.GAUGE, tuple(sorted(self.tags.items())))


@dataclass(frozen=True)
class Timer:
    """Timer with its snapshot values expressed in ``time_unit``"""
    name: str
    snapshot: HistogramSnapshot
    time_unit: TimeUnit = TimeUnit.NANOSECONDS
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, MeterType.TIMER, tuple(sorted(self.tags.items())))


@dataclass(frozen=True)
class FunctionTimer:
    name: str
    count: float
    total_time: float
    time_unit: TimeUnit = TimeUnit.NANOSECONDS
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, MeterType.TIMER, tuple(sorted(self.tags.items())))

    def total(self, unit: TimeUnit) -> float:
        return self.time_unit.convert(self.total_time, unit)

    def mean(self, unit: TimeUnit) -> float:
        if self.count == 0:
            return 0.0
        return self.total(unit) / self.count


@dataclass(frozen=True)
class DistributionSummary:
    name: str
    snapshot: HistogramSnapshot
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, MeterType.DISTRIBUTION_SUMMARY, tuple(sorted(self.tags.items())))


@dataclass(frozen=True)
class LongTaskTimer:
    name: str
    active_tasks: int
    duration: float
    time_unit: TimeUnit = TimeUnit.NANOSECONDS
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, MeterType.LONG_TASK_TIMER, tuple(sorted(self.tags.items())))


@dataclass(frozen=True)
class GenericMeter:
    """Meter of any declared type exposing raw measurements"""
    name: str
    measurements: List[Measurement]
    meter_type: MeterType = MeterType.OTHER
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> MeterId:
        return MeterId(self.name, self.meter_type, tuple(sorted(self.tags.items())))

    def measure(self) -> List[Measurement]:
        return list(self.measurements)


Meter = Union[
    Counter,
    FunctionCounter,
    Gauge,
    TimeGauge,
    Timer,
    FunctionTimer,
    DistributionSummary,
    LongTaskTimer,
    GenericMeter,
]
