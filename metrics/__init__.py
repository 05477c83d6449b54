"""Meter models, registry and bulk record encoding"""
from .models import (
    Counter,
    DistributionSummary,
    FunctionCounter,
    FunctionTimer,
    Gauge,
    GenericMeter,
    LongTaskTimer,
    TimeGauge,
    Timer,
)
from .registry import MeterRegistry

__all__ = [
    'Counter',
    'DistributionSummary',
    'FunctionCounter',
    'FunctionTimer',
    'Gauge',
    'GenericMeter',
    'LongTaskTimer',
    'TimeGauge',
    'Timer',
    'MeterRegistry'
]
