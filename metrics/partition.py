"""Splits the meter collection into bounded batches"""
from typing import Iterable, Iterator, List
from .models import Meter


def partition(meters: Iterable[Meter], batch_size: int) -> Iterator[List[Meter]]:
    """Yield consecutive batches of at most ``batch_size`` meters, in order"""
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    batch: List[Meter] = []
    for meter in meters:
        batch.append(meter)
        if len(batch) >= batch_size:
            yield batch
            batch = []

    if batch:
        yield batch
