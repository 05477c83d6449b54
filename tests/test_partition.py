"""Tests for batch partitioning"""
import math
import pytest

from metrics.models import Counter
from metrics.partition import partition


def make_meters(count):
    return [Counter(f"meter.{i}", i) for i in range(count)]


class TestPartition:
    """Test splitting meters into bounded batches"""

    @pytest.mark.parametrize("count,batch_size", [(1, 1), (10, 3), (9, 3), (5, 10), (10000, 999)])
    def test_batches_cover_input_in_order(self, count, batch_size):
        """Test batch count, sizes and ordering"""
        meters = make_meters(count)
        batches = list(partition(meters, batch_size))

        assert len(batches) == math.ceil(count / batch_size)
        assert all(len(batch) <= batch_size for batch in batches)
        assert all(len(batch) == batch_size for batch in batches[:-1])
        assert [m for batch in batches for m in batch] == meters

    def test_empty_input_yields_no_batches(self):
        """Test that an empty registry produces nothing to publish"""
        assert list(partition([], 100)) == []

    def test_last_batch_smaller(self):
        """Test the final batch holds the remainder"""
        batches = list(partition(make_meters(7), 3))

        assert [len(batch) for batch in batches] == [3, 3, 1]

    def test_accepts_iterators(self):
        """Test partitioning a one-shot iterator"""
        batches = list(partition(iter(make_meters(4)), 2))

        assert [len(batch) for batch in batches] == [2, 2]

    @pytest.mark.parametrize("batch_size", [0, -1])
    def test_invalid_batch_size(self, batch_size):
        """Test that a non-positive batch size is rejected"""
        with pytest.raises(ValueError):
            list(partition(make_meters(3), batch_size))
