"""Meter registry read by the exporter on every publish"""
import threading
from typing import Dict, List, Optional
from .models import Meter, MeterId
from logging_config import get_logger


logger = get_logger(__name__)


class MeterRegistry:
    """Central registry for all meters, in registration order"""

    def __init__(self):
        self._meters: Dict[MeterId, Meter] = {}
        self._lock = threading.Lock()

    def register(self, meter: Meter) -> Meter:
        """Register a meter, replacing any meter with the same id in place"""
        with self._lock:
            replaced = meter.id in self._meters
            self._meters[meter.id] = meter

        if not replaced:
            logger.debug("Registered meter", meter=meter.id.name, meter_type=meter.id.type.value)
        return meter

    def remove(self, meter_id: MeterId) -> Optional[Meter]:
        """Remove a meter by id"""
        with self._lock:
            return self._meters.pop(meter_id, None)

    def get_meter(self, name: str) -> Optional[Meter]:
        """Get the first meter registered under a name"""
        with self._lock:
            for meter_id, meter in self._meters.items():
                if meter_id.name == name:
                    return meter
        return None

    def list_meters(self) -> List[str]:
        """List all registered meter names"""
        with self._lock:
            return [meter_id.name for meter_id in self._meters]

    def get_meters(self) -> List[Meter]:
        """Snapshot of the current meters in registration order"""
        with self._lock:
            return list(self._meters.values())

    def clear(self):
        with self._lock:
            self._meters.clear()

    def __len__(self) -> int:
        return len(self._meters)
