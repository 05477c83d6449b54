"""Base exporter interface"""
import abc
from config import Config


class BaseExporter(abc.ABC):
    """Abstract base class for metric exporters"""

    def __init__(self, config: Config):
        self.config = config

    @abc.abstractmethod
    def publish(self) -> None:
        """Export the current meters; invoked once per step by the scheduler"""
        pass

    @abc.abstractmethod
    def is_healthy(self) -> bool:
        """Check if the last publish succeeded"""
        pass

    def shutdown(self) -> None:
        """Cleanup the exporter"""
        pass
