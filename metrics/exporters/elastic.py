"""Elasticsearch bulk exporter"""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import httpx
from .base import BaseExporter
from .bootstrap import IndexTemplateBootstrap
from .bulk import BulkPayloadBuilder
from .transport import (
    BulkOutcome,
    HttpTransport,
    NoReachableEndpointError,
    TransportIOError,
    classify_bulk_response,
)
from metrics.encoder import RecordEncoder, UnsupportedMeterError
from metrics.models import Meter, TimeUnit
from metrics.partition import partition
from metrics.registry import MeterRegistry
from config import Config
from logging_config import get_logger, log_publish_cycle


logger = get_logger(__name__)


class PublishOutcome(Enum):
    SUCCESS = "success"
    NO_REACHABLE_ENDPOINT = "no_reachable_endpoint"
    IO_ERROR = "io_error"
    SERIALIZATION_ERROR = "serialization_error"
    TRANSPORT_FAILURE = "transport_failure"
    ITEM_FAILURE = "item_failure"


@dataclass
class PublishReport:
    """Summary of one publish cycle"""
    outcome: PublishOutcome = PublishOutcome.SUCCESS
    batches_sent: int = 0
    meters_sent: int = 0


def wall_clock_millis() -> int:
    return int(time.time() * 1000)


class ElasticExporter(BaseExporter):
    """Publishes registry meters to Elasticsearch through the bulk API.

    Each publish runs the index template bootstrap (once), splits the meters
    into batches and posts them one after the other. The first batch that
    fails ends the cycle; the remaining batches wait for the next step.
    Failures are logged, never raised.
    """

    def __init__(self,
                 config: Config,
                 registry: MeterRegistry,
                 transport: Optional[httpx.BaseTransport] = None,
                 clock: Callable[[], int] = wall_clock_millis):
        super().__init__(config)
        self.registry = registry
        self.clock = clock
        self.transport = HttpTransport(
            config.hosts,
            connect_timeout=config.elastic_connect_timeout,
            read_timeout=config.elastic_read_timeout,
            user_name=config.elastic_user_name,
            password=config.elastic_password,
            transport=transport,
        )
        self.bootstrap = IndexTemplateBootstrap(
            self.transport,
            index=config.elastic_index,
            enabled=config.elastic_auto_create_index,
        )
        self.payload_builder = BulkPayloadBuilder(
            config.elastic_index,
            config.elastic_index_date_format,
            RecordEncoder(config.elastic_timestamp_field_name, TimeUnit.MILLISECONDS),
        )
        self.last_cycle: Optional[PublishReport] = None

    def publish(self) -> None:
        start_time = time.time()
        self.bootstrap.ensure_template()

        report = PublishReport()
        for batch in partition(self.registry.get_meters(), self.config.elastic_batch_size):
            outcome = self._publish_batch(batch)
            if outcome is not PublishOutcome.SUCCESS:
                # don't try another batch
                report.outcome = outcome
                break
            report.batches_sent += 1
            report.meters_sent += len(batch)

        self.last_cycle = report
        log_publish_cycle(logger, report.meters_sent, report.batches_sent,
                          time.time() - start_time, report.outcome.value)

    def _publish_batch(self, batch: List[Meter]) -> PublishOutcome:
        wall_time = self.clock()
        try:
            payload = self.payload_builder.build(batch, wall_time)
        except UnsupportedMeterError as e:
            logger.error("Could not serialize meter", error=str(e), event_type="elastic_serialize_error")
            return PublishOutcome.SERIALIZATION_ERROR

        try:
            response = self.transport.request("/_bulk", "POST", payload.encode())
        except NoReachableEndpointError as e:
            logger.error(
                "Could not connect to any configured elasticsearch instances",
                hosts=e.hosts,
                event_type="elastic_publish_error"
            )
            return PublishOutcome.NO_REACHABLE_ENDPOINT
        except TransportIOError as e:
            logger.error(
                "Could not send metrics to elasticsearch",
                host=e.host,
                error=str(e.cause),
                event_type="elastic_publish_error"
            )
            return PublishOutcome.IO_ERROR

        outcome = classify_bulk_response(response)
        if outcome is not BulkOutcome.SUCCESS:
            logger.error(
                "Failed to send metrics to elasticsearch",
                host=response.host,
                status=response.status_code,
                cause=response.text,
                event_type="elastic_publish_error"
            )
            if outcome is BulkOutcome.TRANSPORT_FAILURE:
                return PublishOutcome.TRANSPORT_FAILURE
            return PublishOutcome.ITEM_FAILURE

        logger.info(
            "Successfully sent metrics to elasticsearch",
            meters=len(batch),
            records=payload.record_count,
            index=payload.index_name,
            host=response.host,
            event_type="elastic_publish"
        )
        return PublishOutcome.SUCCESS

    def is_healthy(self) -> bool:
        return self.last_cycle is None or self.last_cycle.outcome is PublishOutcome.SUCCESS
