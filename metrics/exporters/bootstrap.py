"""One-time index template check and creation"""
import json
import threading
from enum import Enum
from .transport import HttpTransport, NoReachableEndpointError, TransportIOError
from logging_config import get_logger


logger = get_logger(__name__)


class BootstrapState(Enum):
    UNCHECKED = "unchecked"
    CHECKED = "checked"


class IndexTemplateBootstrap:
    """Ensures the metrics index template exists before the first publish.

    The template is probed once per process. Once a probe got an answer the
    state moves to CHECKED whatever the outcome, so a failed create is not
    retried every cycle. When no host answers the probe the state stays
    UNCHECKED and the next publish tries again.
    """

    def __init__(self, transport: HttpTransport, index: str = "metrics",
                 template_name: str = "metrics_template", enabled: bool = True):
        self.transport = transport
        self.index = index
        self.template_name = template_name
        self.enabled = enabled
        self._state = BootstrapState.UNCHECKED
        self._lock = threading.Lock()

    @property
    def state(self) -> BootstrapState:
        return self._state

    @property
    def template_path(self) -> str:
        return f"/_template/{self.template_name}"

    def mapping_document(self) -> str:
        return json.dumps({
            "template": f"{self.index}*",
            "mappings": {
                "_default_": {
                    "_all": {"enabled": False},
                    "properties": {"name": {"type": "keyword"}},
                }
            },
        }, separators=(",", ":"))

    def ensure_template(self) -> BootstrapState:
        """Probe for the template and create it if missing"""
        if not self.enabled or self._state is BootstrapState.CHECKED:
            return self._state

        # Non-blocking: a concurrent publish skips the probe instead of repeating it
        if not self._lock.acquire(blocking=False):
            return self._state
        try:
            if self._state is BootstrapState.UNCHECKED:
                self._check_and_create()
            return self._state
        finally:
            self._lock.release()

    def _check_and_create(self):
        try:
            probe = self.transport.request(self.template_path, "HEAD")
        except NoReachableEndpointError as e:
            logger.error(
                "Could not connect to any configured elasticsearch instances",
                hosts=e.hosts,
                event_type="elastic_template_probe_error"
            )
            return
        except TransportIOError as e:
            logger.error(
                "Error when checking metrics template in elasticsearch",
                host=e.host,
                error=str(e.cause),
                event_type="elastic_template_probe_error"
            )
            return

        self._state = BootstrapState.CHECKED

        if probe.status_code != 404:
            logger.debug("Metrics template already setup", host=probe.host, status=probe.status_code)
            return

        logger.debug("No metrics template found in elasticsearch. Adding...", host=probe.host)
        try:
            created = self.transport.request(self.template_path, "PUT", self.mapping_document().encode("utf-8"))
        except (NoReachableEndpointError, TransportIOError) as e:
            logger.error(
                "Error adding metrics template to elasticsearch",
                error=str(e),
                event_type="elastic_template_create_error"
            )
            return

        if created.status_code != 200:
            logger.error(
                "Error adding metrics template to elasticsearch",
                host=created.host,
                status=created.status_code,
                response=created.text,
                event_type="elastic_template_create_error"
            )
        else:
            logger.info("Added metrics template to elasticsearch", template=self.template_name, host=created.host)
