"""HTTP transport with host failover for the Elasticsearch exporter"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, TypeVar
import httpx
from metrics.formatting import is_not_blank
from logging_config import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

ITEM_FAILURE_MARKER = '"errors":true'

# Raised before any part of the request reached the host
CONNECT_ERRORS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.UnsupportedProtocol,
    httpx.InvalidURL,
)


class ExportError(Exception):
    """Base class for exporter delivery errors"""


class NoReachableEndpointError(ExportError):
    """Every configured host failed to connect"""

    def __init__(self, hosts: Sequence[str]):
        self.hosts = list(hosts)
        super().__init__(f"Could not connect to any configured elasticsearch instances: {self.hosts}")


class TransportIOError(ExportError):
    """Connected, but writing the request or reading the response failed"""

    def __init__(self, host: str, cause: Exception):
        self.host = host
        self.cause = cause
        super().__init__(f"I/O error talking to {host}: {cause}")


class BulkOutcome(Enum):
    SUCCESS = "success"
    TRANSPORT_FAILURE = "transport_failure"
    ITEM_FAILURE = "item_failure"


@dataclass(frozen=True)
class TransportResponse:
    host: str
    status_code: int
    text: str


def classify_bulk_response(response: TransportResponse) -> BulkOutcome:
    """Classify a bulk response.

    A status below 400 is not enough: Elasticsearch reports rejected items
    with ``"errors":true`` inside a 200 response body.
    """
    if response.status_code >= 400:
        return BulkOutcome.TRANSPORT_FAILURE
    if ITEM_FAILURE_MARKER in response.text:
        return BulkOutcome.ITEM_FAILURE
    return BulkOutcome.SUCCESS


def first_reachable(hosts: Sequence[str], attempt: Callable[[str], T]) -> T:
    """Return the result of the first host whose attempt connects"""
    for host in hosts:
        try:
            return attempt(host)
        except CONNECT_ERRORS as e:
            logger.error(
                "Error connecting to elasticsearch host",
                host=host,
                error=str(e),
                event_type="elastic_connect_error"
            )
    raise NoReachableEndpointError(hosts)


class HttpTransport:
    """Sends JSON requests to the first reachable configured host"""

    def __init__(self,
                 hosts: List[str],
                 connect_timeout: float = 1.0,
                 read_timeout: float = 10.0,
                 user_name: Optional[str] = None,
                 password: Optional[str] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.hosts = list(hosts)
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self._auth = None
        if is_not_blank(user_name) and is_not_blank(password):
            self._auth = httpx.BasicAuth(user_name, password)
        self._transport = transport

    @property
    def uses_basic_auth(self) -> bool:
        return self._auth is not None

    def request(self, path: str, method: str, body: Optional[bytes] = None) -> TransportResponse:
        """Send a request, failing over between hosts on connection errors.

        Raises NoReachableEndpointError when no host accepts the connection
        and TransportIOError when the exchange fails after connecting.
        """
        return first_reachable(self.hosts, lambda host: self._send(host, path, method, body))

    def _send(self, host: str, path: str, method: str, body: Optional[bytes]) -> TransportResponse:
        url = host.rstrip("/") + path
        method = method.upper()
        content = body if method in ("POST", "PUT") else None

        with httpx.Client(timeout=self.timeout, auth=self._auth, transport=self._transport) as client:
            try:
                response = client.request(
                    method,
                    url,
                    content=content,
                    headers={"Content-Type": "application/json"}
                )
            except CONNECT_ERRORS:
                raise
            except httpx.HTTPError as e:
                raise TransportIOError(host, e) from e

            return TransportResponse(host=host, status_code=response.status_code, text=response.text)
