"""Tests for the index template bootstrap"""
import json
import httpx

from metrics.exporters.bootstrap import BootstrapState, IndexTemplateBootstrap
from metrics.exporters.transport import HttpTransport


class TemplateServer:
    """Fake Elasticsearch answering template requests"""

    def __init__(self, head_status=200, put_status=200, reachable=True, put_reachable=True):
        self.head_status = head_status
        self.put_status = put_status
        self.reachable = reachable
        self.put_reachable = put_reachable
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.reachable or (request.method == "PUT" and not self.put_reachable):
            raise httpx.ConnectError("Connection refused", request=request)
        if request.method == "HEAD":
            return httpx.Response(self.head_status)
        return httpx.Response(self.put_status, text='{"acknowledged":true}')

    @property
    def methods(self):
        return [r.method for r in self.requests]


class TestIndexTemplateBootstrap:
    """Test the unchecked/checked template state machine"""

    def setup_method(self):
        """Setup test fixtures"""
        self.server = TemplateServer()

    def make_bootstrap(self, **kwargs):
        transport = HttpTransport(["http://es:9200"], transport=httpx.MockTransport(self.server))
        return IndexTemplateBootstrap(transport, **kwargs)

    def test_existing_template(self):
        """Test an existing template is not recreated"""
        bootstrap = self.make_bootstrap()

        assert bootstrap.ensure_template() is BootstrapState.CHECKED
        assert self.server.methods == ["HEAD"]
        assert self.server.requests[0].url.path == "/_template/metrics_template"

    def test_missing_template_is_created(self):
        """Test a 404 probe creates the template"""
        self.server.head_status = 404
        bootstrap = self.make_bootstrap()

        assert bootstrap.ensure_template() is BootstrapState.CHECKED
        assert self.server.methods == ["HEAD", "PUT"]
        body = json.loads(self.server.requests[1].content)
        assert body == {
            "template": "metrics*",
            "mappings": {
                "_default_": {
                    "_all": {"enabled": False},
                    "properties": {"name": {"type": "keyword"}},
                }
            },
        }

    def test_failed_create_still_checked(self):
        """Test a failed create is logged and not retried"""
        self.server.head_status = 404
        self.server.put_status = 400
        bootstrap = self.make_bootstrap()

        assert bootstrap.ensure_template() is BootstrapState.CHECKED
        bootstrap.ensure_template()
        assert self.server.methods == ["HEAD", "PUT"]

    def test_unreachable_create_still_checked(self):
        """Test the state moves on once the probe was answered"""
        self.server.head_status = 404
        self.server.put_reachable = False
        bootstrap = self.make_bootstrap()

        assert bootstrap.ensure_template() is BootstrapState.CHECKED

    def test_unreachable_probe_is_retried(self):
        """Test no reachable host keeps the bootstrap unchecked"""
        self.server.reachable = False
        bootstrap = self.make_bootstrap()

        assert bootstrap.ensure_template() is BootstrapState.UNCHECKED

        self.server.reachable = True
        assert bootstrap.ensure_template() is BootstrapState.CHECKED
        assert self.server.methods == ["HEAD", "HEAD"]

    def test_probe_io_error_is_retried(self):
        """Test a probe failing after connect keeps the bootstrap unchecked"""
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        transport = HttpTransport(["http://es:9200"], transport=httpx.MockTransport(handler))
        bootstrap = IndexTemplateBootstrap(transport)

        assert bootstrap.ensure_template() is BootstrapState.UNCHECKED

    def test_probe_runs_once(self):
        """Test subsequent calls do not probe again"""
        bootstrap = self.make_bootstrap()

        bootstrap.ensure_template()
        bootstrap.ensure_template()
        bootstrap.ensure_template()

        assert self.server.methods == ["HEAD"]

    def test_disabled(self):
        """Test nothing is sent when auto creation is disabled"""
        bootstrap = self.make_bootstrap(enabled=False)

        assert bootstrap.ensure_template() is BootstrapState.UNCHECKED
        assert self.server.requests == []

    def test_template_follows_index_prefix(self):
        """Test the template pattern matches the configured index"""
        bootstrap = self.make_bootstrap(index="app-metrics")

        assert json.loads(bootstrap.mapping_document())["template"] == "app-metrics*"
