"""FastAPI server hosting the periodic publish loop.

The server publishes whatever the given registry holds. Applications embed it
by passing their own `MeterRegistry` (see `main.main`); without one it starts
with an empty registry and every cycle sends nothing.
"""
import asyncio
import time
import os
from typing import Optional
import httpx
from fastapi import FastAPI, HTTPException
from config import Config
from metrics.registry import MeterRegistry
from metrics.exporters.elastic import ElasticExporter
from logging_config import get_logger, log_error


logger = get_logger(__name__)


class MetricsServer:
    """FastAPI server for the Elasticsearch metrics exporter"""

    def __init__(self, config: Config, registry: Optional[MeterRegistry] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self.app = FastAPI(
            title="Elasticsearch Metrics Exporter",
            version=config.service_version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )
        self.registry = registry if registry is not None else MeterRegistry()
        self.exporter = ElasticExporter(config, self.registry, transport=transport)

        # Publish state
        self.last_publish_time = 0
        self.publish_count = 0
        self.publish_errors = 0
        self.publish_task = None
        # One cycle at a time across the loop, manual publishes and shutdown
        self._publish_lock = asyncio.Lock()

        self._setup_routes()
        self._setup_events()

    def _setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get('/health')
        def health_check():
            """Health check endpoint"""
            age = time.time() - self.last_publish_time if self.last_publish_time > 0 else float('inf')
            is_healthy = age < self.config.step * 2

            health_data = {
                "status": "healthy" if is_healthy else "unhealthy",
                "last_publish_seconds_ago": round(age, 1) if age != float('inf') else None,
                "step": self.config.step,
                "total_publishes": self.publish_count,
                "publish_errors": self.publish_errors,
                "exporter_healthy": self.exporter.is_healthy()
            }

            if not is_healthy:
                raise HTTPException(status_code=503, detail=health_data)

            return health_data

        @self.app.get('/status')
        def get_status():
            """Detailed status information"""
            age = time.time() - self.last_publish_time if self.last_publish_time > 0 else float('inf')
            last_cycle = self.exporter.last_cycle

            return {
                "service": {
                    "name": self.config.service_name,
                    "version": self.config.service_version,
                    "uptime_seconds": round(time.time() - getattr(self.app.state, "start_time", time.time()), 1),
                    "hostname": os.uname().nodename
                },
                "publish": {
                    "step_seconds": self.config.step,
                    "last_publish_seconds_ago": round(age, 1) if age != float('inf') else None,
                    "total_publishes": self.publish_count,
                    "publish_errors": self.publish_errors,
                    "last_outcome": last_cycle.outcome.value if last_cycle else None,
                    "last_batches_sent": last_cycle.batches_sent if last_cycle else 0,
                    "last_meters_sent": last_cycle.meters_sent if last_cycle else 0
                },
                "exporter": {
                    "hosts": self.config.hosts,
                    "index": self.config.elastic_index,
                    "batch_size": self.config.elastic_batch_size,
                    "template_state": self.exporter.bootstrap.state.value,
                    "healthy": self.exporter.is_healthy()
                }
            }

        @self.app.get('/meters')
        def list_meters():
            """List all registered meters"""
            return {
                "meters": self.registry.list_meters(),
                "count": len(self.registry)
            }

        @self.app.post('/publish')
        async def manual_publish():
            """Manually trigger a publish cycle"""
            try:
                await self._publish_metrics()
                return {
                    "success": self.exporter.is_healthy(),
                    "message": "Publish cycle triggered",
                    "publish_count": self.publish_count
                }
            except Exception as e:
                log_error(logger, e, {"component": "manual_publish", "endpoint": "/publish"})
                raise HTTPException(status_code=500, detail={"error": str(e)})

    def _setup_events(self):
        """Setup FastAPI startup/shutdown events"""

        @self.app.on_event("startup")
        async def startup_event():
            self.app.state.start_time = time.time()
            logger.info(
                "Application startup initiated",
                service_name=self.config.service_name,
                service_version=self.config.service_version,
                step=self.config.step,
                event_type="server_startup"
            )
            self.publish_task = asyncio.create_task(self._publish_loop())

        @self.app.on_event("shutdown")
        async def shutdown_event():
            logger.info("Shutting down metrics exporter", event_type="server_shutdown")

            if self.publish_task:
                self.publish_task.cancel()
                try:
                    await self.publish_task
                except asyncio.CancelledError:
                    pass

            # Flush what was recorded since the last step
            await self._publish_metrics()
            self.exporter.shutdown()

    async def _publish_loop(self):
        """Background publish loop, one cycle per step"""
        while True:
            try:
                await asyncio.sleep(self.config.step)
                await self._publish_metrics()
            except asyncio.CancelledError:
                break
            except Exception as e:
                log_error(logger, e, {"component": "publish_loop", "publish_errors": self.publish_errors})

    async def _publish_metrics(self):
        """Run one publish cycle on a worker thread"""
        async with self._publish_lock:
            await self._run_publish()

    async def _run_publish(self):
        try:
            self.publish_count += 1
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.exporter.publish)
            self.last_publish_time = time.time()
            if not self.exporter.is_healthy():
                self.publish_errors += 1
        except Exception as e:
            log_error(logger, e, {"component": "publish", "publish_count": self.publish_count})
            self.publish_errors += 1
            raise

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
