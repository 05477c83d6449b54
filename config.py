"""Configuration for the Elasticsearch metrics exporter"""
from pathlib import Path
from typing import List, Literal, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Configuration with Pydantic validation and environment-based settings"""

    # Core settings
    step: int = Field(default=60, ge=1, description="Publish interval in seconds")

    # Elasticsearch settings
    elastic_hosts: str = Field(
        default="http://localhost:9200",
        description="Elasticsearch host base URLs (comma-separated, tried in order)"
    )
    elastic_index: str = Field(default="metrics", description="Index name prefix")
    elastic_index_date_format: str = Field(default="%Y-%m", description="strftime pattern appended to the index prefix")
    elastic_timestamp_field_name: str = Field(default="@timestamp", description="Name of the timestamp field")
    elastic_batch_size: int = Field(default=10000, ge=1, description="Meters per bulk request")
    elastic_connect_timeout: float = Field(default=1.0, gt=0, description="Connect timeout in seconds")
    elastic_read_timeout: float = Field(default=10.0, gt=0, description="Read timeout in seconds")
    elastic_user_name: Optional[str] = Field(default=None, description="Basic auth user name")
    elastic_password: Optional[str] = Field(default=None, description="Basic auth password")
    elastic_auto_create_index: bool = Field(default=True, description="Create the index template if missing")

    # Server settings (health and status only)
    metrics_port: int = Field(default=9100, ge=1, le=65535, description="Health check server port")
    metrics_host: str = Field(default="0.0.0.0", description="Health check server host")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Log file (console only when unset)")

    # Service settings
    service_name: str = Field(default="elastic-metrics-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('elastic_hosts')
    def validate_elastic_hosts(cls, v):
        """At least one host is required"""
        if not [item for item in v.split(',') if item.strip()]:
            raise ValueError("ELASTIC_HOSTS must name at least one host")
        return v

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def hosts(self) -> List[str]:
        """Get configured hosts as a list"""
        return [item.strip() for item in self.elastic_hosts.split(',') if item.strip()]
