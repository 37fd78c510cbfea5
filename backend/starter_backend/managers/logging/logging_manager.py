"""Logging manager for centralized structured logging.

Provides:
- Structured JSON logging to logs/app.jsonl
- OpenTelemetry tracing, exported over OTLP when a monitoring key is configured
- Development and production logging configurations
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from starter_backend.managers.config.config_models import AppSettings

_RECORD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module", "lineno",
    "funcName", "created", "msecs", "relativeCreated", "thread", "threadName", "processName",
    "process", "exc_info", "exc_text", "stack_info", "getMessage", "taskName", "message",
    "otelSpanID", "otelTraceID", "otelTraceSampled", "otelServiceName",
}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        trace_id = span_id = None
        span = trace.get_current_span()
        if span and span.is_recording():
            sc = span.get_span_context()
            if sc.is_valid:
                trace_id = f"{sc.trace_id:032x}"
                span_id = f"{sc.span_id:016x}"

        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process_id": os.getpid(),
            "thread_id": record.thread,
            "thread_name": record.threadName,
        }
        if trace_id:
            entry["trace_id"] = trace_id
        if span_id:
            entry["span_id"] = span_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for k, v in record.__dict__.items():
            if k not in _RECORD_ATTRS:
                entry[f"extra_{k}"] = v
        return json.dumps(entry, default=str)


class LoggingManager:
    """Configures root logging and tracing for the application."""

    NOISY_LOGGERS = ("pymongo", "motor", "httpx", "httpcore", "urllib3.connectionpool", "passlib")

    def __init__(self, settings: AppSettings, logs_dir: Optional[Path] = None) -> None:
        self.settings = settings
        self.service_name = settings.app_name.lower().replace(" ", "-")
        self.service_version = settings.app_version
        self.is_development = settings.is_development
        self.log_level = self._get_log_level()
        self.logs_dir = logs_dir or self._get_logs_dir()
        self.log_file = self.logs_dir / "app.jsonl"
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self.span_exporter: Optional[OTLPSpanExporter] = None

        self._setup_telemetry()
        self._setup_logging()

    def _get_log_level(self) -> int:
        level = getattr(logging, self.settings.log_level.upper(), None)
        return level if isinstance(level, int) else logging.INFO

    def _get_logs_dir(self) -> Path:
        if self.settings.app_log_dir:
            return Path(self.settings.app_log_dir)
        # backend/starter_backend/managers/logging/logging_manager.py -> project root is 4 levels up
        return Path(__file__).resolve().parents[4] / "logs"

    @property
    def monitoring_enabled(self) -> bool:
        return bool(self.settings.monitoring_key and self.settings.otel_exporter_otlp_endpoint)

    def _setup_telemetry(self) -> None:
        """Set up the tracer provider and the OTLP exporter when configured."""
        resource = Resource.create(
            {
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.service_version,
                "environment": self.settings.environment,
            }
        )
        provider = TracerProvider(resource=resource)
        if self.monitoring_enabled:
            endpoint = self.settings.otel_exporter_otlp_endpoint.rstrip("/") + "/v1/traces"
            self.span_exporter = OTLPSpanExporter(
                endpoint=endpoint,
                headers={"Authorization": f"Bearer {self.settings.monitoring_key}"},
            )
            provider.add_span_processor(BatchSpanProcessor(self.span_exporter))
        trace.set_tracer_provider(provider)

    def _setup_logging(self) -> None:
        """Configure structured logging to JSON file."""
        root = logging.getLogger()
        for h in root.handlers[:]:
            root.removeHandler(h)

        file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        file_handler.setLevel(self.log_level)
        root.addHandler(file_handler)
        root.setLevel(self.log_level)

        self._suppress_noisy_loggers()

        # Request logs go to the console in development, warnings+ otherwise
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        console.setLevel(self.log_level if self.is_development else logging.WARNING)
        root.addHandler(console)

        LoggingInstrumentor().instrument(set_logging_format=False)

        if self.monitoring_enabled:
            logging.getLogger(__name__).info(
                f"Exporting traces to {self.settings.otel_exporter_otlp_endpoint}"
            )

    def _suppress_noisy_loggers(self) -> None:
        for name in self.NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    def instrument_fastapi(self, app) -> None:  # noqa: ANN001
        """Add OpenTelemetry instrumentation to FastAPI app."""
        FastAPIInstrumentor.instrument_app(app, excluded_urls="health,api/health")

    def get_log_file_path(self) -> Path:
        return self.log_file

    def read_logs(self, lines: int = 100) -> list[Dict[str, Any]]:
        """Read the most recent log entries."""
        if not self.log_file.exists():
            return []

        entries: list[Dict[str, Any]] = []
        with self.log_file.open("r", encoding="utf-8") as f:
            data = f.readlines()[-lines:]
        for ln in data:
            ln = ln.strip()
            if not ln:
                continue
            try:
                entries.append(json.loads(ln))
            except json.JSONDecodeError:
                continue
        return entries

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about the log file."""
        if not self.log_file.exists():
            return {"file_exists": False, "file_size": 0, "line_count": 0, "last_modified": None}

        stat = self.log_file.stat()
        with self.log_file.open("r", encoding="utf-8") as f:
            line_count = sum(1 for _ in f)
        return {
            "file_exists": True,
            "file_size": stat.st_size,
            "line_count": line_count,
            "last_modified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
            "file_path": str(self.log_file),
        }


def setup_logging(settings: AppSettings, logs_dir: Optional[Path] = None) -> LoggingManager:
    """Configure root logging and tracing for the process."""
    return LoggingManager(settings, logs_dir=logs_dir)
