"""Log setup and OpenTelemetry span helpers."""

from coder_workspace.shared.telemetry.logging import setup_logging
from coder_workspace.shared.telemetry.tracing import add_span_attributes, traced

__all__ = ["setup_logging", "traced", "add_span_attributes"]
