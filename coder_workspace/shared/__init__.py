"""Cross-cutting helpers (clocks, telemetry). Nothing here knows about Coder."""

from coder_workspace.shared.utils import epoch_ms, monotonic_ms, utc_now

__all__ = ["epoch_ms", "monotonic_ms", "utc_now"]
