"""Clock helpers shared by name rendering and readiness polling."""

from coder_workspace.shared.utils.datetime import epoch_ms, monotonic_ms, utc_now

__all__ = ["epoch_ms", "monotonic_ms", "utc_now"]
