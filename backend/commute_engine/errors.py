from __future__ import annotations

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "no_path",
        "same_node",
        "unresolved_endpoint",
        "query_too_short",
        "upstream_unavailable",
        "upstream_empty",
        "upstream_invalid_payload",
    }
)


class GatewayError(RuntimeError):
    pass


class GatewayRetryableError(GatewayError):
    """A provider error that is likely transient (rate limited, 5xx, network)."""

    pass


class GraphDataError(ValueError):
    pass


class PathNotFoundError(ValueError):
    pass


def normalize_reason_code(reason_code: str, *, default: str = "upstream_unavailable") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
