from __future__ import annotations

from typing import Dict

HEALTH_PATH = "/health"
OPS_PATHS = {"/healthz", "/readyz", HEALTH_PATH}


def is_ops_path(path: str | None) -> bool:
    return bool(path) and path in OPS_PATHS


def build_readiness_status(readiness_state: Dict[str, bool]) -> Dict[str, object]:
    failed = [k for k, v in readiness_state.items() if not v]
    return {
        "status": "ok" if not failed else "fail",
        "checks": readiness_state,
        "failed": failed,
    }


__all__ = ["is_ops_path", "build_readiness_status", "OPS_PATHS", "HEALTH_PATH"]
