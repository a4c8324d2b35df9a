from .defaults import set_default_build_limits, normalize_runtime
from .reconciler import KogitoAppReconciler, ReconcileResult
from .queue import ReconcileQueue

__all__ = [
    "set_default_build_limits",
    "normalize_runtime",
    "KogitoAppReconciler",
    "ReconcileResult",
    "ReconcileQueue",
]
