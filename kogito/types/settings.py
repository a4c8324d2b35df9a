import os
from typing import Any

_TRUE, _FALSE = {"True", "true", "yes", "1"}, {"False", "false", "no", "0"}


def _getenv(name: str, *default: Any) -> Any:
    try:
        v = os.environ[name]
        if v in _TRUE:
            return True
        elif v in _FALSE:
            return False
        else:
            return v
    except KeyError:
        pass
    if default:
        return default[0]
    raise KeyError(name)


# ------------------------------------------------
# ---- Defaults and environment variables ----
# ------------------------------------------------

#: Seconds to wait before reconciling again while an app is still provisioning
REQUEUE_AFTER_SECONDS = float(_getenv("REQUEUE_AFTER_SECONDS", 30))

#: Number of reconciliations that may run at the same time (never two for one app)
RECONCILE_WORKERS = int(_getenv("RECONCILE_WORKERS", 2))

#: First retry delay after a failed reconciliation, doubled on each consecutive failure
ERROR_BACKOFF_BASE_SECONDS = float(_getenv("ERROR_BACKOFF_BASE_SECONDS", 1.0))

#: Upper bound for the retry delay after failed reconciliations
ERROR_BACKOFF_MAX_SECONDS = float(_getenv("ERROR_BACKOFF_MAX_SECONDS", 300.0))

#: Registry hosting the default builder and runtime images
DEFAULT_IMAGE_REGISTRY = _getenv("DEFAULT_IMAGE_REGISTRY", "quay.io/kiegroup")

#: Tag of the default builder and runtime images
DEFAULT_IMAGE_TAG = _getenv("DEFAULT_IMAGE_TAG", "0.5.0")


class Settings:
    """Operator settings"""

    requeue_after_seconds: float = REQUEUE_AFTER_SECONDS
    reconcile_workers: int = RECONCILE_WORKERS
    error_backoff_base_seconds: float = ERROR_BACKOFF_BASE_SECONDS
    error_backoff_max_seconds: float = ERROR_BACKOFF_MAX_SECONDS
    default_image_registry: str = DEFAULT_IMAGE_REGISTRY
    default_image_tag: str = DEFAULT_IMAGE_TAG

    def __init__(
        self,
        *args,
        requeue_after_seconds: float = None,
        reconcile_workers: int = None,
        error_backoff_base_seconds: float = None,
        error_backoff_max_seconds: float = None,
        default_image_registry: str = None,
        default_image_tag: str = None,
        **kwargs,
    ):
        if requeue_after_seconds is not None:
            self.requeue_after_seconds = requeue_after_seconds

        if reconcile_workers is not None:
            self.reconcile_workers = reconcile_workers

        if error_backoff_base_seconds is not None:
            self.error_backoff_base_seconds = error_backoff_base_seconds

        if error_backoff_max_seconds is not None:
            self.error_backoff_max_seconds = error_backoff_max_seconds

        if default_image_registry is not None:
            self.default_image_registry = default_image_registry

        if default_image_tag is not None:
            self.default_image_tag = default_image_tag
