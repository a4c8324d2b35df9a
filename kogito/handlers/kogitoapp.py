import kopf
from logging import Logger
from typing import Dict, Optional
from kogito.common.models.labels import ResourceLabels
from kogito.types.models import (
    NamespacedName,
    KOGITO_APP,
    BUILD_CONFIG,
    IMAGE_STREAM,
    DEPLOYMENT_CONFIG,
    SERVICE,
    ROUTE,
)

# Only objects created by the operator carry this label
OWNED_LABELS = {ResourceLabels.KOGITO_APP_LABEL: kopf.PRESENT}


def controller_owner(meta: Dict) -> Optional[str]:
    """Name of the KogitoApp controlling an object, if any."""
    for ref in meta.get("ownerReferences") or []:
        if ref.get("kind") == KOGITO_APP.kind and ref.get("controller"):
            return ref.get("name")
    return None


def request_reconciliation(memo: kopf.Memo, key: NamespacedName, logger: Logger):
    """Enqueue the app; repeated requests collapse into a single pass."""
    if key in memo.queue:
        return
    logger.debug(f"Requesting reconciliation of KogitoApp {key}")
    memo.queue.add(key)


@kopf.on.event(KOGITO_APP.api_version, KOGITO_APP.plural)
async def on_kogitoapp_event(
    type, name, namespace, memo: kopf.Memo, logger: Logger, **kwargs
):
    """Any change to a KogitoApp, its deletion included, triggers a reconciliation."""
    request_reconciliation(memo, NamespacedName(namespace, name), logger)


@kopf.on.event(BUILD_CONFIG.api_version, BUILD_CONFIG.plural, labels=OWNED_LABELS)
@kopf.on.event(IMAGE_STREAM.api_version, IMAGE_STREAM.plural, labels=OWNED_LABELS)
@kopf.on.event(DEPLOYMENT_CONFIG.api_version, DEPLOYMENT_CONFIG.plural, labels=OWNED_LABELS)
@kopf.on.event(SERVICE.api_version, SERVICE.plural, labels=OWNED_LABELS)
@kopf.on.event(ROUTE.api_version, ROUTE.plural, labels=OWNED_LABELS)
async def on_owned_object_event(
    type, meta, namespace, memo: kopf.Memo, logger: Logger, **kwargs
):
    """Changes to an owned object reconcile the KogitoApp controlling it."""
    owner = controller_owner(meta)
    if owner is None:
        return
    request_reconciliation(memo, NamespacedName(namespace, owner), logger)
