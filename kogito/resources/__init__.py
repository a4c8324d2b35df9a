from .kogitoapp import KogitoApp
from .client import ResourceClient
from .manifests import KogitoAppManifests
from .synchronizer import (
    ResourceSynchronizer,
    SynchronizedResources,
    SyncedResource,
    UpdateResourcesResult,
)
from .build import BuildTrigger
from .status import StatusManager, StatusUpdateResult

__all__ = [
    "KogitoApp",
    "ResourceClient",
    "KogitoAppManifests",
    "ResourceSynchronizer",
    "SynchronizedResources",
    "SyncedResource",
    "UpdateResourcesResult",
    "BuildTrigger",
    "StatusManager",
    "StatusUpdateResult",
]
