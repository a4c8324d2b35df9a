import logging
from logging import Logger
from typing import Callable, Dict, Iterator, Optional, Tuple
from kubernetes_asyncio.client import ApiException
from kogito.resources.base import RESOURCE_HASH_ANNOTATION
from kogito.resources.client import ResourceClient
from kogito.resources.kogitoapp import KogitoApp
from kogito.resources.manifests import KogitoAppManifests
from kogito.sensors import OperatorSensor
from kogito.types.settings import Settings
from kogito.types.models import (
    ObjectKind,
    BUILD_CONFIG,
    IMAGE_STREAM,
    DEPLOYMENT_CONFIG,
    SERVICE,
    ROUTE,
)
from kogito.utils.errors import already_exists_error
from kogito.utils.helpers import get_path

#: Called once with the body of each object about to be created
OnCreateHook = Callable[[Dict], None]


class SyncedResource:
    """A dependent object together with its provenance in this pass."""

    kind: ObjectKind
    body: Dict
    is_new: bool

    def __init__(self, kind: ObjectKind, body: Dict, is_new: bool = False):
        self.kind = kind
        self.body = body
        self.is_new = is_new

    @property
    def name(self) -> str:
        return get_path(self.body, "metadata", "name")

    @property
    def resource_hash(self) -> Optional[str]:
        return get_path(self.body, "metadata", "annotations", RESOURCE_HASH_ANNOTATION)

    def __repr__(self) -> str:
        return f"<{self.kind} {self.name} new={self.is_new}>"


class SynchronizedResources:
    """The dependent objects of one KogitoApp."""

    MEMBERS = (
        ("image_stream_s2i", IMAGE_STREAM, "prepare_image_stream_s2i"),
        ("image_stream_runtime", IMAGE_STREAM, "prepare_image_stream_runtime"),
        ("build_config_s2i", BUILD_CONFIG, "prepare_build_config_s2i"),
        ("build_config_runtime", BUILD_CONFIG, "prepare_build_config_runtime"),
        ("deployment_config", DEPLOYMENT_CONFIG, "prepare_deployment_config"),
        ("service", SERVICE, "prepare_service"),
        ("route", ROUTE, "prepare_route"),
    )

    image_stream_s2i: SyncedResource = None
    image_stream_runtime: SyncedResource = None
    build_config_s2i: SyncedResource = None
    build_config_runtime: SyncedResource = None
    deployment_config: SyncedResource = None
    service: SyncedResource = None
    route: SyncedResource = None

    def __iter__(self) -> Iterator[Tuple[str, SyncedResource]]:
        for member, _, _ in self.MEMBERS:
            yield member, getattr(self, member)


class UpdateResourcesResult:
    """Outcome of bringing existing dependents in line with the app spec."""

    updated: bool
    error: Optional[Exception]

    def __init__(self, updated: bool = False, error: Optional[Exception] = None):
        self.updated = updated
        self.error = error

    def __repr__(self) -> str:
        return f"UpdateResourcesResult(updated={self.updated}, error={self.error!r})"


class ResourceSynchronizer:
    """Creates missing dependents of a KogitoApp and updates drifted ones."""

    MEMBERS = SynchronizedResources.MEMBERS

    client: ResourceClient
    conf: Settings
    logger: Logger
    sensor: OperatorSensor

    def __init__(
        self,
        client: ResourceClient,
        conf: Settings = None,
        logger: Logger = None,
        sensor: OperatorSensor = None,
    ):
        self.client = client
        self.conf = conf or Settings()
        self.logger = logger or logging.getLogger(__name__)
        self.sensor = sensor or OperatorSensor()

    def manifests(self, app: KogitoApp) -> KogitoAppManifests:
        return KogitoAppManifests(app, self.conf)

    async def build_or_fetch(
        self, app: KogitoApp, on_create: OnCreateHook = None
    ) -> SynchronizedResources:
        """Ensure every dependent exists, creating the ones that do not.

        Objects created during this call are flagged ``is_new``. An object
        created concurrently by someone else (AlreadyExists) counts as existing.
        """
        manifests = self.manifests(app)
        resources = SynchronizedResources()
        for member, kind, prepare in self.MEMBERS:
            desired = getattr(manifests, prepare)()
            synced = await self._build_or_fetch_one(app, kind, desired, on_create)
            setattr(resources, member, synced)
        return resources

    async def _build_or_fetch_one(
        self, app: KogitoApp, kind: ObjectKind, desired: Dict, on_create: OnCreateHook
    ) -> SyncedResource:
        name = desired["metadata"]["name"]
        existing = await self.client.get(kind, name, app.namespace)
        if existing is not None:
            return SyncedResource(kind, existing, is_new=False)

        if on_create is not None:
            on_create(desired)
        sensor_state = self.sensor.on_resource_sync_start(
            app.name, name, app.namespace, kind.kind
        )
        operation = "create"
        success = True
        try:
            created = await self.client.create(kind, app.namespace, desired)
        except ApiException as ex:
            if not already_exists_error(ex):
                success = False
                raise
            operation = "adopt"
            self.logger.info(f"{kind} '{name}' already exists, reusing it")
            existing = await self.client.get(kind, name, app.namespace)
            if existing is None:
                success = False
                raise
            return SyncedResource(kind, existing, is_new=False)
        finally:
            self.sensor.on_resource_sync_complete(
                app.name, name, app.namespace, kind.kind, sensor_state, operation, success
            )
        self.logger.info(f"Created {kind} '{name}'")
        return SyncedResource(kind, created or desired, is_new=True)

    async def manage_resources(
        self, app: KogitoApp, resources: SynchronizedResources
    ) -> UpdateResourcesResult:
        """Patch existing dependents whose desired state changed since they were written.

        API errors are reported in the result; they are not raised.
        """
        result = UpdateResourcesResult()
        manifests = self.manifests(app)
        for member, kind, prepare in self.MEMBERS:
            synced: SyncedResource = getattr(resources, member)
            if synced is None or synced.is_new:
                continue
            desired = getattr(manifests, prepare)()
            desired_hash = get_path(
                desired, "metadata", "annotations", RESOURCE_HASH_ANNOTATION
            )
            if synced.resource_hash == desired_hash:
                continue

            self.logger.info(f"{kind} '{synced.name}' differs from the app spec, updating")
            sensor_state = self.sensor.on_resource_sync_start(
                app.name, synced.name, app.namespace, kind.kind
            )
            success = True
            try:
                patched = await self.client.patch(
                    kind,
                    synced.name,
                    app.namespace,
                    {
                        "metadata": {
                            "labels": desired["metadata"]["labels"],
                            "annotations": desired["metadata"]["annotations"],
                        },
                        "spec": desired["spec"],
                    },
                )
            except ApiException as ex:
                success = False
                self.logger.error(f"Failed to update {kind} '{synced.name}': {ex}")
                if result.error is None:
                    result.error = ex
                continue
            finally:
                self.sensor.on_resource_sync_complete(
                    app.name,
                    synced.name,
                    app.namespace,
                    kind.kind,
                    sensor_state,
                    "patch",
                    success,
                )
            if patched:
                synced.body = patched
            result.updated = True
        return result
