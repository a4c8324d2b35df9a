import kopf
from logging import Logger
from typing import Dict, Optional
from kogito.controller.defaults import normalize_runtime, set_default_build_limits
from kogito.resources import (
    KogitoApp,
    ResourceClient,
    ResourceSynchronizer,
    BuildTrigger,
    StatusManager,
)
from kogito.sensors import OperatorSensor
from kogito.types.models import NamespacedName
from kogito.types.settings import Settings


class ReconcileResult:
    """Tells the queue whether and when to run a key again."""

    requeue: bool
    requeue_after: Optional[float]

    def __init__(self, requeue: bool = False, requeue_after: Optional[float] = None):
        self.requeue = requeue
        self.requeue_after = requeue_after

    @property
    def outcome(self) -> str:
        if self.requeue_after is not None:
            return "requeue_after"
        if self.requeue:
            return "requeue"
        return "done"

    def __eq__(self, other) -> bool:
        if not isinstance(other, ReconcileResult):
            return NotImplemented
        return (self.requeue, self.requeue_after) == (other.requeue, other.requeue_after)

    def __repr__(self) -> str:
        return f"ReconcileResult(requeue={self.requeue}, requeue_after={self.requeue_after})"


class KogitoAppReconciler:
    """Drives a KogitoApp and its dependents toward the state declared in its spec.

    One call to :meth:`reconcile` is a full pass: fetch the app, default it in
    memory, make sure every dependent exists, start the first build, bring
    drifted dependents up to date and finally report status. Every step is
    safe to repeat, so a pass interrupted by an error is simply retried.
    """

    client: ResourceClient
    synchronizer: ResourceSynchronizer
    build_trigger: BuildTrigger
    status_manager: StatusManager
    logger: Logger
    conf: Settings
    sensor: OperatorSensor

    def __init__(
        self,
        client: ResourceClient,
        synchronizer: ResourceSynchronizer,
        build_trigger: BuildTrigger,
        status_manager: StatusManager,
        logger: Logger,
        settings: Settings = None,
        sensor: OperatorSensor = None,
    ):
        self.client = client
        self.synchronizer = synchronizer
        self.build_trigger = build_trigger
        self.status_manager = status_manager
        self.logger = logger
        self.conf = settings or Settings()
        self.sensor = sensor or OperatorSensor()

    def owner_reference_hook(self, app: KogitoApp):
        """Make `app` the controller of every object created on its behalf."""

        def _set_owner(body: Dict) -> None:
            self.logger.debug(
                f"Setting controller reference pre create for '{body['metadata']['name']}' "
                f"kind '{body['kind']}'"
            )
            kopf.append_owner_reference(body, owner=app.owner)

        return _set_owner

    async def reconcile(
        self, key: NamespacedName, trigger_source: str = "queue"
    ) -> ReconcileResult:
        sensor_state = self.sensor.on_reconcile_start(key.name, key.namespace, trigger_source)
        outcome = "error"
        error = None
        try:
            result = await self._reconcile(key)
            outcome = result.outcome if result is not None else "not_found"
            return result or ReconcileResult()
        except Exception as ex:
            error = ex
            raise
        finally:
            self.sensor.on_reconcile_complete(
                key.name, key.namespace, sensor_state, outcome, error
            )

    async def _reconcile(self, key: NamespacedName) -> Optional[ReconcileResult]:
        self.logger.info(f"Reconciling KogitoApp {key}")

        app = await self.client.fetch_app(key)
        if app is None:
            self.logger.info(f"KogitoApp {key} not found, nothing to do")
            return None

        app.spec.runtime = normalize_runtime(app.spec.runtime)
        set_default_build_limits(app.spec.build)

        self.logger.info(f"Checking if all resources for '{app.name}' are created")
        resources = await self.synchronizer.build_or_fetch(
            app, self.owner_reference_hook(app)
        )

        if resources.build_config_s2i.is_new:
            self.logger.info(
                f"Buildconfigs are created, triggering build {resources.build_config_s2i.name}"
            )
            await self.build_trigger.trigger(resources.build_config_s2i, app.name)

        self.logger.info(f"Handling changes in Kogito App '{app.name}'")
        update_result = await self.synchronizer.manage_resources(app, resources)

        self.logger.info(f"Handling Status updates on '{app.name}'")
        status = await self.status_manager.manage_status(app, resources, update_result, key)

        if status.error is not None:
            self.logger.info(f"Reconcile for '{app.name}' finished with error")
            raise status.error
        if status.requeue_after:
            self.logger.info(
                f"Reconcile for '{app.name}' finished with requeue in "
                f"{self.conf.requeue_after_seconds:g} seconds"
            )
            return ReconcileResult(requeue_after=self.conf.requeue_after_seconds)
        if status.updated:
            self.logger.info(f"Reconcile for '{app.name}' finished with requeue")
            return ReconcileResult(requeue=True)

        self.logger.info(f"Reconcile for '{app.name}' successfully finished")
        return ReconcileResult()
