import logging
from logging import Logger
from typing import Dict, List, Optional
from kubernetes_asyncio.client import ApiException
from kogito.resources.client import ResourceClient
from kogito.resources.kogitoapp import KogitoApp
from kogito.resources.synchronizer import SynchronizedResources, UpdateResourcesResult
from kogito.sensors import OperatorSensor
from kogito.types.models import NamespacedName, BUILD
from kogito.common.models.labels import ResourceLabels
from kogito.utils.errors import describe_api_exception
from kogito.utils.helpers import upsert_condition, deep_compare_dict, get_path

PROVISIONING = "Provisioning"
DEPLOYED = "Deployed"
FAILED = "Failed"
CONDITION_TYPES = (PROVISIONING, DEPLOYED, FAILED)

BUILD_PHASES = ("new", "pending", "running", "complete", "failed", "error", "cancelled")
ACTIVE_BUILD_PHASES = ("new", "pending", "running")
DEPLOYMENT_STATES = ("ready", "starting", "stopped", "failed")


class StatusUpdateResult:
    """What the control loop should do after the status was reconciled."""

    updated: bool
    requeue_after: bool
    error: Optional[Exception]

    def __init__(
        self,
        updated: bool = False,
        requeue_after: bool = False,
        error: Optional[Exception] = None,
    ):
        self.updated = updated
        self.requeue_after = requeue_after
        self.error = error

    def __repr__(self) -> str:
        return (
            f"StatusUpdateResult(updated={self.updated}, "
            f"requeue_after={self.requeue_after}, error={self.error!r})"
        )


def deployment_state(deployment_config: Optional[Dict]) -> Optional[str]:
    """Classify a DeploymentConfig as ready, starting, stopped or failed."""
    if not deployment_config:
        return None
    replicas = get_path(deployment_config, "spec", "replicas", default=0)
    if replicas == 0:
        return "stopped"
    for condition in get_path(deployment_config, "status", "conditions", default=[]):
        if condition.get("type") == "Progressing" and condition.get("status") == "False":
            return "failed"
    available = get_path(deployment_config, "status", "availableReplicas", default=0)
    if available >= replicas:
        return "ready"
    return "starting"


def route_url(route: Optional[Dict]) -> Optional[str]:
    host = get_path(route, "spec", "host")
    if not host:
        return None
    scheme = "https" if get_path(route, "spec", "tls") else "http"
    return f"{scheme}://{host}"


class StatusManager:
    """Reports the observed state of a KogitoApp's dependents in its status."""

    client: ResourceClient
    logger: Logger
    sensor: OperatorSensor

    def __init__(
        self,
        client: ResourceClient,
        logger: Logger = None,
        sensor: OperatorSensor = None,
    ):
        self.client = client
        self.logger = logger or logging.getLogger(__name__)
        self.sensor = sensor or OperatorSensor()

    async def fetch_builds(self, app: KogitoApp) -> Dict[str, List[str]]:
        """Names of the builds of both build configs, bucketed by phase."""
        builds = {phase: [] for phase in BUILD_PHASES}
        for build_config in (app.build_config_s2i_name, app.build_config_runtime_name):
            items = await self.client.list(
                BUILD,
                app.namespace,
                label_selector=f"{ResourceLabels.BUILD_CONFIG_LABEL}={build_config}",
            )
            for item in items:
                phase = str(get_path(item, "status", "phase", default="new")).lower()
                builds.setdefault(phase, []).append(get_path(item, "metadata", "name"))
        return builds

    def prepare_conditions(
        self, app: KogitoApp, active: str, reason: str, message: str
    ) -> List[Dict]:
        """Set `active` to True and any other known condition to False."""
        conds = app.status.get("conditions") or []
        present = {c.get("type") for c in conds}
        for cond_type in CONDITION_TYPES:
            if cond_type == active:
                newc = {"type": cond_type, "status": "True", "reason": reason, "message": message}
            elif cond_type in present:
                newc = {"type": cond_type, "status": "False", "reason": "", "message": ""}
            else:
                continue
            newc["observedGeneration"] = app.generation
            conds = upsert_condition(conds, newc)
        return conds

    async def manage_status(
        self,
        app: KogitoApp,
        resources: SynchronizedResources,
        update_result: UpdateResourcesResult,
        key: NamespacedName,
    ) -> StatusUpdateResult:
        """Compute the status of the app, write it when it changed and decide on requeueing.

        Failures to read dependents or to write the status are reported in the
        result. An update error from the synchronizer takes precedence over them.
        """
        result = StatusUpdateResult(error=update_result.error)
        try:
            current = await self.client.fetch_app(key)
            if current is None:
                self.logger.info(f"KogitoApp {key} no longer exists, skipping status")
                return result

            deployment = resources.deployment_config.body if resources.deployment_config else None
            route = resources.route.body if resources.route else None

            status = dict(current.status)
            status["route"] = route_url(route)

            deployments = {state: [] for state in DEPLOYMENT_STATES}
            state = deployment_state(deployment)
            if state is not None:
                deployments[state].append(current.deployment_config_name)
            status["deployments"] = deployments

            builds = await self.fetch_builds(current)
            status["builds"] = builds

            deployed = state in ("ready", "stopped")
            if update_result.error is not None:
                status["conditions"] = self.prepare_conditions(
                    current,
                    FAILED,
                    update_result.error.__class__.__name__,
                    describe_api_exception(update_result.error),
                )
            elif deployed:
                status["conditions"] = self.prepare_conditions(
                    current, DEPLOYED, "DeploymentReady", "Application is deployed"
                )
            else:
                status["conditions"] = self.prepare_conditions(
                    current, PROVISIONING, "Provisioning", "Waiting for build and deployment"
                )

            if any(builds.get(phase) for phase in ACTIVE_BUILD_PHASES) or not deployed:
                result.requeue_after = True

            changed = sorted(
                field
                for field in set(status) | set(current.status)
                if not deep_compare_dict(status.get(field), current.status.get(field))
            )
            if changed:
                await self.client.patch_app_status(key, status)
                self.logger.info(f"Status of KogitoApp {key} updated: {', '.join(changed)}")
                self.sensor.on_status_update(current.name, current.namespace, changed)
                result.updated = True
        except ApiException as ex:
            self.logger.error(f"Failed to update status of KogitoApp {key}: {ex}")
            if result.error is None:
                result.error = ex
        return result
