import logging
from logging import Logger
from kogito.resources.client import ResourceClient
from kogito.resources.synchronizer import SyncedResource
from kogito.sensors import OperatorSensor
from kogito.types.models import BUILD_CONFIG


class BuildTrigger:
    """Starts OpenShift builds on behalf of a KogitoApp."""

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

    def prepare_build_request(self, build_config: SyncedResource, app_name: str):
        return {
            "kind": "BuildRequest",
            "apiVersion": BUILD_CONFIG.api_version,
            "metadata": {"name": build_config.name},
            "triggeredBy": [{"message": f"Triggered by the {app_name} KogitoApp"}],
        }

    async def trigger(self, build_config: SyncedResource, app_name: str) -> str:
        """Instantiate a new Build from `build_config` and return its name."""
        namespace = build_config.body["metadata"].get("namespace")
        request = self.prepare_build_request(build_config, app_name)
        try:
            build = await self.client.instantiate_build(
                build_config.name, namespace, request
            )
        except Exception:
            self.sensor.on_build_triggered(app_name, namespace, build_config.name, False)
            raise
        self.sensor.on_build_triggered(app_name, namespace, build_config.name, True)
        build_name = ((build or {}).get("metadata") or {}).get("name")
        self.logger.info(f"Build '{build_name}' started from '{build_config.name}'")
        return build_name
