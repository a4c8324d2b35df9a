import kopf
import logging
import kogito.handlers.kogitoapp as kogitoapp
import kogito.handlers.probes as probes
from kogito.types.settings import Settings
from kogito.resources import (
    ResourceClient,
    ResourceSynchronizer,
    BuildTrigger,
    StatusManager,
)
from kogito.controller import KogitoAppReconciler, ReconcileQueue
from kogito.sensors import init_metrics_server, SensorDelegate, PrometheusMonitor
from kubernetes_asyncio import config
from kubernetes_asyncio.client.api_client import ApiClient


@kopf.on.startup()
async def setup(
    settings: kopf.OperatorSettings, memo: kopf.Memo, logger: logging.Logger, **kwargs
):
    # Load Kubernetes config - try in-cluster first (for production), then local kubeconfig (for dev)
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        logger.info("In-cluster config not found, trying local kubeconfig")
        try:
            await config.load_kube_config()
            logger.info("Loaded local Kubernetes configuration")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    memo.conf = Settings()

    # Create a shared ApiClient for all resources to prevent connection leaks
    shared_client = ApiClient()
    ResourceClient.shared_api_client = shared_client
    client = ResourceClient()
    logger.info("Shared Kubernetes API client initialized")

    # Initialize sensor infrastructure
    sensor_delegate = SensorDelegate()
    sensor_delegate.add(PrometheusMonitor())
    memo.sensor = sensor_delegate
    logger.info("Sensor infrastructure initialized with PrometheusMonitor")

    # Initialize Prometheus metrics server
    try:
        init_metrics_server()
    except Exception as e:
        logger.error(f"Failed to start metrics server: {e}")
        # Don't fail operator startup if metrics server fails
        logger.warning("Continuing without metrics server")

    memo.reconciler = KogitoAppReconciler(
        client,
        ResourceSynchronizer(client, memo.conf, logger=logger, sensor=sensor_delegate),
        BuildTrigger(client, logger=logger, sensor=sensor_delegate),
        StatusManager(client, logger=logger, sensor=sensor_delegate),
        logger=logger,
        settings=memo.conf,
        sensor=sensor_delegate,
    )
    memo.queue = ReconcileQueue(
        memo.reconciler.reconcile,
        workers=memo.conf.reconcile_workers,
        backoff_base=memo.conf.error_backoff_base_seconds,
        backoff_max=memo.conf.error_backoff_max_seconds,
        logger=logger,
        sensor=sensor_delegate,
    )
    memo.queue.start()

    # Limit the number of concurrent workers to prevent flooding the API
    settings.batching.worker_limit = memo.conf.reconcile_workers

    # Post only warnings and errors as Kubernetes events
    settings.posting.enabled = True
    settings.posting.level = logging.WARNING


@kopf.on.cleanup()
async def cleanup(memo: kopf.Memo, logger: logging.Logger, **kwargs):
    """Cleanup handler for operator shutdown."""
    logger.info("Shutting down operator...")

    queue = getattr(memo, "queue", None)
    if queue is not None:
        await queue.stop()

    # Close the shared API client
    if ResourceClient.shared_api_client is not None:
        await ResourceClient.shared_api_client.close()
        ResourceClient.shared_api_client = None
        logger.info("Shared API client closed")

    logger.info("Operator shutdown complete")


__all__ = [
    "kogitoapp",
    "probes",
]
