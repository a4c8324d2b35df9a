"""Prometheus monitoring backend for the Kogito operator.

PrometheusMonitor turns operator lifecycle events into Prometheus metrics:

1. Reconciliation loop health - duration, outcome, errors, queue depth and wait
2. Dependent object sync - create/adopt/patch counts and latency per kind
3. Builds triggered and status updates written

All metrics carry app_name and namespace labels.
"""

from typing import Dict, List, Optional, Any
import time
import logging

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, REGISTRY

from kogito.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class PrometheusMonitor(OperatorSensor):
    """Prometheus metrics monitor for the Kogito operator.

    Example:
        monitor = PrometheusMonitor()
        state = monitor.on_reconcile_start("my-app", "default", "queue")
        monitor.on_reconcile_complete("my-app", "default", state, "done")
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        super().__init__()

        # =============================================================================
        # Reconciliation Loop Metrics
        # =============================================================================

        self.reconcile_duration = Histogram(
            'kogitoop_reconcile_duration_seconds',
            'Time spent in one reconciliation pass',
            labelnames=['app_name', 'namespace', 'trigger_source', 'result'],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=registry,
        )

        self.reconcile_total = Counter(
            'kogitoop_reconcile_total',
            'Total number of reconciliation passes',
            labelnames=['app_name', 'namespace', 'trigger_source', 'result'],
            registry=registry,
        )

        self.reconcile_errors = Counter(
            'kogitoop_reconcile_errors_total',
            'Total number of failed reconciliation passes',
            labelnames=['app_name', 'namespace', 'error_type'],
            registry=registry,
        )

        self.reconcile_queue_depth = Gauge(
            'kogitoop_reconcile_queue_depth',
            'Number of apps waiting for reconciliation',
            registry=registry,
        )

        self.reconcile_queue_wait_seconds = Histogram(
            'kogitoop_reconcile_queue_wait_seconds',
            'Time spent waiting in the reconciliation queue',
            labelnames=['app_name', 'namespace'],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0],
            registry=registry,
        )

        # =============================================================================
        # Dependent Object Sync Metrics
        # =============================================================================

        self.resource_sync_duration = Histogram(
            'kogitoop_resource_sync_duration_seconds',
            'Time spent creating or patching owned objects',
            labelnames=['app_name', 'namespace', 'resource_type', 'operation', 'result'],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
            registry=registry,
        )

        self.resource_sync_total = Counter(
            'kogitoop_resource_sync_total',
            'Total number of owned object operations',
            labelnames=['app_name', 'namespace', 'resource_type', 'operation', 'result'],
            registry=registry,
        )

        # =============================================================================
        # Build & Status Metrics
        # =============================================================================

        self.builds_triggered = Counter(
            'kogitoop_builds_triggered_total',
            'Total number of builds started by the operator',
            labelnames=['app_name', 'namespace', 'build_config', 'result'],
            registry=registry,
        )

        self.status_updates = Counter(
            'kogitoop_status_updates_total',
            'Total number of status updates',
            labelnames=['app_name', 'namespace', 'update_field'],
            registry=registry,
        )

        logger.info("PrometheusMonitor initialized with all metrics")

    # =============================================================================
    # Reconciliation Lifecycle Hooks
    # =============================================================================

    def on_reconcile_start(
        self, app_name: str, namespace: str, trigger_source: str
    ) -> Optional[Dict[str, Any]]:
        return {
            'start_time': time.time(),
            'trigger_source': trigger_source,
        }

    def on_reconcile_complete(
        self,
        app_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        result: str,
        error: Optional[Exception] = None,
    ) -> None:
        if state:
            duration = time.time() - state['start_time']
            labels = dict(
                app_name=app_name,
                namespace=namespace,
                trigger_source=state['trigger_source'],
                result=result,
            )
            self.reconcile_duration.labels(**labels).observe(duration)
            self.reconcile_total.labels(**labels).inc()

        if error:
            self.reconcile_errors.labels(
                app_name=app_name,
                namespace=namespace,
                error_type=error.__class__.__name__,
            ).inc()

    def on_reconcile_queued(self, app_name: str, namespace: str, queue_depth: int) -> None:
        self.reconcile_queue_depth.set(queue_depth)

    def on_reconcile_dequeued(
        self, app_name: str, namespace: str, wait_time: float, queue_depth: int
    ) -> None:
        self.reconcile_queue_depth.set(queue_depth)
        self.reconcile_queue_wait_seconds.labels(
            app_name=app_name, namespace=namespace
        ).observe(wait_time)

    # =============================================================================
    # Dependent Object Hooks
    # =============================================================================

    def on_resource_sync_start(
        self, app_name: str, resource_name: str, namespace: str, resource_type: str
    ) -> Optional[Dict[str, Any]]:
        return {'start_time': time.time()}

    def on_resource_sync_complete(
        self,
        app_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
        state: Optional[Dict[str, Any]],
        operation: str,
        success: bool,
    ) -> None:
        labels = dict(
            app_name=app_name,
            namespace=namespace,
            resource_type=resource_type,
            operation=operation,
            result='success' if success else 'failure',
        )
        if state:
            self.resource_sync_duration.labels(**labels).observe(
                time.time() - state['start_time']
            )
        self.resource_sync_total.labels(**labels).inc()

    # =============================================================================
    # Build & Status Hooks
    # =============================================================================

    def on_build_triggered(
        self, app_name: str, namespace: str, build_config: str, success: bool
    ) -> None:
        self.builds_triggered.labels(
            app_name=app_name,
            namespace=namespace,
            build_config=build_config,
            result='success' if success else 'failure',
        ).inc()

    def on_status_update(
        self, app_name: str, namespace: str, update_fields: List[str]
    ) -> None:
        for field in update_fields:
            self.status_updates.labels(
                app_name=app_name, namespace=namespace, update_field=field
            ).inc()
