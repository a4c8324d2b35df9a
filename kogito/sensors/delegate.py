"""Sensor delegation for fan-out pattern.

SensorDelegate routes sensor events to several monitoring backends at once.
Each backend receives the same events and keeps its own state.
"""

from typing import Set, Dict, List, Optional, Any
import logging

from kogito.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class SensorDelegate(OperatorSensor):
    """Delegate sensor that fans out events to multiple backends.

    Start hooks return a dict keyed by sensor, so each backend gets back its own
    state in the matching complete hook.
    """

    def __init__(self) -> None:
        self._sensors: Set[OperatorSensor] = set()

    def add(self, sensor: OperatorSensor) -> None:
        logger.info(f"Adding sensor: {sensor.__class__.__name__}")
        self._sensors.add(sensor)

    def remove(self, sensor: OperatorSensor) -> None:
        logger.info(f"Removing sensor: {sensor.__class__.__name__}")
        self._sensors.discard(sensor)

    def clear(self) -> None:
        logger.info(f"Clearing {len(self._sensors)} sensors")
        self._sensors.clear()

    def _fan_out(self, hook: str, *args, **kwargs) -> None:
        for sensor in self._sensors:
            try:
                getattr(sensor, hook)(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}", exc_info=True
                )

    def _fan_out_start(self, hook: str, *args) -> Dict[OperatorSensor, Any]:
        states = {}
        for sensor in self._sensors:
            try:
                states[sensor] = getattr(sensor, hook)(*args)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}", exc_info=True
                )
        return states

    # =============================================================================
    # Reconciliation Lifecycle Hooks
    # =============================================================================

    def on_reconcile_start(
        self, app_name: str, namespace: str, trigger_source: str
    ) -> Optional[Dict[OperatorSensor, Any]]:
        return self._fan_out_start("on_reconcile_start", app_name, namespace, trigger_source)

    def on_reconcile_complete(
        self,
        app_name: str,
        namespace: str,
        state: Optional[Dict[OperatorSensor, Any]],
        result: str,
        error: Optional[Exception] = None,
    ) -> None:
        state = state or {}
        for sensor in self._sensors:
            try:
                sensor.on_reconcile_complete(
                    app_name, namespace, state.get(sensor), result, error
                )
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_reconcile_complete: {e}",
                    exc_info=True,
                )

    def on_reconcile_queued(self, app_name: str, namespace: str, queue_depth: int) -> None:
        self._fan_out("on_reconcile_queued", app_name, namespace, queue_depth)

    def on_reconcile_dequeued(
        self, app_name: str, namespace: str, wait_time: float, queue_depth: int
    ) -> None:
        self._fan_out(
            "on_reconcile_dequeued", app_name, namespace, wait_time, queue_depth
        )

    # =============================================================================
    # Dependent Object Hooks
    # =============================================================================

    def on_resource_sync_start(
        self, app_name: str, resource_name: str, namespace: str, resource_type: str
    ) -> Optional[Dict[OperatorSensor, Any]]:
        return self._fan_out_start(
            "on_resource_sync_start", app_name, resource_name, namespace, resource_type
        )

    def on_resource_sync_complete(
        self,
        app_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
        state: Optional[Dict[OperatorSensor, Any]],
        operation: str,
        success: bool,
    ) -> None:
        state = state or {}
        for sensor in self._sensors:
            try:
                sensor.on_resource_sync_complete(
                    app_name,
                    resource_name,
                    namespace,
                    resource_type,
                    state.get(sensor),
                    operation,
                    success,
                )
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_resource_sync_complete: {e}",
                    exc_info=True,
                )

    # =============================================================================
    # Build & Status Hooks
    # =============================================================================

    def on_build_triggered(
        self, app_name: str, namespace: str, build_config: str, success: bool
    ) -> None:
        self._fan_out("on_build_triggered", app_name, namespace, build_config, success)

    def on_status_update(
        self, app_name: str, namespace: str, update_fields: List[str]
    ) -> None:
        self._fan_out("on_status_update", app_name, namespace, update_fields)
