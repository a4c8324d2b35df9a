"""Base sensor classes for operator monitoring.

This module defines the base OperatorSensor class that provides lifecycle hooks
for monitoring operator events. All hooks are no-ops by default, allowing
subclasses to override only the events they care about.

The hook pattern follows Faust's sensor design:
- Hooks come in pairs: on_X_start() and on_X_complete()
- Start hooks return an optional state dict for tracking multi-phase operations
- Complete hooks receive the state dict from their corresponding start hook
"""

from typing import Dict, List, Optional, Any
import logging

logger = logging.getLogger(__name__)


class OperatorSensor:
    """Base sensor class for Kogito operator monitoring.

    Hooks cover three areas:
    1. Reconciliation lifecycle (one pass of the control loop, queueing)
    2. Dependent object operations (create/patch of owned objects)
    3. Builds and status updates

    Example:
        class LoggingSensor(OperatorSensor):
            def on_reconcile_start(self, app_name, namespace, trigger_source):
                return {'start_time': time.time()}

            def on_reconcile_complete(self, app_name, namespace, state, result, error=None):
                duration = time.time() - state['start_time']
                logger.info(f"Reconciled {app_name} in {duration}s")
    """

    # =============================================================================
    # Reconciliation Lifecycle Hooks
    # =============================================================================

    def on_reconcile_start(
        self,
        app_name: str,
        namespace: str,
        trigger_source: str,
    ) -> Optional[Dict[str, Any]]:
        """Called when a reconciliation pass begins.

        Args:
            app_name: KogitoApp resource name
            namespace: Kubernetes namespace
            trigger_source: What triggered reconciliation (queue, requeue, ...)

        Returns:
            Optional state dict passed to on_reconcile_complete
        """
        pass

    def on_reconcile_complete(
        self,
        app_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        result: str,
        error: Optional[Exception] = None,
    ) -> None:
        """Called when a reconciliation pass completes.

        Args:
            app_name: KogitoApp resource name
            namespace: Kubernetes namespace
            state: State dict returned from on_reconcile_start
            result: One of done, requeue, requeue_after, not_found, error
            error: Exception if reconciliation failed
        """
        pass

    def on_reconcile_queued(
        self, app_name: str, namespace: str, queue_depth: int
    ) -> None:
        """Called when a reconciliation request is queued."""
        pass

    def on_reconcile_dequeued(
        self, app_name: str, namespace: str, wait_time: float, queue_depth: int
    ) -> None:
        """Called when a reconciliation request is picked up by a worker.

        Args:
            wait_time: Time spent in queue (seconds)
            queue_depth: Requests still waiting after this one was taken
        """
        pass

    # =============================================================================
    # Dependent Object Hooks
    # =============================================================================

    def on_resource_sync_start(
        self,
        app_name: str,
        resource_name: str,
        namespace: str,
        resource_type: str,
    ) -> Optional[Dict[str, Any]]:
        """Called before an owned object is created or patched."""
        pass

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
        """Called after an owned object was created, adopted or patched.

        Args:
            operation: create, adopt or patch
            success: Whether the API call succeeded
        """
        pass

    # =============================================================================
    # Build & Status Hooks
    # =============================================================================

    def on_build_triggered(
        self,
        app_name: str,
        namespace: str,
        build_config: str,
        success: bool,
    ) -> None:
        """Called after the operator asked OpenShift to start a build."""
        pass

    def on_status_update(
        self, app_name: str, namespace: str, update_fields: List[str]
    ) -> None:
        """Called after the KogitoApp status was written."""
        pass
