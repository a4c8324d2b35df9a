"""Kogito Operator Sensor Framework.

Non-invasive instrumentation of operator lifecycle events through hooks,
inspired by Faust's sensor architecture.

Key components:
- OperatorSensor: Base class defining lifecycle hooks (all no-ops)
- SensorDelegate: Fan-out to several sensor backends
- PrometheusMonitor: Prometheus metrics exporter

Usage:
    from kogito.sensors import SensorDelegate, PrometheusMonitor

    delegate = SensorDelegate()
    delegate.add(PrometheusMonitor())
"""

from kogito.sensors.base import OperatorSensor
from kogito.sensors.delegate import SensorDelegate
from kogito.sensors.prometheus import PrometheusMonitor
from kogito.sensors.server import init_metrics_server

__all__ = [
    'OperatorSensor',
    'SensorDelegate',
    'PrometheusMonitor',
    'init_metrics_server',
]
