"""Default build resource limits and runtime selection for KogitoApps."""

from typing import Dict, List
from kogito.types.models import (
    KogitoAppBuildObject,
    ResourceKind,
    ResourceMap,
    RuntimeType,
)

#: Build limits applied to JVM builds when the app does not set them
DEFAULT_BUILD_LIMITS = {
    ResourceKind.CPU: "500m",
    ResourceKind.MEMORY: "1Gi",
}

#: Native builds run GraalVM native-image and need considerably more
DEFAULT_NATIVE_BUILD_LIMITS = {
    ResourceKind.CPU: "1",
    ResourceKind.MEMORY: "4Gi",
}


def default_build_limits(native: bool) -> List[ResourceMap]:
    """Fresh ResourceMap instances holding the default build limits."""
    defaults: Dict[str, str] = DEFAULT_NATIVE_BUILD_LIMITS if native else DEFAULT_BUILD_LIMITS
    return [ResourceMap(resource=kind, value=value) for kind, value in defaults.items()]


def set_default_build_limits(build: KogitoAppBuildObject) -> None:
    """Add the default CPU and memory limits the build does not declare.

    Declared limits are never replaced and limits of other kinds are kept as is.
    """
    limits = build.resources.limits
    if not limits:
        build.resources.limits = default_build_limits(build.native)
        return

    declared = {entry.resource for entry in limits}
    for default in default_build_limits(build.native):
        if default.resource not in declared:
            limits.append(default)


def normalize_runtime(runtime: str) -> str:
    if runtime == RuntimeType.SPRINGBOOT:
        return RuntimeType.SPRINGBOOT
    return RuntimeType.QUARKUS
