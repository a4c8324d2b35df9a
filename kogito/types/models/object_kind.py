from typing import NamedTuple


class ObjectKind(NamedTuple):
    """API coordinates of a kind of cluster object."""

    group: str
    version: str
    plural: str
    kind: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def is_core(self) -> bool:
        return not self.group

    def __str__(self) -> str:
        return self.kind


KOGITO_APP = ObjectKind("app.kiegroup.org", "v1alpha1", "kogitoapps", "KogitoApp")
BUILD_CONFIG = ObjectKind("build.openshift.io", "v1", "buildconfigs", "BuildConfig")
BUILD = ObjectKind("build.openshift.io", "v1", "builds", "Build")
IMAGE_STREAM = ObjectKind("image.openshift.io", "v1", "imagestreams", "ImageStream")
DEPLOYMENT_CONFIG = ObjectKind(
    "apps.openshift.io", "v1", "deploymentconfigs", "DeploymentConfig"
)
ROUTE = ObjectKind("route.openshift.io", "v1", "routes", "Route")
SERVICE = ObjectKind("", "v1", "services", "Service")
