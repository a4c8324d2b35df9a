from .kogitoapp_spec import (
    RuntimeType,
    ResourceKind,
    ResourceMap,
    Resources,
    Env,
    GitSource,
    Image,
    KogitoAppBuildObject,
    KogitoAppServiceObject,
    KogitoAppSpec,
)
from .kogitoapp_resources import NamespacedName, KogitoAppResources
from .object_kind import (
    ObjectKind,
    KOGITO_APP,
    BUILD_CONFIG,
    BUILD,
    IMAGE_STREAM,
    DEPLOYMENT_CONFIG,
    ROUTE,
    SERVICE,
)

__all__ = [
    "RuntimeType",
    "ResourceKind",
    "ResourceMap",
    "Resources",
    "Env",
    "GitSource",
    "Image",
    "KogitoAppBuildObject",
    "KogitoAppServiceObject",
    "KogitoAppSpec",
    "NamespacedName",
    "KogitoAppResources",
    "ObjectKind",
    "KOGITO_APP",
    "BUILD_CONFIG",
    "BUILD",
    "IMAGE_STREAM",
    "DEPLOYMENT_CONFIG",
    "ROUTE",
    "SERVICE",
]
