from typing import Optional, List, Dict
from kogito.types.base import BaseModel


class RuntimeType:
    """Supported runtimes of a KogitoApp."""

    QUARKUS = "quarkus"
    SPRINGBOOT = "springboot"


class ResourceKind:
    """Resource kinds that may be limited or requested."""

    CPU = "cpu"
    MEMORY = "memory"


class ResourceMap(BaseModel):
    """A single (resource kind, quantity) pair."""

    resource: str
    value: str


class Resources(BaseModel):
    limits: List[ResourceMap]
    requests: List[ResourceMap]


class Env(BaseModel):
    name: str
    value: Optional[str]


class GitSource(BaseModel):
    uri: str
    reference: Optional[str]
    context_dir: Optional[str]


class Image(BaseModel):
    """Image stream reference for builder and runtime images."""

    image_stream_name: Optional[str]
    image_stream_tag: Optional[str]
    image_stream_namespace: Optional[str]


class KogitoAppBuildObject(BaseModel):
    incremental: bool
    env: List[Env]
    git_source: GitSource
    resources: Resources
    image_s2i: Image
    image_runtime: Image
    native: bool


class KogitoAppServiceObject(BaseModel):
    labels: Dict[str, str]


class KogitoAppSpec(BaseModel):
    """KogitoApp CRD spec"""

    replicas: int
    env: List[Env]
    resources: Resources
    runtime: Optional[str]
    build: KogitoAppBuildObject
    service: KogitoAppServiceObject
