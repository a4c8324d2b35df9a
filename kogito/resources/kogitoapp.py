import copy
from typing import Dict, Optional
from kogito.types.models import (
    KogitoAppSpec,
    NamespacedName,
    KogitoAppResources,
    KOGITO_APP,
)
from kogito.types.schemas import KogitoAppSpecSchema
from kogito.common.models.labels import Labels


class KogitoApp:
    """In-process snapshot of a KogitoApp custom resource.

    The snapshot is read, defaulted in memory and discarded at the end of a
    reconciliation. Durable changes only go through the resource client.
    """

    KIND = KOGITO_APP.kind
    API_VERSION = KOGITO_APP.api_version
    KOGITO_OPERATOR_NAME = "kogito-operator"

    name: str
    namespace: str
    uid: Optional[str]
    generation: int
    body: Dict
    spec: KogitoAppSpec
    status: Dict

    def __init__(self, body: Dict, spec: KogitoAppSpec):
        metadata = body.get("metadata") or {}
        self.body = body
        self.name = metadata.get("name")
        self.namespace = metadata.get("namespace")
        self.uid = metadata.get("uid")
        self.generation = metadata.get("generation", 0)
        self.spec = spec
        self.status = copy.deepcopy(body.get("status") or {})

    @classmethod
    def from_body(cls, body: Dict) -> "KogitoApp":
        """Build a snapshot from the raw object returned by the API server."""
        spec = KogitoAppSpecSchema().load(body.get("spec") or {})
        return cls(body, spec)

    @property
    def key(self) -> NamespacedName:
        return NamespacedName(self.namespace, self.name)

    @property
    def labels(self) -> Labels:
        """Labels applied to every object owned by this app.

        User labels never replace the operator labels, selectors depend on them.
        """
        labels = Labels(dict(self.spec.service.labels or {}))
        return labels.update(
            Labels.generate_default_labels(
                self.name, self.spec.runtime, self.KOGITO_OPERATOR_NAME
            ).as_dict()
        )

    @property
    def owner(self) -> Dict:
        """Minimal body identifying this app as the owner of another object."""
        return {
            "apiVersion": self.API_VERSION,
            "kind": self.KIND,
            "metadata": {"name": self.name, "uid": self.uid},
        }

    @property
    def build_config_s2i_name(self) -> str:
        return KogitoAppResources.build_config_s2i_name(self.name)

    @property
    def build_config_runtime_name(self) -> str:
        return KogitoAppResources.build_config_runtime_name(self.name)

    @property
    def image_stream_s2i_name(self) -> str:
        return KogitoAppResources.image_stream_s2i_name(self.name)

    @property
    def image_stream_runtime_name(self) -> str:
        return KogitoAppResources.image_stream_runtime_name(self.name)

    @property
    def deployment_config_name(self) -> str:
        return KogitoAppResources.deployment_config_name(self.name)

    @property
    def service_name(self) -> str:
        return KogitoAppResources.service_name(self.name)

    @property
    def route_name(self) -> str:
        return KogitoAppResources.route_name(self.name)

    def __repr__(self) -> str:
        return f"<{self.KIND} {self.namespace}/{self.name}>"
