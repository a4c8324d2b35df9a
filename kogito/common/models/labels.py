from typing import Dict


class ResourceLabels:
    KOGITO_DOMAIN: str = "app.kiegroup.org/"

    KOGITO_APP_LABEL = KOGITO_DOMAIN + "app"

    KOGITO_RUNTIME_LABEL = KOGITO_DOMAIN + "runtime"

    #: Label OpenShift puts on every Build started from a BuildConfig
    BUILD_CONFIG_LABEL = "buildconfig"

    APP_LABEL = "app"


class Labels(ResourceLabels):
    KUBERNETES_DOMAIN = "app.kubernetes.io/"

    KUBERNETES_NAME_LABEL = KUBERNETES_DOMAIN + "name"

    KUBERNETES_INSTANCE_LABEL = KUBERNETES_DOMAIN + "instance"

    KUBERNETES_PART_OF_LABEL = KUBERNETES_DOMAIN + "part-of"

    KUBERNETES_MANAGED_BY_LABEL = KUBERNETES_DOMAIN + "managed-by"

    APPLICATION_NAME = "kogito"

    _labels: Dict[str, str]

    def __init__(self, labels: Dict[str, str] = None) -> None:
        self._labels = labels if labels else dict()

    def update(self, labels: Dict[str, str]) -> "Labels":
        self._labels.update(labels.copy())
        return self

    def as_dict(self) -> Dict[str, str]:
        """Return labels as dictionary."""
        return self._labels.copy()

    def include(self, label: str, value: str) -> "Labels":
        self.update({label: value})
        return self

    def include_app(self, app_name: str) -> "Labels":
        return self.include(self.APP_LABEL, app_name)

    def include_kogito_app(self, app_name: str) -> "Labels":
        return self.include(self.KOGITO_APP_LABEL, app_name)

    def include_kogito_runtime(self, runtime: str) -> "Labels":
        return self.include(self.KOGITO_RUNTIME_LABEL, runtime)

    def include_kubernetes_name(self, name: str) -> "Labels":
        return self.include(self.KUBERNETES_NAME_LABEL, name)

    def include_kubernetes_instance(self, instance_name: str) -> "Labels":
        return self.include(self.KUBERNETES_INSTANCE_LABEL, instance_name)

    def include_kubernetes_part_of(self, instance_name: str) -> "Labels":
        return self.include(
            self.KUBERNETES_PART_OF_LABEL,
            self.get_or_valid_instance_label_value(
                f"{self.APPLICATION_NAME}-{instance_name}"
            ),
        )

    def include_kubernetes_managed_by(self, operator_name: str) -> "Labels":
        return self.include(self.KUBERNETES_MANAGED_BY_LABEL, operator_name)

    def get_or_valid_instance_label_value(self, instance: str):
        """Validates the instance name and if needed modifies it to make it a valid Label value:
        * (([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?
        * 63 characters max
        """
        if not instance:
            return ""
        return instance[:63].rstrip(".-_")

    def __str__(self):
        return f"Labels<{self._labels}>"

    @classmethod
    def generate_default_labels(
        cls,
        app_name: str,
        runtime: str,
        managed_by: str,
    ) -> "Labels":
        labels = Labels()
        return (
            labels.include_app(app_name)
            .include_kogito_app(app_name)
            .include_kogito_runtime(runtime)
            .include_kubernetes_name(app_name)
            .include_kubernetes_instance(app_name)
            .include_kubernetes_part_of(app_name)
            .include_kubernetes_managed_by(managed_by)
        )
