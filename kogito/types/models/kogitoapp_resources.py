from typing import NamedTuple


class NamespacedName(NamedTuple):
    """Identifier of a namespaced object, delivered to the reconciler."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class KogitoAppResources:
    """Encapsulates the naming scheme used for the objects which the operator manages
    for a KogitoApp."""

    @classmethod
    def build_config_s2i_name(self, app_name: str):
        """Returns the name of the BuildConfig compiling the app sources."""
        return f"{app_name}-builder"

    @classmethod
    def build_config_runtime_name(self, app_name: str):
        """Returns the name of the BuildConfig assembling the runtime image."""
        return app_name

    @classmethod
    def image_stream_s2i_name(self, app_name: str):
        return self.build_config_s2i_name(app_name)

    @classmethod
    def image_stream_runtime_name(self, app_name: str):
        return app_name

    @classmethod
    def deployment_config_name(self, app_name: str):
        return app_name

    @classmethod
    def service_name(self, app_name: str):
        return app_name

    @classmethod
    def route_name(self, app_name: str):
        return app_name
