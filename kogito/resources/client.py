from typing import Dict, List, Optional
from kubernetes_asyncio.client import CoreV1Api, CustomObjectsApi
from kubernetes_asyncio.client.api_client import ApiClient
from kogito.resources.base import BaseResource
from kogito.resources.kogitoapp import KogitoApp
from kogito.utils.objects import cached_property
from kogito.types.models import (
    ObjectKind,
    NamespacedName,
    KOGITO_APP,
    BUILD_CONFIG,
)


class ResourceClient(BaseResource):
    """Fetches, creates and updates cluster objects by kind and key."""

    shared_api_client: ApiClient = None  # Shared across all clients

    _api_client: ApiClient = None

    def __init__(self, api_client: ApiClient = None):
        self._api_client = api_client

    @cached_property
    def api_client(self) -> ApiClient:
        if self._api_client is None:
            # Use the shared API client if available, otherwise create a new one
            if self.shared_api_client is not None:
                self._api_client = self.shared_api_client
            else:
                self._api_client = ApiClient()
        return self._api_client

    @cached_property
    def core_v1_api(self) -> CoreV1Api:
        return CoreV1Api(self.api_client)

    @cached_property
    def custom_objects_api(self) -> CustomObjectsApi:
        return CustomObjectsApi(self.api_client)

    async def fetch_app(self, key: NamespacedName) -> Optional[KogitoApp]:
        """Fetch the KogitoApp identified by `key`, or None if it no longer exists."""
        body = await self.get(KOGITO_APP, key.name, key.namespace)
        if body is None:
            return None
        return KogitoApp.from_body(body)

    async def patch_app_status(self, key: NamespacedName, status: Dict) -> Dict:
        return await self.patch_custom_object_status(
            self.custom_objects_api,
            key.namespace,
            KOGITO_APP.group,
            KOGITO_APP.version,
            KOGITO_APP.plural,
            key.name,
            {"status": status},
        )

    async def get(self, kind: ObjectKind, name: str, namespace: str) -> Optional[Dict]:
        # Service is the only core kind we manage
        if kind.is_core:
            return await self.fetch_service(self.core_v1_api, name, namespace)
        return await self.get_custom_object(
            self.custom_objects_api,
            namespace,
            kind.group,
            kind.version,
            kind.plural,
            name,
        )

    async def create(self, kind: ObjectKind, namespace: str, body: Dict) -> Dict:
        if kind.is_core:
            return await self.create_service(self.core_v1_api, namespace, body)
        return await self.create_custom_object(
            self.custom_objects_api,
            namespace,
            kind.group,
            kind.version,
            kind.plural,
            body,
        )

    async def patch(self, kind: ObjectKind, name: str, namespace: str, body: Dict) -> Dict:
        if kind.is_core:
            return await self.patch_service(self.core_v1_api, name, namespace, body)
        return await self.patch_custom_object(
            self.custom_objects_api,
            namespace,
            kind.group,
            kind.version,
            kind.plural,
            name,
            body,
        )

    async def list(
        self, kind: ObjectKind, namespace: str, label_selector: str = None
    ) -> List[Dict]:
        return await self.list_custom_objects(
            self.custom_objects_api,
            namespace,
            kind.group,
            kind.version,
            kind.plural,
            label_selector=label_selector,
        )

    async def instantiate_build(self, name: str, namespace: str, request: Dict) -> Dict:
        """Start a new Build from the BuildConfig `name`."""
        return await self.api_client.call_api(
            f"/apis/{BUILD_CONFIG.group}/{BUILD_CONFIG.version}"
            "/namespaces/{namespace}/buildconfigs/{name}/instantiate",
            "POST",
            path_params={"namespace": namespace, "name": name},
            query_params=[],
            header_params={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            body=request,
            response_types_map={200: "object", 201: "object"},
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
        )
