import mmh3
import hashlib
from typing import Any, Dict, List, Optional, Union
from kogito.utils.helpers import canonicalize_dict
from kogito.utils.errors import not_found_error
from kubernetes_asyncio.client import (
    ApiException,
    CoreV1Api,
    CustomObjectsApi,
)

RESOURCE_HASH_ANNOTATION = "app.kiegroup.org/resource-hash"
MERGE_PATCH = "application/merge-patch+json"


class BaseResource:
    """Low level access to cluster objects.

    Reads return ``None`` when the object does not exist; every other API
    error is raised to the caller.
    """

    KOGITO_OPERATOR_NAME = "kogito-operator"

    def compute_hash(self, data: Any) -> str:
        """Compute a murmur3 hash."""
        if isinstance(data, dict):
            _data = canonicalize_dict(data)
        elif isinstance(data, str):
            _data = data.encode()
        else:
            raise ValueError(f"Hash of {type(data)} is not supported.")
        mumur_str = str(mmh3.hash128(_data))

        hash_obj = hashlib.sha256(mumur_str.encode("utf-8"))
        full_hash = hash_obj.hexdigest()

        # First 16 characters fit comfortably in an annotation value
        return full_hash[:16]

    def prepare_hash_annotation(self, hash: Union[str, int]) -> Dict[str, str]:
        """Prepare hash annotation for k8s resources."""
        return {RESOURCE_HASH_ANNOTATION: str(hash)}

    async def fetch_service(
        self, core_v1_api: CoreV1Api, name: str, namespace: str
    ) -> Optional[Dict]:
        """Retrieve the latest state of a service"""
        try:
            service = await core_v1_api.read_namespaced_service(
                name=name, namespace=namespace
            )
        except ApiException as ex:
            if not_found_error(ex):
                return None
            raise
        return core_v1_api.api_client.sanitize_for_serialization(service)

    async def create_service(
        self, core_v1_api: CoreV1Api, namespace: str, service: Dict
    ) -> Dict:
        created = await core_v1_api.create_namespaced_service(
            namespace=namespace, body=service
        )
        return core_v1_api.api_client.sanitize_for_serialization(created)

    async def patch_service(
        self, core_v1_api: CoreV1Api, name: str, namespace: str, service: Dict
    ) -> Dict:
        patched = await core_v1_api.patch_namespaced_service(
            name=name,
            namespace=namespace,
            body=service,
        )
        return core_v1_api.api_client.sanitize_for_serialization(patched)

    async def get_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
    ) -> Optional[Dict]:
        try:
            return await custom_objects_api.get_namespaced_custom_object(
                group=group,
                version=version,
                namespace=namespace,
                plural=plural,
                name=name,
            )
        except ApiException as ex:
            if not_found_error(ex):
                return None
            raise

    async def create_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        body: Dict,
    ) -> Dict:
        return await custom_objects_api.create_namespaced_custom_object(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            body=body,
        )

    async def patch_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
        body: Dict,
    ) -> Dict:
        return await custom_objects_api.patch_namespaced_custom_object(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            name=name,
            body=body,
            _content_type=MERGE_PATCH,
        )

    async def patch_custom_object_status(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
        body: Dict,
    ) -> Dict:
        return await custom_objects_api.patch_namespaced_custom_object_status(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            name=name,
            body=body,
            _content_type=MERGE_PATCH,
        )

    async def list_custom_objects(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        label_selector: str = None,
    ) -> List[Dict]:
        result = await custom_objects_api.list_namespaced_custom_object(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            label_selector=label_selector,
        )
        return result.get("items", []) if result else []
