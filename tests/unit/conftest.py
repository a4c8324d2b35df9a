"""Shared fixtures for controller tests.

FakeResourceClient keeps cluster objects in memory so the synchronizer, status
manager and reconciler can run end to end without an API server.
"""

import copy
import json
import pytest
from typing import Dict, List, Optional, Tuple
from kubernetes_asyncio.client import ApiException
from kogito.resources import KogitoApp
from kogito.types.models import NamespacedName, ObjectKind, KOGITO_APP


def api_error(status: int, reason: str) -> ApiException:
    ex = ApiException(status=status, reason=reason)
    ex.body = json.dumps({"kind": "Status", "reason": reason, "message": reason})
    return ex


def make_app_body(
    name: str = "example",
    namespace: str = "test-ns",
    spec: Dict = None,
    status: Dict = None,
    generation: int = 1,
) -> Dict:
    return {
        "apiVersion": KOGITO_APP.api_version,
        "kind": KOGITO_APP.kind,
        "metadata": {
            "name": name,
            "namespace": namespace,
            "uid": f"{name}-uid",
            "generation": generation,
        },
        "spec": spec
        if spec is not None
        else {
            "runtime": "quarkus",
            "build": {"gitSource": {"uri": "https://github.com/kiegroup/kogito-examples"}},
        },
        "status": status or {},
    }


class FakeResourceClient:
    """In-memory stand-in for ResourceClient."""

    def __init__(self):
        self.objects: Dict[Tuple[str, str, str], Dict] = {}
        self.builds: List[Dict] = []
        self.calls: List[Tuple] = []
        self.create_errors: Dict[str, ApiException] = {}
        self.patch_errors: Dict[str, ApiException] = {}
        self.status_error: Optional[ApiException] = None
        self.build_error: Optional[ApiException] = None

    def put(self, kind: ObjectKind, body: Dict) -> Dict:
        meta = body["metadata"]
        self.objects[(kind.kind, meta["namespace"], meta["name"])] = copy.deepcopy(body)
        return body

    def add_app(self, body: Dict) -> Dict:
        return self.put(KOGITO_APP, body)

    def stored(self, kind: ObjectKind, name: str, namespace: str = "test-ns") -> Optional[Dict]:
        return self.objects.get((kind.kind, namespace, name))

    def calls_of(self, method: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == method]

    async def fetch_app(self, key: NamespacedName) -> Optional[KogitoApp]:
        self.calls.append(("fetch_app", key))
        body = self.stored(KOGITO_APP, key.name, key.namespace)
        if body is None:
            return None
        return KogitoApp.from_body(copy.deepcopy(body))

    async def patch_app_status(self, key: NamespacedName, status: Dict) -> Dict:
        self.calls.append(("patch_app_status", key, copy.deepcopy(status)))
        if self.status_error is not None:
            raise self.status_error
        body = self.stored(KOGITO_APP, key.name, key.namespace)
        body["status"] = copy.deepcopy(status)
        return copy.deepcopy(body)

    async def get(self, kind: ObjectKind, name: str, namespace: str) -> Optional[Dict]:
        self.calls.append(("get", kind.kind, name))
        body = self.stored(kind, name, namespace)
        return copy.deepcopy(body) if body is not None else None

    async def create(self, kind: ObjectKind, namespace: str, body: Dict) -> Dict:
        name = body["metadata"]["name"]
        self.calls.append(("create", kind.kind, name))
        error = self.create_errors.get(f"{kind.kind}/{name}")
        if error is not None:
            raise error
        if self.stored(kind, name, namespace) is not None:
            raise api_error(409, "AlreadyExists")
        created = copy.deepcopy(body)
        created["metadata"]["namespace"] = namespace
        self.put(kind, created)
        return copy.deepcopy(created)

    async def patch(self, kind: ObjectKind, name: str, namespace: str, body: Dict) -> Dict:
        self.calls.append(("patch", kind.kind, name))
        error = self.patch_errors.get(f"{kind.kind}/{name}")
        if error is not None:
            raise error
        stored = self.stored(kind, name, namespace)
        stored["metadata"].update(copy.deepcopy(body.get("metadata", {})))
        stored["spec"] = copy.deepcopy(body["spec"])
        return copy.deepcopy(stored)

    async def list(self, kind: ObjectKind, namespace: str, label_selector: str = None):
        self.calls.append(("list", kind.kind, label_selector))
        key, _, value = (label_selector or "").partition("=")
        return [
            copy.deepcopy(build)
            for build in self.builds
            if build["metadata"].get("labels", {}).get(key) == value
        ]

    async def instantiate_build(self, name: str, namespace: str, request: Dict) -> Dict:
        self.calls.append(("instantiate_build", name, copy.deepcopy(request)))
        if self.build_error is not None:
            raise self.build_error
        build_name = f"{name}-{len(self.calls_of('instantiate_build'))}"
        return {"kind": "Build", "metadata": {"name": build_name, "namespace": namespace}}


def make_build(name: str, build_config: str, phase: str) -> Dict:
    return {
        "kind": "Build",
        "metadata": {"name": name, "labels": {"buildconfig": build_config}},
        "status": {"phase": phase},
    }


@pytest.fixture
def client():
    return FakeResourceClient()


@pytest.fixture
def app_key():
    return NamespacedName("test-ns", "example")
