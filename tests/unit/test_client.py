"""Unit tests for ResourceClient against the kubernetes_asyncio request layer."""

import asyncio
import json
import pytest
from unittest.mock import AsyncMock, Mock, patch
from kubernetes_asyncio.client import ApiException, Configuration
from kubernetes_asyncio.client.api_client import ApiClient
from kogito.resources import BuildTrigger, ResourceClient, SyncedResource
from kogito.types.models import BUILD_CONFIG, DEPLOYMENT_CONFIG, ROUTE, NamespacedName

HOST = "https://cluster.local"


class FakeResponse:
    """Stands in for the RESTResponse returned by ApiClient.request."""

    def __init__(self, status=200, body=None):
        self.status = status
        self.reason = "OK"
        self.data = json.dumps(body if body is not None else {}).encode("utf-8")
        self.headers = {"content-type": "application/json"}

    def getheader(self, name, default=None):
        return self.headers.get(name.lower(), default)

    def getheaders(self):
        return self.headers


def not_found():
    ex = ApiException(status=404, reason="Not Found")
    ex.body = b'{"kind": "Status", "reason": "NotFound"}'
    return ex


def run_with_client(scenario, response=None, error=None):
    """Run `scenario(client)` with a real ApiClient whose transport is mocked.

    Returns the scenario result and the mocked request.
    """

    async def main():
        async with ApiClient(Configuration(host=HOST)) as api_client:
            request = AsyncMock(return_value=response, side_effect=error)
            with patch.object(api_client, "request", request):
                result = await scenario(ResourceClient(api_client))
            return result, request

    return asyncio.run(main())


class TestInstantiateBuild:
    def test_posts_build_request_and_returns_build(self):
        build = {"kind": "Build", "metadata": {"name": "example-builder-1"}}
        request_body = {"kind": "BuildRequest", "metadata": {"name": "example-builder"}}

        result, request = run_with_client(
            lambda client: client.instantiate_build("example-builder", "test-ns", request_body),
            response=FakeResponse(201, build),
        )

        assert result == build
        method, url = request.call_args[0]
        assert method == "POST"
        assert url == (
            f"{HOST}/apis/build.openshift.io/v1"
            "/namespaces/test-ns/buildconfigs/example-builder/instantiate"
        )
        assert request.call_args[1]["body"] == request_body
        assert request.call_args[1]["headers"]["Content-Type"] == "application/json"

    def test_trigger_returns_the_new_build_name(self):
        build = {"kind": "Build", "metadata": {"name": "example-builder-1"}}
        sensor = Mock()
        config = SyncedResource(
            BUILD_CONFIG, {"metadata": {"name": "example-builder", "namespace": "test-ns"}}
        )

        result, _ = run_with_client(
            lambda client: BuildTrigger(client, sensor=sensor).trigger(config, "example"),
            response=FakeResponse(201, build),
        )

        assert result == "example-builder-1"
        sensor.on_build_triggered.assert_called_once_with(
            "example", "test-ns", "example-builder", True
        )

    def test_trigger_reports_any_failure(self):
        sensor = Mock()
        config = SyncedResource(
            BUILD_CONFIG, {"metadata": {"name": "example-builder", "namespace": "test-ns"}}
        )
        client = Mock()
        client.instantiate_build = AsyncMock(side_effect=TypeError("bad call"))

        with pytest.raises(TypeError):
            asyncio.run(BuildTrigger(client, sensor=sensor).trigger(config, "example"))

        sensor.on_build_triggered.assert_called_once_with(
            "example", "test-ns", "example-builder", False
        )


class TestPatch:
    def test_status_patch_is_a_merge_patch(self):
        key = NamespacedName("test-ns", "example")
        status = {"conditions": [], "route": "http://example.apps"}

        _, request = run_with_client(
            lambda client: client.patch_app_status(key, status),
            response=FakeResponse(200, {"status": status}),
        )

        method, url = request.call_args[0]
        assert method == "PATCH"
        assert url == (
            f"{HOST}/apis/app.kiegroup.org/v1alpha1"
            "/namespaces/test-ns/kogitoapps/example/status"
        )
        assert request.call_args[1]["headers"]["Content-Type"] == "application/merge-patch+json"
        assert request.call_args[1]["body"] == {"status": status}

    def test_object_patch_is_a_merge_patch(self):
        body = {"spec": {"replicas": 2}}

        result, request = run_with_client(
            lambda client: client.patch(DEPLOYMENT_CONFIG, "example", "test-ns", body),
            response=FakeResponse(200, {"kind": "DeploymentConfig", **body}),
        )

        assert result["spec"] == {"replicas": 2}
        method, url = request.call_args[0]
        assert method == "PATCH"
        assert url.endswith("/apis/apps.openshift.io/v1/namespaces/test-ns/deploymentconfigs/example")
        assert request.call_args[1]["headers"]["Content-Type"] == "application/merge-patch+json"


class TestRead:
    def test_get_returns_the_object(self):
        route = {"kind": "Route", "metadata": {"name": "example"}}

        result, request = run_with_client(
            lambda client: client.get(ROUTE, "example", "test-ns"),
            response=FakeResponse(200, route),
        )

        assert result == route
        method, url = request.call_args[0]
        assert method == "GET"
        assert url.endswith("/apis/route.openshift.io/v1/namespaces/test-ns/routes/example")

    def test_get_missing_object_is_none(self):
        result, _ = run_with_client(
            lambda client: client.get(ROUTE, "example", "test-ns"),
            error=not_found(),
        )
        assert result is None

    def test_fetch_missing_app_is_none(self):
        result, _ = run_with_client(
            lambda client: client.fetch_app(NamespacedName("test-ns", "example")),
            error=not_found(),
        )
        assert result is None

    def test_other_errors_propagate(self):
        error = ApiException(status=403, reason="Forbidden")
        error.body = b'{"kind": "Status", "reason": "Forbidden"}'

        with pytest.raises(ApiException) as exc_info:
            run_with_client(lambda client: client.get(ROUTE, "example", "test-ns"), error=error)

        assert exc_info.value.status == 403

    def test_list_returns_items(self):
        items = [{"metadata": {"name": "example-builder-1"}}]

        result, request = run_with_client(
            lambda client: client.list(
                BUILD_CONFIG, "test-ns", label_selector="buildconfig=example-builder"
            ),
            response=FakeResponse(200, {"kind": "BuildConfigList", "items": items}),
        )

        assert result == items
        assert ("labelSelector", "buildconfig=example-builder") in request.call_args[1][
            "query_params"
        ]
