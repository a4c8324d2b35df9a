"""Unit tests for KogitoAppManifests."""

import pytest
from conftest import make_app_body
from kogito.resources import KogitoApp, KogitoAppManifests
from kogito.resources.base import RESOURCE_HASH_ANNOTATION
from kogito.types.settings import Settings


def manifests_for(spec, **conf):
    app = KogitoApp.from_body(make_app_body(spec=spec))
    return KogitoAppManifests(app, Settings(**conf))


def build_spec(**build):
    return {"uri": "https://github.com/kiegroup/kogito-examples", **build}


class TestBuildConfigs:
    def test_builder_uses_default_s2i_image(self):
        manifests = manifests_for(
            {"runtime": "springboot", "build": {"gitSource": build_spec()}},
            default_image_registry="quay.io/kiegroup",
            default_image_tag="0.5.0",
        )
        bc = manifests.prepare_build_config_s2i()

        assert bc["metadata"]["name"] == "example-builder"
        image = bc["spec"]["strategy"]["sourceStrategy"]["from"]
        assert image == {
            "kind": "DockerImage",
            "name": "quay.io/kiegroup/kogito-springboot-ubi8-s2i:0.5.0",
        }
        assert bc["spec"]["output"]["to"]["name"] == "example-builder:latest"
        assert bc["spec"]["triggers"] == []

    def test_builder_git_source_and_native_flag(self):
        manifests = manifests_for(
            {
                "runtime": "quarkus",
                "build": {
                    "native": True,
                    "gitSource": build_spec(reference="main", contextDir="drools-quarkus"),
                    "resources": {"limits": [{"resource": "memory", "value": "4Gi"}]},
                },
            }
        )
        spec = manifests.prepare_build_config_s2i()["spec"]

        assert spec["source"]["git"]["ref"] == "main"
        assert spec["source"]["contextDir"] == "drools-quarkus"
        assert {"name": "NATIVE", "value": "true"} in spec["strategy"]["sourceStrategy"]["env"]
        assert spec["resources"]["limits"] == {"memory": "4Gi"}

    def test_user_image_stream_overrides_default(self):
        manifests = manifests_for(
            {
                "runtime": "quarkus",
                "build": {
                    "gitSource": build_spec(),
                    "imageRuntime": {"imageStreamName": "my-runtime", "imageStreamNamespace": "images"},
                },
            }
        )
        image = manifests.prepare_build_config_runtime()["spec"]["strategy"]["sourceStrategy"]["from"]

        assert image == {
            "kind": "ImageStreamTag",
            "name": "my-runtime:latest",
            "namespace": "images",
        }

    @pytest.mark.parametrize(
        "runtime, native, expected",
        [
            ("quarkus", False, "kogito-quarkus-jvm-ubi8"),
            ("quarkus", True, "kogito-quarkus-ubi8"),
            ("springboot", False, "kogito-springboot-ubi8"),
        ],
    )
    def test_default_runtime_image(self, runtime, native, expected):
        manifests = manifests_for(
            {"runtime": runtime, "build": {"native": native, "gitSource": build_spec()}}
        )
        assert manifests.default_runtime_image() == expected

    def test_runtime_build_is_fed_by_builder_image(self):
        manifests = manifests_for({"runtime": "quarkus", "build": {"gitSource": build_spec()}})
        spec = manifests.prepare_build_config_runtime()["spec"]

        assert spec["source"]["images"][0]["from"]["name"] == "example-builder:latest"
        assert spec["triggers"][0]["type"] == "ImageChange"


class TestDeployment:
    def test_deployment_config(self):
        manifests = manifests_for(
            {
                "runtime": "quarkus",
                "replicas": 2,
                "env": [{"name": "DEBUG", "value": "true"}],
                "build": {"gitSource": build_spec()},
            }
        )
        dc = manifests.prepare_deployment_config()
        container = dc["spec"]["template"]["spec"]["containers"][0]

        assert dc["spec"]["replicas"] == 2
        assert container["image"] == "example:latest"
        assert container["env"] == [{"name": "DEBUG", "value": "true"}]
        assert container["ports"][0]["containerPort"] == 8080

    def test_service_and_route(self):
        manifests = manifests_for({"runtime": "quarkus", "build": {"gitSource": build_spec()}})

        service = manifests.prepare_service()
        route = manifests.prepare_route()

        assert service["apiVersion"] == "v1"
        assert service["spec"]["selector"] == {"app": "example"}
        assert route["spec"]["to"] == {"kind": "Service", "name": "example"}


class TestLabelsAndHash:
    def test_default_and_service_labels(self):
        manifests = manifests_for(
            {
                "runtime": "quarkus",
                "build": {"gitSource": build_spec()},
                "service": {"labels": {"team": "kie"}},
            }
        )
        labels = manifests.prepare_route()["metadata"]["labels"]

        assert labels["app"] == "example"
        assert labels["app.kiegroup.org/app"] == "example"
        assert labels["app.kiegroup.org/runtime"] == "quarkus"
        assert labels["app.kubernetes.io/managed-by"] == "kogito-operator"
        assert labels["team"] == "kie"

    def test_service_labels_cannot_break_the_selectors(self):
        manifests = manifests_for(
            {
                "runtime": "quarkus",
                "build": {"gitSource": build_spec()},
                "service": {"labels": {"app": "frontend", "team": "kie"}},
            }
        )
        dc = manifests.prepare_deployment_config()
        template_labels = dc["spec"]["template"]["metadata"]["labels"]
        selector = dc["spec"]["selector"]

        assert selector.items() <= template_labels.items()
        assert template_labels["app"] == "example"
        assert template_labels["team"] == "kie"
        assert manifests.prepare_service()["spec"]["selector"].items() <= template_labels.items()

    def test_hash_is_stable(self):
        spec = {"runtime": "quarkus", "build": {"gitSource": build_spec()}}
        first = manifests_for(spec).prepare_deployment_config()
        second = manifests_for(spec).prepare_deployment_config()

        assert (
            first["metadata"]["annotations"][RESOURCE_HASH_ANNOTATION]
            == second["metadata"]["annotations"][RESOURCE_HASH_ANNOTATION]
        )

    def test_hash_follows_spec_changes(self):
        one = manifests_for(
            {"runtime": "quarkus", "replicas": 1, "build": {"gitSource": build_spec()}}
        ).prepare_deployment_config()
        two = manifests_for(
            {"runtime": "quarkus", "replicas": 2, "build": {"gitSource": build_spec()}}
        ).prepare_deployment_config()

        assert (
            one["metadata"]["annotations"][RESOURCE_HASH_ANNOTATION]
            != two["metadata"]["annotations"][RESOURCE_HASH_ANNOTATION]
        )
