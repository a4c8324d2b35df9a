from typing import Dict, List
from kogito.resources.base import BaseResource
from kogito.resources.kogitoapp import KogitoApp
from kogito.types.settings import Settings
from kogito.types.models import (
    RuntimeType,
    ResourceMap,
    Image,
    Env,
    ObjectKind,
    BUILD_CONFIG,
    IMAGE_STREAM,
    DEPLOYMENT_CONFIG,
    SERVICE,
    ROUTE,
)

HTTP_PORT = 8080
HTTP_PORT_NAME = "http"
LATEST_TAG = "latest"
BUILDER_BINARIES_DIR = "/home/kogito/bin"


def resource_list_to_dict(entries: List[ResourceMap]) -> Dict[str, str]:
    return {entry.resource: entry.value for entry in entries or []}


def env_to_list(env: List[Env]) -> List[Dict[str, str]]:
    return [{"name": e.name, "value": e.value or ""} for e in env or []]


class KogitoAppManifests(BaseResource):
    """Desired state of every object owned by a KogitoApp.

    Each manifest carries a hash of its own desired state, so later passes can
    tell whether an existing object still matches the app spec.
    """

    app: KogitoApp
    conf: Settings

    def __init__(self, app: KogitoApp, conf: Settings = None):
        self.app = app
        self.conf = conf or Settings()

    def _metadata(self, name: str) -> Dict:
        return {
            "name": name,
            "namespace": self.app.namespace,
            "labels": self.app.labels.as_dict(),
        }

    def _finalize(self, kind: ObjectKind, name: str, spec: Dict) -> Dict:
        body = {
            "apiVersion": kind.api_version,
            "kind": kind.kind,
            "metadata": self._metadata(name),
            "spec": spec,
        }
        desired_hash = self.compute_hash(
            {"labels": body["metadata"]["labels"], "spec": spec}
        )
        body["metadata"]["annotations"] = self.prepare_hash_annotation(desired_hash)
        return body

    def _image_stream_tag(self, image_stream: str) -> Dict:
        return {"kind": "ImageStreamTag", "name": f"{image_stream}:{LATEST_TAG}"}

    def _image_from(self, image: Image, default_image: str) -> Dict:
        """Reference a user supplied image stream, else the default registry image."""
        if image.image_stream_name:
            return {
                "kind": "ImageStreamTag",
                "name": f"{image.image_stream_name}:{image.image_stream_tag or LATEST_TAG}",
                "namespace": image.image_stream_namespace or self.app.namespace,
            }
        tag = image.image_stream_tag or self.conf.default_image_tag
        return {
            "kind": "DockerImage",
            "name": f"{self.conf.default_image_registry}/{default_image}:{tag}",
        }

    def default_s2i_image(self) -> str:
        return f"kogito-{self.app.spec.runtime}-ubi8-s2i"

    def default_runtime_image(self) -> str:
        if self.app.spec.runtime == RuntimeType.QUARKUS and not self.app.spec.build.native:
            return "kogito-quarkus-jvm-ubi8"
        return f"kogito-{self.app.spec.runtime}-ubi8"

    def prepare_build_config_s2i(self) -> Dict:
        build = self.app.spec.build
        source = {"type": "Git", "git": {"uri": build.git_source.uri}}
        if build.git_source.reference:
            source["git"]["ref"] = build.git_source.reference
        if build.git_source.context_dir:
            source["contextDir"] = build.git_source.context_dir
        env = env_to_list(build.env)
        env.append({"name": "NATIVE", "value": str(bool(build.native)).lower()})
        spec = {
            "runPolicy": "Serial",
            "source": source,
            "strategy": {
                "type": "Source",
                "sourceStrategy": {
                    "from": self._image_from(build.image_s2i, self.default_s2i_image()),
                    "env": env,
                    "incremental": bool(build.incremental),
                },
            },
            "output": {"to": self._image_stream_tag(self.app.image_stream_s2i_name)},
            "resources": {
                "limits": resource_list_to_dict(build.resources.limits),
                "requests": resource_list_to_dict(build.resources.requests),
            },
            # builds of this config are only ever started by the operator
            "triggers": [],
        }
        return self._finalize(BUILD_CONFIG, self.app.build_config_s2i_name, spec)

    def prepare_build_config_runtime(self) -> Dict:
        build = self.app.spec.build
        builder_tag = self._image_stream_tag(self.app.image_stream_s2i_name)
        spec = {
            "runPolicy": "Serial",
            "source": {
                "type": "Image",
                "images": [
                    {
                        "from": builder_tag,
                        "paths": [
                            {
                                "sourcePath": BUILDER_BINARIES_DIR,
                                "destinationDir": ".",
                            }
                        ],
                    }
                ],
            },
            "strategy": {
                "type": "Source",
                "sourceStrategy": {
                    "from": self._image_from(
                        build.image_runtime, self.default_runtime_image()
                    ),
                },
            },
            "output": {"to": self._image_stream_tag(self.app.image_stream_runtime_name)},
            "triggers": [{"type": "ImageChange", "imageChange": {"from": builder_tag}}],
        }
        return self._finalize(BUILD_CONFIG, self.app.build_config_runtime_name, spec)

    def prepare_image_stream(self, name: str) -> Dict:
        return self._finalize(IMAGE_STREAM, name, {"lookupPolicy": {"local": True}})

    def prepare_image_stream_s2i(self) -> Dict:
        return self.prepare_image_stream(self.app.image_stream_s2i_name)

    def prepare_image_stream_runtime(self) -> Dict:
        return self.prepare_image_stream(self.app.image_stream_runtime_name)

    def prepare_deployment_config(self) -> Dict:
        spec = self.app.spec
        name = self.app.deployment_config_name
        runtime_tag = self._image_stream_tag(self.app.image_stream_runtime_name)
        container = {
            "name": name,
            "image": runtime_tag["name"],
            "ports": [
                {
                    "name": HTTP_PORT_NAME,
                    "containerPort": HTTP_PORT,
                    "protocol": "TCP",
                }
            ],
            "env": env_to_list(spec.env),
            "resources": {
                "limits": resource_list_to_dict(spec.resources.limits),
                "requests": resource_list_to_dict(spec.resources.requests),
            },
        }
        dc_spec = {
            "replicas": spec.replicas if spec.replicas is not None else 1,
            "selector": {"app": self.app.name},
            "strategy": {"type": "Rolling"},
            "template": {
                "metadata": {"labels": self.app.labels.as_dict()},
                "spec": {"containers": [container]},
            },
            "triggers": [
                {"type": "ConfigChange"},
                {
                    "type": "ImageChange",
                    "imageChangeParams": {
                        "automatic": True,
                        "containerNames": [name],
                        "from": runtime_tag,
                    },
                },
            ],
        }
        return self._finalize(DEPLOYMENT_CONFIG, name, dc_spec)

    def prepare_service(self) -> Dict:
        spec = {
            "selector": {"app": self.app.name},
            "ports": [
                {
                    "name": HTTP_PORT_NAME,
                    "port": HTTP_PORT,
                    "targetPort": HTTP_PORT,
                    "protocol": "TCP",
                }
            ],
        }
        return self._finalize(SERVICE, self.app.service_name, spec)

    def prepare_route(self) -> Dict:
        spec = {
            "to": {"kind": SERVICE.kind, "name": self.app.service_name},
            "port": {"targetPort": HTTP_PORT_NAME},
        }
        return self._finalize(ROUTE, self.app.route_name, spec)
