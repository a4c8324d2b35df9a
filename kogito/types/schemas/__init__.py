from .kogitoapp_spec import (
    ResourceMapSchema,
    ResourcesSchema,
    EnvSchema,
    GitSourceSchema,
    ImageSchema,
    KogitoAppBuildObjectSchema,
    KogitoAppServiceObjectSchema,
    KogitoAppSpecSchema,
)

__all__ = [
    "ResourceMapSchema",
    "ResourcesSchema",
    "EnvSchema",
    "GitSourceSchema",
    "ImageSchema",
    "KogitoAppBuildObjectSchema",
    "KogitoAppServiceObjectSchema",
    "KogitoAppSpecSchema",
]
