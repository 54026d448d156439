"""
Stack settings.

The Pulumi program reads them from stack config (``Pulumi.<stack>.yaml``);
the CLI builds them from command-line flags. Both go through the same
pydantic model so invalid values fail before anything is declared.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import pulumi
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core import (
    APP_NAME,
    BUILD_DEFINITION_FILE,
    CLOUD_RUN_RESERVED_ENV_VARS,
    DEFAULT_BUILD_CONTEXT,
    DEFAULT_IMAGE_NAME,
    DEFAULT_REPOSITORY_ID,
    DEFAULT_SERVICE_NAME,
    MANAGED_ENV_VARS,
)

ENV_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
DEFAULT_REGION = "us-central1"
DEFAULT_DATABASE_ID = "(default)"


class StackSettings(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    project_id: str = Field(min_length=1)
    region: str = Field(default=DEFAULT_REGION, min_length=1)
    firestore_database_id: str = Field(default=DEFAULT_DATABASE_ID, min_length=1)
    firestore_location: str | None = Field(
        default=None, description="Defaults to the stack region"
    )
    service_name: str = Field(default=DEFAULT_SERVICE_NAME, min_length=1)
    repository_id: str = Field(default=DEFAULT_REPOSITORY_ID, min_length=1)
    image_name: str = Field(default=DEFAULT_IMAGE_NAME, min_length=1)
    build_context: Path = Path(DEFAULT_BUILD_CONTEXT)
    google_client_id: str = ""
    # str or a secret pulumi.Output[str]; never rendered
    google_client_secret: Any = Field(default="", repr=False, exclude=True)
    allow_public_access: bool = True
    extra_env_vars: dict[str, str] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=lambda: {"app": APP_NAME})

    @field_validator("extra_env_vars")
    @classmethod
    def check_extra_env_vars(cls, value: dict[str, str]) -> dict[str, str]:
        reserved = set(MANAGED_ENV_VARS) | set(CLOUD_RUN_RESERVED_ENV_VARS)
        for name in value:
            if not ENV_NAME_PATTERN.match(name):
                raise ValueError(f"Invalid environment variable name: {name!r}")
            if name in reserved:
                raise ValueError(
                    f"Environment variable {name} is managed by the stack "
                    "and cannot be overridden"
                )
        return value

    @property
    def database_location(self) -> str:
        return self.firestore_location or self.region

    @property
    def bucket_name(self) -> str:
        # Bucket names are global, so the project id keeps them unique
        return f"{self.project_id}-{APP_NAME}-assets"

    @property
    def build_definition(self) -> Path:
        return self.build_context / BUILD_DEFINITION_FILE

    @property
    def registry_host(self) -> str:
        return f"{self.region}-docker.pkg.dev"

    @classmethod
    def from_pulumi_config(cls) -> StackSettings:
        """Builds settings from the current stack's configuration."""
        config = pulumi.Config()
        gcp_config = pulumi.Config("gcp")

        values: dict[str, Any] = {
            "project_id": gcp_config.require("project"),
            "region": gcp_config.get("region") or DEFAULT_REGION,
            "google_client_id": config.require("googleClientId"),
            "google_client_secret": config.require_secret("googleClientSecret"),
        }

        optional = {
            "firestore_database_id": config.get("firestoreDatabaseId"),
            "firestore_location": config.get("firestoreLocation"),
            "service_name": config.get("serviceName"),
            "repository_id": config.get("repositoryId"),
            "image_name": config.get("imageName"),
            "build_context": config.get("buildContext"),
            "allow_public_access": config.get_bool("allowPublicAccess"),
            "extra_env_vars": config.get_object("extraEnvVars"),
            "labels": config.get_object("labels"),
        }
        values.update({k: v for k, v in optional.items() if v is not None})

        return cls(**values)
