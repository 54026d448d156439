from __future__ import annotations

from functools import lru_cache
from typing import Any

from google.cloud import (
    artifactregistry_v1,
    firestore_admin_v1,
    iam_admin_v1,
    resourcemanager_v3,
    run_v2,
    service_usage_v1,
)
from google.cloud import storage  # type: ignore # noqa: I001

# Shared Client Registry (Lazy-loaded and cached)


@lru_cache(maxsize=1)
def get_run_client() -> Any:
    return run_v2.ServicesClient()


@lru_cache(maxsize=1)
def get_storage_client() -> Any:
    return storage.Client()


@lru_cache(maxsize=1)
def get_iam_client() -> Any:
    return iam_admin_v1.IAMClient()


@lru_cache(maxsize=1)
def get_projects_client() -> Any:
    return resourcemanager_v3.ProjectsClient()


@lru_cache(maxsize=1)
def get_firestore_admin_client() -> Any:
    return firestore_admin_v1.FirestoreAdminClient()


@lru_cache(maxsize=1)
def get_artifact_registry_client() -> Any:
    return artifactregistry_v1.ArtifactRegistryClient()


@lru_cache(maxsize=1)
def get_service_usage_client() -> Any:
    return service_usage_v1.ServiceUsageClient()
