from __future__ import annotations

import pulumi

from .config import StackSettings
from .core import OAUTH_CALLBACK_PATH

EnvAssignments = list[tuple[str, pulumi.Input[str]]]


def service_hostname_url(service_name: str, project_number: str, region: str) -> str:
    """
    Deterministic Cloud Run URL, known before the service exists.
    e.g. https://storycraft-123456789012.us-central1.run.app
    """
    return f"https://{service_name}-{project_number}.{region}.run.app"


def oauth_redirect_uri(service_url: str) -> str:
    # Plain concatenation; service URLs never carry a trailing slash
    return service_url + OAUTH_CALLBACK_PATH


def build_environment(
    settings: StackSettings,
    auth_url: pulumi.Input[str],
    auth_secret: pulumi.Input[str],
) -> EnvAssignments:
    """
    Ordered environment for the Cloud Run container.

    Managed variables come first in a fixed order, followed by the extra
    variables from config sorted by name, so the declared list is identical
    between runs.
    """
    bucket = settings.bucket_name
    env: EnvAssignments = [
        ("GOOGLE_CLOUD_PROJECT_ID", settings.project_id),
        ("GOOGLE_CLOUD_REGION", settings.region),
        ("FIRESTORE_DATABASE_ID", settings.firestore_database_id),
        ("GCS_BUCKET_NAME", bucket),
        ("GCS_STORAGE_URI", f"gs://{bucket}/"),
        ("NODE_ENV", "production"),
        ("NEXT_TELEMETRY_DISABLED", "1"),
        ("NEXTAUTH_URL", auth_url),
        ("AUTH_SECRET", auth_secret),
        ("AUTH_TRUST_HOST", "true"),
        ("AUTH_GOOGLE_ID", settings.google_client_id),
        ("AUTH_GOOGLE_SECRET", settings.google_client_secret),
    ]
    env.extend(sorted(settings.extra_env_vars.items()))
    return env
