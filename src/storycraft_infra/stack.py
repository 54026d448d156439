"""
StoryCraft GCP stack.

Declares, in dependency order:
- required platform APIs
- runtime service account and its project roles
- Cloud Storage bucket for assets
- Firestore database and the per-owner recency index
- Artifact Registry repository and the content-hashed image build
- Cloud Run service (+ optional public invoker binding)

Ordering is expressed through output references and `depends_on`; the
Pulumi engine parallelizes everything else.
"""

from __future__ import annotations

from dataclasses import dataclass

import pulumi
import pulumi_command as command
import pulumi_gcp as gcp
import pulumi_random as random

from .build import plan_build
from .config import StackSettings
from .core import OAUTH_SETUP_REMINDER
from .env import build_environment, oauth_redirect_uri, service_hostname_url
from .resources import apis, firestore, iam, image, registry, run, secrets, storage
from .schemas.build import BuildArtifact


@dataclass
class StoryCraftStack:
    settings: StackSettings
    apis: list[gcp.projects.Service]
    service_account: gcp.serviceaccount.Account
    project_grants: list[gcp.projects.IAMMember]
    bucket: gcp.storage.Bucket
    bucket_grant: gcp.storage.BucketIAMMember
    database: gcp.firestore.Database
    index: gcp.firestore.Index
    repository: gcp.artifactregistry.Repository
    artifact: BuildArtifact
    build: command.local.Command
    auth_secret: random.RandomPassword
    service: gcp.cloudrunv2.Service
    public_invoker: gcp.cloudrunv2.ServiceIamMember | None
    # Deterministic hostname handed to the app as NEXTAUTH_URL
    public_url: pulumi.Output[str]

    @property
    def service_url(self) -> pulumi.Output[str]:
        return self.public_url

    @property
    def oauth_redirect_uri(self) -> pulumi.Output[str]:
        return self.public_url.apply(oauth_redirect_uri)


def build_stack(settings: StackSettings) -> StoryCraftStack:
    pulumi.log.info(
        f"Deploying {settings.service_name} to {settings.project_id} "
        f"({settings.region})"
    )

    # 1. Platform APIs
    enabled_apis = apis.enable_apis(settings.project_id)

    # 2. Identity & permissions
    account = iam.create_service_account(settings.project_id, depends_on=enabled_apis)
    grants = iam.grant_project_roles(settings.project_id, account)

    # 3. Storage
    bucket = storage.create_bucket(settings, depends_on=enabled_apis)
    bucket_grant = storage.grant_bucket_access(bucket, account)

    # 4. Firestore
    database = firestore.create_database(settings, depends_on=enabled_apis)
    index = firestore.create_index(settings, database)

    # 5. Registry & image
    repository = registry.create_repository(settings, depends_on=enabled_apis)
    artifact = plan_build(settings)
    build = image.build_and_push_image(settings, repository, artifact)

    # 6. Cloud Run
    auth_secret = secrets.create_auth_secret()
    project = gcp.organizations.get_project_output(project_id=settings.project_id)
    auth_url = project.number.apply(
        lambda number: service_hostname_url(
            settings.service_name, number, settings.region
        )
    )
    env = build_environment(settings, auth_url=auth_url, auth_secret=auth_secret.result)

    service = run.deploy_service(
        settings,
        image=artifact.image,
        account=account,
        env=env,
        depends_on=[
            *enabled_apis,
            *grants,
            bucket,
            bucket_grant,
            database,
            index,
            build,
        ],
    )
    public_invoker = run.grant_public_access(settings, service)

    return StoryCraftStack(
        settings=settings,
        apis=enabled_apis,
        service_account=account,
        project_grants=grants,
        bucket=bucket,
        bucket_grant=bucket_grant,
        database=database,
        index=index,
        repository=repository,
        artifact=artifact,
        build=build,
        auth_secret=auth_secret,
        service=service,
        public_invoker=public_invoker,
        public_url=auth_url,
    )


def export_outputs(stack: StoryCraftStack) -> None:
    settings = stack.settings
    for output_name, value in [
        ("service_url", stack.service_url),
        ("service_account_email", stack.service_account.email),
        ("bucket_name", stack.bucket.name),
        ("firestore_database", stack.database.name),
        ("artifact_registry", stack.repository.name),
        ("image", stack.artifact.image),
        ("project_id", settings.project_id),
        ("region", settings.region),
        ("oauth_redirect_uri", stack.oauth_redirect_uri),
        ("oauth_setup_reminder", OAUTH_SETUP_REMINDER),
    ]:
        pulumi.export(output_name, value)
