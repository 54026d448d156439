import pulumi
import pulumi_gcp as gcp

from ..config import StackSettings


def create_repository(
    settings: StackSettings, depends_on: list[pulumi.Resource]
) -> gcp.artifactregistry.Repository:
    """Create Artifact Registry for container images."""
    return gcp.artifactregistry.Repository(
        "artifact-repository",
        project=settings.project_id,
        location=settings.region,
        repository_id=settings.repository_id,
        format="DOCKER",
        description="StoryCraft container images",
        labels=settings.labels,
        opts=pulumi.ResourceOptions(depends_on=depends_on),
    )
