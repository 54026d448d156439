import pulumi
import pulumi_command as command
import pulumi_gcp as gcp

from ..build import build_push_script
from ..config import StackSettings
from ..schemas.build import BuildArtifact


def build_and_push_image(
    settings: StackSettings,
    repository: gcp.artifactregistry.Repository,
    artifact: BuildArtifact,
) -> command.local.Command:
    """
    Builds and pushes the container image with the local docker/gcloud CLIs.

    The command is triggered by the Dockerfile hash only: with an unchanged
    hash Pulumi reports no diff and nothing runs; a new hash replaces the
    command, which runs the build and push again.
    """
    pulumi.log.info(f"Container image for this run: {artifact.image}")
    return command.local.Command(
        "build-push-image",
        create=build_push_script(
            artifact.image, settings.registry_host, settings.build_context
        ),
        interpreter=["/bin/bash", "-c"],
        triggers=[artifact.content_hash],
        opts=pulumi.ResourceOptions(depends_on=[repository]),
    )
