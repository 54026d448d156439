"""
Content-addressed image builds.

The image tag is derived from a hash of the build definition (the
Dockerfile), so an unchanged Dockerfile produces the same tag and the build
command's trigger never changes.
"""

import hashlib
import shlex
from pathlib import Path

from .config import StackSettings
from .core import IMAGE_TAG_LENGTH
from .schemas.build import BuildArtifact


class BuildDefinitionNotFound(FileNotFoundError):
    """Raised when the Dockerfile for the build context does not exist."""


def compute_build_hash(build_definition: Path) -> str:
    """Returns the SHA-256 hex digest of the build definition file."""
    path = Path(build_definition)
    if not path.is_file():
        raise BuildDefinitionNotFound(f"Build definition not found: {path}")

    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def image_tag(content_hash: str) -> str:
    return content_hash[:IMAGE_TAG_LENGTH]


def image_path(
    project_id: str, region: str, repository_id: str, image_name: str, tag: str
) -> str:
    """
    Fully qualified Artifact Registry image path.
    e.g. us-central1-docker.pkg.dev/my-project/storycraft/storycraft-app:1a2b3c4d5e6f
    """
    return f"{region}-docker.pkg.dev/{project_id}/{repository_id}/{image_name}:{tag}"


def describe_build(
    build_context: Path,
    build_definition: Path,
    project_id: str,
    region: str,
    repository_id: str,
    image_name: str,
) -> BuildArtifact:
    content_hash = compute_build_hash(build_definition)
    tag = image_tag(content_hash)
    return BuildArtifact(
        content_hash=content_hash,
        tag=tag,
        image=image_path(project_id, region, repository_id, image_name, tag),
        build_context=str(build_context),
    )


def build_push_script(image: str, registry_host: str, build_context: Path) -> str:
    """
    Shell script that authenticates Docker to Artifact Registry, then builds
    and pushes the image. Any failing step aborts the script with a non-zero
    exit status.
    """
    image_q = shlex.quote(image)
    context_q = shlex.quote(str(build_context))
    return "\n".join(
        [
            "set -euo pipefail",
            f"gcloud auth configure-docker {shlex.quote(registry_host)} --quiet",
            f"docker build --platform linux/amd64 -t {image_q} {context_q}",
            f"docker push {image_q}",
        ]
    )


def plan_build(settings: StackSettings) -> BuildArtifact:
    """Describes the image the current build context would produce."""
    return describe_build(
        build_context=settings.build_context,
        build_definition=settings.build_definition,
        project_id=settings.project_id,
        region=settings.region,
        repository_id=settings.repository_id,
        image_name=settings.image_name,
    )
