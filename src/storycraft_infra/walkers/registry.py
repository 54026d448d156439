from google.api_core.exceptions import NotFound
from tenacity import retry

from ..clients import get_artifact_registry_client
from ..core import RETRY_CONFIG
from ..logger import logger
from ..schemas.status import DeployedRepository


@retry(**RETRY_CONFIG)  # type: ignore[call-overload, untyped-decorator]
def get_repository(
    project_id: str, region: str, repository_id: str
) -> DeployedRepository | None:
    client = get_artifact_registry_client()
    name = f"projects/{project_id}/locations/{region}/repositories/{repository_id}"

    try:
        repo = client.get_repository(name=name)
    except NotFound:
        logger.debug(f"Repository {name} not found")
        return None

    return DeployedRepository(
        name=repo.name.split("/")[-1],
        format=repo.format_.name,
        description=repo.description,
    )
