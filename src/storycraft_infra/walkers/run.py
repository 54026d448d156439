from google.api_core import exceptions
from google.cloud import run_v2
from tenacity import retry

from ..clients import get_run_client
from ..core import INVOKER_ROLE, PUBLIC_MEMBER, RETRY_CONFIG
from ..logger import logger
from ..schemas.status import DeployedService

LATEST_REVISION = "TRAFFIC_TARGET_ALLOCATION_TYPE_LATEST"


@retry(**RETRY_CONFIG)  # type: ignore[call-overload, untyped-decorator]
def get_service(
    project_id: str, region: str, service_name: str
) -> DeployedService | None:
    """
    Fetches a Cloud Run service and whether allUsers may invoke it.
    Returns None if the service does not exist.
    """
    client = get_run_client()
    name = f"projects/{project_id}/locations/{region}/services/{service_name}"

    try:
        service = client.get_service(request=run_v2.GetServiceRequest(name=name))
    except exceptions.NotFound:
        logger.debug(f"Cloud Run service {name} not found")
        return None

    # Extract container settings from the first container in the template
    image = "unknown"
    limits: dict[str, str] = {}
    cpu_idle = False
    env_names: list[str] = []
    if service.template.containers:
        container = service.template.containers[0]
        image = container.image
        limits = dict(container.resources.limits)
        cpu_idle = container.resources.cpu_idle
        env_names = [e.name for e in container.env]

    latest_percent = sum(
        t.percent for t in service.traffic if t.type_.name == LATEST_REVISION
    )

    public: bool | None = None
    try:
        policy = client.get_iam_policy(request={"resource": name})
        public = any(
            b.role == INVOKER_ROLE and PUBLIC_MEMBER in b.members
            for b in policy.bindings
        )
    except exceptions.PermissionDenied:
        logger.warning(f"Permission denied reading IAM policy of {name}")
    except exceptions.GoogleAPICallError as e:
        logger.warning(f"IAM policy read failed for {name}: {e}")

    return DeployedService(
        name=service.name.split("/")[-1],
        region=region,
        url=service.uri,
        image=image,
        service_account=service.template.service_account,
        update_time=service.update_time,
        min_instance_count=service.template.scaling.min_instance_count,
        max_instance_count=service.template.scaling.max_instance_count,
        cpu=limits.get("cpu", ""),
        memory=limits.get("memory", ""),
        cpu_idle=cpu_idle,
        env_names=env_names,
        latest_traffic_percent=latest_percent,
        public=public,
    )
