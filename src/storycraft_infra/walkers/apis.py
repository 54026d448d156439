from google.cloud import service_usage_v1
from tenacity import retry

from ..clients import get_service_usage_client
from ..core import RETRY_CONFIG


@retry(**RETRY_CONFIG)  # type: ignore[call-overload, untyped-decorator]
def list_enabled_apis(project_id: str) -> set[str]:
    """
    Returns the names of all APIs enabled on the project,
    e.g. {"run.googleapis.com", "firestore.googleapis.com"}.
    """
    client = get_service_usage_client()
    request = service_usage_v1.ListServicesRequest(
        parent=f"projects/{project_id}", filter="state:ENABLED"
    )
    # The client library handles pagination automatically when iterating
    return {svc.config.name for svc in client.list_services(request=request)}
