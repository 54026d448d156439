from google.api_core.exceptions import NotFound
from google.cloud import iam_admin_v1
from google.iam.v1 import iam_policy_pb2
from tenacity import retry

from ..clients import get_iam_client, get_projects_client
from ..core import RETRY_CONFIG
from ..logger import logger
from ..schemas.status import DeployedServiceAccount


def service_account_email(project_id: str, account_id: str) -> str:
    return f"{account_id}@{project_id}.iam.gserviceaccount.com"


@retry(**RETRY_CONFIG)  # type: ignore[call-overload, untyped-decorator]
def get_service_account(
    project_id: str, account_id: str
) -> DeployedServiceAccount | None:
    """
    Fetches the runtime service account and the project-level roles bound to it.
    Returns None if the account does not exist.
    """
    email = service_account_email(project_id, account_id)
    iam_client = get_iam_client()

    try:
        sa = iam_client.get_service_account(
            request=iam_admin_v1.GetServiceAccountRequest(
                name=f"projects/{project_id}/serviceAccounts/{email}"
            )
        )
    except NotFound:
        logger.debug(f"Service account {email} not found")
        return None

    # Project Policy (Bindings)
    rm_client = get_projects_client()
    policy = rm_client.get_iam_policy(
        request=iam_policy_pb2.GetIamPolicyRequest(resource=f"projects/{project_id}")
    )
    member = f"serviceAccount:{sa.email}"
    roles = sorted(b.role for b in policy.bindings if member in b.members)

    return DeployedServiceAccount(
        email=sa.email,
        display_name=sa.display_name,
        disabled=sa.disabled,
        project_roles=roles,
    )
