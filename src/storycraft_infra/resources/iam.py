import pulumi
import pulumi_gcp as gcp

from ..core import (
    SERVICE_ACCOUNT_DISPLAY_NAME,
    SERVICE_ACCOUNT_ID,
    SERVICE_ACCOUNT_ROLES,
)


def service_account_member(email: pulumi.Input[str]) -> pulumi.Output[str]:
    return pulumi.Output.from_input(email).apply(lambda e: f"serviceAccount:{e}")


def role_resource_name(role: str) -> str:
    # roles/iam.serviceAccountTokenCreator -> sa-role-iam-serviceaccounttokencreator
    return "sa-role-" + role.removeprefix("roles/").replace(".", "-").lower()


def create_service_account(
    project_id: str, depends_on: list[pulumi.Resource]
) -> gcp.serviceaccount.Account:
    return gcp.serviceaccount.Account(
        "service-account",
        project=project_id,
        account_id=SERVICE_ACCOUNT_ID,
        display_name=SERVICE_ACCOUNT_DISPLAY_NAME,
        description="Runtime identity for the StoryCraft Cloud Run service",
        opts=pulumi.ResourceOptions(depends_on=depends_on),
    )


def grant_project_roles(
    project_id: str,
    account: gcp.serviceaccount.Account,
    roles: list[str] | None = None,
) -> list[gcp.projects.IAMMember]:
    """One independent grant per role, keyed by (role, identity)."""
    member = service_account_member(account.email)
    return [
        gcp.projects.IAMMember(
            role_resource_name(role),
            project=project_id,
            role=role,
            member=member,
        )
        for role in sorted(set(roles or SERVICE_ACCOUNT_ROLES))
    ]
