import pulumi
import pulumi_gcp as gcp

from ..config import StackSettings
from ..core import INVOKER_ROLE, PUBLIC_MEMBER
from ..env import EnvAssignments
from ..schemas.run import ResourceLimits, ScalingBounds


def deploy_service(
    settings: StackSettings,
    image: str,
    account: gcp.serviceaccount.Account,
    env: EnvAssignments,
    depends_on: list[pulumi.Resource],
    scaling: ScalingBounds | None = None,
    limits: ResourceLimits | None = None,
) -> gcp.cloudrunv2.Service:
    scaling = scaling or ScalingBounds()
    limits = limits or ResourceLimits()

    return gcp.cloudrunv2.Service(
        "cloud-run-service",
        name=settings.service_name,
        project=settings.project_id,
        location=settings.region,
        ingress="INGRESS_TRAFFIC_ALL",
        deletion_protection=False,
        labels=settings.labels,
        template=gcp.cloudrunv2.ServiceTemplateArgs(
            service_account=account.email,
            scaling=gcp.cloudrunv2.ServiceTemplateScalingArgs(
                min_instance_count=scaling.min_instance_count,
                max_instance_count=scaling.max_instance_count,
            ),
            containers=[
                gcp.cloudrunv2.ServiceTemplateContainerArgs(
                    image=image,
                    resources=gcp.cloudrunv2.ServiceTemplateContainerResourcesArgs(
                        limits=limits.as_limits(),
                        cpu_idle=limits.cpu_idle,
                    ),
                    envs=[
                        gcp.cloudrunv2.ServiceTemplateContainerEnvArgs(
                            name=name, value=value
                        )
                        for name, value in env
                    ],
                )
            ],
        ),
        traffics=[
            gcp.cloudrunv2.ServiceTrafficArgs(
                type="TRAFFIC_TARGET_ALLOCATION_TYPE_LATEST",
                percent=100,
            )
        ],
        opts=pulumi.ResourceOptions(depends_on=depends_on),
    )


def grant_public_access(
    settings: StackSettings, service: gcp.cloudrunv2.Service
) -> gcp.cloudrunv2.ServiceIamMember | None:
    """Lets anyone invoke the service. Nothing is declared for private stacks."""
    if not settings.allow_public_access:
        pulumi.log.info("Public access disabled; no invoker binding declared")
        return None

    return gcp.cloudrunv2.ServiceIamMember(
        "cloud-run-public-invoker",
        project=settings.project_id,
        location=settings.region,
        name=service.name,
        role=INVOKER_ROLE,
        member=PUBLIC_MEMBER,
    )
