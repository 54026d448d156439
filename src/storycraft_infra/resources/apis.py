import pulumi
import pulumi_gcp as gcp

from ..core import REQUIRED_APIS


def enable_apis(
    project_id: str, apis: list[str] | None = None
) -> list[gcp.projects.Service]:
    """
    Enables the platform APIs the stack needs.

    APIs stay enabled on `pulumi destroy`, and disabling one never cascades
    to the services that depend on it.
    """
    services = []
    for api in sorted(set(apis or REQUIRED_APIS)):
        services.append(
            gcp.projects.Service(
                f"api-{api.split('.')[0]}",
                project=project_id,
                service=api,
                disable_on_destroy=False,
                disable_dependent_services=False,
            )
        )
    pulumi.log.info(f"Declared {len(services)} required APIs for {project_id}")
    return services
