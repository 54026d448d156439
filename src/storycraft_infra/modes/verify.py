from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable

from rich.console import Console
from rich.table import Table

from ..build import BuildDefinitionNotFound, compute_build_hash, image_tag
from ..config import StackSettings
from ..core import (
    BUCKET_CORS_METHODS,
    BUCKET_OBJECT_MAX_AGE_DAYS,
    FIRESTORE_TYPE,
    MANAGED_ENV_VARS,
    REQUIRED_APIS,
    SERVICE_ACCOUNT_ID,
    SERVICE_ACCOUNT_ROLES,
    STORY_COLLECTION,
)
from ..logger import logger
from ..schemas.firestore import story_index
from ..schemas.run import ResourceLimits, ScalingBounds
from ..schemas.status import (
    Check,
    DeployedBucket,
    DeployedDatabase,
    DeployedRepository,
    DeployedService,
    DeployedServiceAccount,
    VerificationReport,
)
from ..walkers import apis, firestore, iam, registry, run, storage

MISSING = "missing"
UNREADABLE = "unreadable"
UNKNOWN = "unknown"


def _check(resource: str, check: str, expected: Any, actual: Any) -> Check:
    return Check(
        resource=resource,
        check=check,
        expected=str(expected),
        actual=str(actual),
        ok=expected == actual,
    )


def _missing(resource: str) -> Check:
    return Check(
        resource=resource, check="exists", expected="present", actual=MISSING, ok=False
    )


def check_apis(enabled: set[str] | None) -> list[Check]:
    if enabled is None:
        return [_missing("apis")]
    return [
        _check("apis", api, "enabled", "enabled" if api in enabled else "disabled")
        for api in sorted(REQUIRED_APIS)
    ]


def check_service_account(sa: DeployedServiceAccount | None) -> list[Check]:
    if sa is None:
        return [_missing("service-account")]
    checks = [_check("service-account", "disabled", False, sa.disabled)]
    checks.extend(
        _check(
            "service-account",
            role,
            "granted",
            "granted" if role in sa.project_roles else MISSING,
        )
        for role in sorted(SERVICE_ACCOUNT_ROLES)
    )
    return checks


def check_bucket(bucket: DeployedBucket | None) -> list[Check]:
    if bucket is None:
        return [_missing("bucket")]
    return [
        _check("bucket", "uniform access", True, bucket.uniform_bucket_level_access),
        _check("bucket", "versioning", False, bucket.versioning_enabled),
        _check(
            "bucket",
            "delete after (days)",
            [BUCKET_OBJECT_MAX_AGE_DAYS],
            bucket.lifecycle_delete_age_days,
        ),
        _check("bucket", "cors origins", ["*"], bucket.cors_origins),
        _check(
            "bucket", "cors methods", sorted(BUCKET_CORS_METHODS), bucket.cors_methods
        ),
    ]


def check_database(db: DeployedDatabase | None) -> list[Check]:
    if db is None:
        return [_missing("firestore")]
    expected_index = story_index().signature()
    has_index = any(index.fields == expected_index for index in db.indexes)
    return [
        _check("firestore", "type", FIRESTORE_TYPE, db.type),
        _check(
            "firestore",
            "delete protection",
            "DELETE_PROTECTION_DISABLED",
            db.delete_protection_state,
        ),
        _check(
            "firestore",
            f"{STORY_COLLECTION} index",
            expected_index,
            expected_index if has_index else MISSING,
        ),
    ]


def check_repository(repo: DeployedRepository | None) -> list[Check]:
    if repo is None:
        return [_missing("registry")]
    return [_check("registry", "format", "DOCKER", repo.format)]


def check_service(
    service: DeployedService | None,
    settings: StackSettings,
    expected_tag: str | None,
) -> list[Check]:
    if service is None:
        return [_missing("cloud-run")]

    scaling = ScalingBounds()
    limits = ResourceLimits()
    checks = [
        _check(
            "cloud-run",
            "min instances",
            scaling.min_instance_count,
            service.min_instance_count,
        ),
        _check(
            "cloud-run",
            "max instances",
            scaling.max_instance_count,
            service.max_instance_count,
        ),
        _check("cloud-run", "cpu", limits.cpu, service.cpu),
        _check("cloud-run", "memory", limits.memory, service.memory),
        _check("cloud-run", "cpu idle", limits.cpu_idle, service.cpu_idle),
        _check(
            "cloud-run", "latest traffic %", 100, service.latest_traffic_percent
        ),
        _check(
            "cloud-run",
            "public",
            settings.allow_public_access,
            UNKNOWN if service.public is None else service.public,
        ),
        _check(
            "cloud-run",
            "service account",
            iam.service_account_email(settings.project_id, SERVICE_ACCOUNT_ID),
            service.service_account,
        ),
    ]
    env_names = set(service.env_names)
    checks.extend(
        _check(
            "cloud-run", f"env {name}", "set", "set" if name in env_names else MISSING
        )
        for name in MANAGED_ENV_VARS
    )
    if expected_tag is not None:
        deployed_tag = service.image.rsplit(":", 1)[-1] if ":" in service.image else ""
        checks.append(_check("cloud-run", "image tag", expected_tag, deployed_tag))
    return checks


def _local_tag(settings: StackSettings) -> str | None:
    try:
        return image_tag(compute_build_hash(settings.build_definition))
    except BuildDefinitionNotFound:
        logger.warning(
            f"No {settings.build_definition}; skipping image drift check"
        )
        return None


def _unreadable(resource: str, error: str) -> Check:
    return Check(
        resource=resource,
        check="exists",
        expected="present",
        actual=f"{UNREADABLE}: {error}",
        ok=False,
    )


def _safe(label: str, fn: Callable[..., Any], *args: Any) -> tuple[Any, str | None]:
    """Returns (result, None), or (None, error) when the lookup raised."""
    try:
        return fn(*args), None
    except Exception as e:
        logger.warning(f"Failed to inspect {label}: {e}")
        return None, str(e)


def verify_deployment(settings: StackSettings) -> VerificationReport:
    """
    Inspects the live project and compares it with what the stack declares.
    Every resource is fetched in parallel. A resource that does not exist is
    reported as missing; one whose lookup failed is reported as unreadable.
    """
    p, r = settings.project_id, settings.region
    lookups: dict[str, tuple[Callable[..., Any], tuple[Any, ...]]] = {
        "apis": (apis.list_enabled_apis, (p,)),
        "service_account": (iam.get_service_account, (p, SERVICE_ACCOUNT_ID)),
        "bucket": (storage.get_bucket, (settings.bucket_name,)),
        "database": (
            firestore.get_database,
            (p, settings.firestore_database_id, STORY_COLLECTION),
        ),
        "repository": (registry.get_repository, (p, r, settings.repository_id)),
        "service": (run.get_service, (p, r, settings.service_name)),
    }

    with ThreadPoolExecutor(max_workers=len(lookups)) as executor:
        futures = {
            key: executor.submit(_safe, key, fn, *args)
            for key, (fn, args) in lookups.items()
        }
        found = {key: future.result() for key, future in futures.items()}

    checkers: dict[str, tuple[str, Callable[[Any], list[Check]]]] = {
        "apis": ("apis", check_apis),
        "service_account": ("service-account", check_service_account),
        "bucket": ("bucket", check_bucket),
        "database": ("firestore", check_database),
        "repository": ("registry", check_repository),
        "service": (
            "cloud-run",
            lambda service: check_service(service, settings, _local_tag(settings)),
        ),
    }

    report = VerificationReport(
        project_id=p,
        region=r,
        scan_time=datetime.now(timezone.utc),
        service=found["service"][0],
    )
    for key, (resource, checker) in checkers.items():
        value, error = found[key]
        if error is not None:
            report.checks.append(_unreadable(resource, error))
        else:
            report.checks.extend(checker(value))
    return report


def render_report(report: VerificationReport, console: Console) -> None:
    table = Table(title=f"StoryCraft Deployment: {report.project_id} ({report.region})")
    table.add_column("Resource", style="cyan")
    table.add_column("Check")
    table.add_column("Expected")
    table.add_column("Actual")
    table.add_column("Status")

    for c in report.checks:
        status = "[green]OK[/green]" if c.ok else "[red]DRIFT[/red]"
        table.add_row(c.resource, c.check, c.expected, c.actual, status)

    console.print(table)

    if report.service is not None:
        console.print(f"Service URL: [bold]{report.service.url}[/bold]")

    if report.ok:
        console.print("[bold green]All checks passed.[/bold green]")
    else:
        console.print(
            f"[bold red]{len(report.failures)} of {len(report.checks)} "
            "checks failed.[/bold red]"
        )


def run_verify(
    settings: StackSettings,
    log_console: Console,
    out_console: Console,
    json_output: bool = False,
    html_path: str | None = None,
) -> VerificationReport:
    """Executes verification mode and renders the result."""
    log_console.print(
        f"Verifying [bold cyan]{settings.service_name}[/bold cyan] "
        f"in {settings.project_id} ({settings.region})..."
    )
    report = verify_deployment(settings)

    if json_output:
        print(report.model_dump_json(indent=2))
    else:
        render_report(report, out_console)

    if html_path:
        from ..reporter import generate_verification_report

        generate_verification_report(report, html_path)
        log_console.print(f"HTML report written to [bold]{html_path}[/bold]")

    return report
