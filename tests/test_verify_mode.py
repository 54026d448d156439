from datetime import datetime

import pytest

from storycraft_infra.build import compute_build_hash, image_tag
from storycraft_infra.config import StackSettings
from storycraft_infra.core import (
    MANAGED_ENV_VARS,
    REQUIRED_APIS,
    SERVICE_ACCOUNT_ROLES,
)
from storycraft_infra.modes import verify
from storycraft_infra.schemas.status import (
    DeployedBucket,
    DeployedDatabase,
    DeployedIndex,
    DeployedRepository,
    DeployedService,
    DeployedServiceAccount,
)


@pytest.fixture
def settings(build_context):
    return StackSettings(project_id="p", build_context=build_context)


@pytest.fixture
def healthy(mocker, settings, build_context):
    """Patches every walker to return a deployment matching the stack."""
    tag = image_tag(compute_build_hash(build_context / "Dockerfile"))
    found = {
        "apis": set(REQUIRED_APIS),
        "service_account": DeployedServiceAccount(
            email="storycraft-service@p.iam.gserviceaccount.com",
            display_name="StoryCraft",
            disabled=False,
            project_roles=sorted(SERVICE_ACCOUNT_ROLES),
        ),
        "bucket": DeployedBucket(
            name=settings.bucket_name,
            location="US-CENTRAL1",
            uniform_bucket_level_access=True,
            versioning_enabled=False,
            lifecycle_delete_age_days=[30],
            cors_origins=["*"],
            cors_methods=["DELETE", "GET", "HEAD", "POST", "PUT"],
        ),
        "database": DeployedDatabase(
            name="(default)",
            location_id="us-central1",
            type="FIRESTORE_NATIVE",
            delete_protection_state="DELETE_PROTECTION_DISABLED",
            indexes=[
                DeployedIndex(
                    collection="stories",
                    fields=[("userId", "ASCENDING"), ("updatedAt", "DESCENDING")],
                )
            ],
        ),
        "repository": DeployedRepository(name="storycraft", format="DOCKER"),
        "service": DeployedService(
            name="storycraft",
            region="us-central1",
            url="https://storycraft-abc-uc.a.run.app",
            image=f"us-central1-docker.pkg.dev/p/storycraft/storycraft-app:{tag}",
            service_account="storycraft-service@p.iam.gserviceaccount.com",
            update_time=datetime(2024, 1, 1),
            min_instance_count=0,
            max_instance_count=100,
            cpu="2",
            memory="4Gi",
            cpu_idle=True,
            env_names=[*MANAGED_ENV_VARS, "EXTRA"],
            latest_traffic_percent=100,
            public=True,
        ),
    }
    patches = {
        "apis": mocker.patch("storycraft_infra.walkers.apis.list_enabled_apis"),
        "service_account": mocker.patch(
            "storycraft_infra.walkers.iam.get_service_account"
        ),
        "bucket": mocker.patch("storycraft_infra.walkers.storage.get_bucket"),
        "database": mocker.patch("storycraft_infra.walkers.firestore.get_database"),
        "repository": mocker.patch("storycraft_infra.walkers.registry.get_repository"),
        "service": mocker.patch("storycraft_infra.walkers.run.get_service"),
    }
    for key, patch in patches.items():
        patch.return_value = found[key]
    return patches


def test_verify_healthy_deployment(healthy, settings):
    report = verify.verify_deployment(settings)

    assert report.ok, [c for c in report.failures]
    assert report.service.name == "storycraft"
    healthy["database"].assert_called_once_with("p", "(default)", "stories")


def test_verify_flags_public_mismatch(healthy, build_context):
    private = StackSettings(
        project_id="p", build_context=build_context, allow_public_access=False
    )
    report = verify.verify_deployment(private)

    assert [(c.resource, c.check) for c in report.failures] == [("cloud-run", "public")]


def test_verify_missing_bucket(healthy, settings):
    healthy["bucket"].return_value = None

    report = verify.verify_deployment(settings)

    failures = report.failures
    assert len(failures) == 1
    assert failures[0].resource == "bucket"
    assert failures[0].actual == "missing"


def test_verify_walker_error_reported_as_unreadable(healthy, settings):
    healthy["repository"].side_effect = RuntimeError("permission denied")

    report = verify.verify_deployment(settings)

    assert [(c.resource, c.actual) for c in report.failures] == [
        ("registry", "unreadable: permission denied")
    ]


def test_verify_flags_missing_managed_env_var(healthy, settings):
    service = healthy["service"].return_value
    healthy["service"].return_value = service.model_copy(
        update={"env_names": [n for n in service.env_names if n != "AUTH_SECRET"]}
    )

    report = verify.verify_deployment(settings)

    assert [(c.check, c.actual) for c in report.failures] == [
        ("env AUTH_SECRET", "missing")
    ]


def test_verify_unknown_public_access_is_drift(healthy, settings):
    healthy["service"].return_value = healthy["service"].return_value.model_copy(
        update={"public": None}
    )

    report = verify.verify_deployment(settings)

    assert [(c.check, c.actual) for c in report.failures] == [("public", "unknown")]
    assert report.service.image.startswith("us-central1-docker.pkg.dev")


def test_verify_detects_stale_image(healthy, settings):
    healthy["service"].return_value = healthy["service"].return_value.model_copy(
        update={"image": "us-central1-docker.pkg.dev/p/storycraft/storycraft-app:0000"}
    )

    report = verify.verify_deployment(settings)

    assert [c.check for c in report.failures] == ["image tag"]


def test_verify_skips_image_check_without_dockerfile(healthy, tmp_path):
    settings = StackSettings(project_id="p", build_context=tmp_path / "missing")

    report = verify.verify_deployment(settings)

    assert report.ok
    assert "image tag" not in [c.check for c in report.checks]


def test_check_database_wrong_index_order():
    db = DeployedDatabase(
        name="(default)",
        location_id="us-central1",
        type="FIRESTORE_NATIVE",
        delete_protection_state="DELETE_PROTECTION_DISABLED",
        indexes=[
            DeployedIndex(
                collection="stories",
                fields=[("updatedAt", "DESCENDING"), ("userId", "ASCENDING")],
            )
        ],
    )
    checks = verify.check_database(db)

    assert [c.check for c in checks if not c.ok] == ["stories index"]


def test_check_apis_reports_disabled():
    checks = verify.check_apis({"run.googleapis.com"})

    disabled = [c.check for c in checks if not c.ok]
    assert "run.googleapis.com" not in disabled
    assert len(disabled) == len(REQUIRED_APIS) - 1
