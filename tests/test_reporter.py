from datetime import datetime, timezone

from storycraft_infra.reporter import generate_verification_report
from storycraft_infra.schemas.status import Check, DeployedService, VerificationReport


def test_generate_verification_report_html(tmp_path):
    report = VerificationReport(
        project_id="test-project",
        region="us-central1",
        scan_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        checks=[
            Check(resource="bucket", check="versioning", expected="False", actual="False", ok=True),
            Check(resource="cloud-run", check="public", expected="True", actual="False", ok=False),
        ],
        service=DeployedService(
            name="storycraft",
            region="us-central1",
            url="https://storycraft-abc-uc.a.run.app",
            image="us-central1-docker.pkg.dev/p/r/app:abc",
            service_account="sa@p.iam.gserviceaccount.com",
            update_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
    )

    output_file = tmp_path / "report.html"

    generate_verification_report(report, str(output_file))

    html = output_file.read_text()
    assert "test-project" in html
    assert "https://storycraft-abc-uc.a.run.app" in html
    assert "DRIFT" in html
    assert "1 of 2 checks failed" in html


def test_generate_verification_report_all_ok(tmp_path):
    report = VerificationReport(
        project_id="test-project",
        region="us-central1",
        scan_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        checks=[
            Check(resource="registry", check="format", expected="DOCKER", actual="DOCKER", ok=True),
        ],
    )

    output_file = tmp_path / "report.html"
    generate_verification_report(report, str(output_file))

    assert "All 1 checks passed." in output_file.read_text()
