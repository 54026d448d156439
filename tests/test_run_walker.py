from datetime import datetime

from google.api_core.exceptions import NotFound, PermissionDenied

from storycraft_infra.walkers.run import get_service


def _mock_service(mocker, image="us-central1-docker.pkg.dev/p/r/app:abc123"):
    mock_svc = mocker.Mock()
    mock_svc.name = "projects/p/locations/us-central1/services/storycraft"
    mock_svc.uri = "https://storycraft-abc-uc.a.run.app"
    mock_svc.update_time = datetime(2024, 1, 1)
    mock_svc.template.service_account = "storycraft-service@p.iam.gserviceaccount.com"
    mock_svc.template.scaling.min_instance_count = 0
    mock_svc.template.scaling.max_instance_count = 100

    env = mocker.Mock()
    env.name = "NODE_ENV"
    container = mocker.Mock(image=image, env=[env])
    container.resources.limits = {"cpu": "2", "memory": "4Gi"}
    container.resources.cpu_idle = True
    mock_svc.template.containers = [container]

    traffic = mocker.Mock(percent=100)
    traffic.type_.name = "TRAFFIC_TARGET_ALLOCATION_TYPE_LATEST"
    mock_svc.traffic = [traffic]
    return mock_svc


def test_get_service_mock(mocker):
    # Mock Getter
    mock_get = mocker.patch("storycraft_infra.walkers.run.get_run_client")
    mock_client = mock_get.return_value

    mock_client.get_service.return_value = _mock_service(mocker)
    mock_client.get_iam_policy.return_value = mocker.Mock(
        bindings=[mocker.Mock(role="roles/run.invoker", members=["allUsers"])]
    )

    result = get_service("p", "us-central1", "storycraft")

    assert result.name == "storycraft"
    assert result.image.endswith(":abc123")
    assert result.cpu == "2"
    assert result.memory == "4Gi"
    assert result.cpu_idle is True
    assert result.max_instance_count == 100
    assert result.latest_traffic_percent == 100
    assert result.env_names == ["NODE_ENV"]
    assert result.public is True


def test_get_service_private(mocker):
    mock_client = mocker.patch("storycraft_infra.walkers.run.get_run_client").return_value
    mock_client.get_service.return_value = _mock_service(mocker)
    mock_client.get_iam_policy.return_value = mocker.Mock(
        bindings=[
            mocker.Mock(
                role="roles/run.invoker",
                members=["serviceAccount:ci@p.iam.gserviceaccount.com"],
            )
        ]
    )

    assert get_service("p", "us-central1", "storycraft").public is False


def test_get_service_not_found(mocker):
    mock_client = mocker.patch("storycraft_infra.walkers.run.get_run_client").return_value
    mock_client.get_service.side_effect = NotFound("service not found")

    assert get_service("p", "us-central1", "storycraft") is None
    mock_client.get_iam_policy.assert_not_called()


def test_get_service_unreadable_policy_keeps_service(mocker):
    mock_client = mocker.patch("storycraft_infra.walkers.run.get_run_client").return_value
    mock_client.get_service.return_value = _mock_service(mocker)
    mock_client.get_iam_policy.side_effect = PermissionDenied("no getIamPolicy")

    result = get_service("p", "us-central1", "storycraft")

    assert result.name == "storycraft"
    assert result.image.endswith(":abc123")
    assert result.public is None
