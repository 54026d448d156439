from google.api_core.exceptions import NotFound

from storycraft_infra.walkers.firestore import get_database


def _field(mocker, path, order):
    f = mocker.Mock(field_path=path)
    f.order.name = order
    return f


def test_get_database_mock(mocker):
    mock_client = mocker.patch(
        "storycraft_infra.walkers.firestore.get_firestore_admin_client"
    ).return_value

    mock_db = mocker.Mock(location_id="us-central1")
    mock_db.name = "projects/p/databases/(default)"
    mock_db.type_.name = "FIRESTORE_NATIVE"
    mock_db.delete_protection_state.name = "DELETE_PROTECTION_DISABLED"
    mock_client.get_database.return_value = mock_db

    mock_index = mocker.Mock()
    mock_index.fields = [
        _field(mocker, "userId", "ASCENDING"),
        _field(mocker, "updatedAt", "DESCENDING"),
        _field(mocker, "__name__", "DESCENDING"),
    ]
    mock_client.list_indexes.return_value = [mock_index]

    result = get_database("p", "(default)", "stories")

    mock_client.list_indexes.assert_called_once_with(
        parent="projects/p/databases/(default)/collectionGroups/stories"
    )
    assert result.name == "(default)"
    assert result.type == "FIRESTORE_NATIVE"
    assert result.indexes[0].fields == [
        ("userId", "ASCENDING"),
        ("updatedAt", "DESCENDING"),
    ]


def test_get_database_not_found(mocker):
    mock_client = mocker.patch(
        "storycraft_infra.walkers.firestore.get_firestore_admin_client"
    ).return_value
    mock_client.get_database.side_effect = NotFound("no database")

    assert get_database("p", "(default)", "stories") is None
