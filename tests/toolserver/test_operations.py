"""Tests for the operation boundary."""

import json
import logging
from unittest.mock import Mock

import pytest

from catalog.client import CatalogClient
from catalog.models import ComponentSpec, ComponentSummary
from common.env import Settings
from common.errors import MalformedResponse, NotFound, RemoteUnavailable
from toolserver.operations import CatalogOperations, OperationResult
from updates.checker import UNREACHABLE_MESSAGE, UpdateChecker
from updates.models import ChangeSet, UpdateReport, UpdateStatus

CHIPS = ComponentSummary("ChipsView", "Filter chips", ["chip"])


@pytest.fixture
def client():
    return Mock(spec=CatalogClient)


@pytest.fixture
def checker():
    return Mock(spec=UpdateChecker)


@pytest.fixture
def operations(client, checker):
    return CatalogOperations(client, checker)


class TestListComponents:
    def test_success_renders_json(self, operations, client):
        client.list_components.return_value = [CHIPS]

        result = operations.list_components()

        assert result.ok
        assert result.data == [
            {"name": "ChipsView", "description": "Filter chips", "tags": ["chip"]}
        ]
        assert json.loads(result.text) == result.data

    def test_published_entry_fields_pass_through(self, operations, client):
        entry = {"name": "ChipsView", "description": "Filter chips", "status": "beta"}
        client.list_components.return_value = [
            ComponentSummary("ChipsView", "Filter chips", document=entry)
        ]

        result = operations.list_components()

        assert result.data == [
            {"name": "ChipsView", "description": "Filter chips", "tags": [], "status": "beta"}
        ]

    def test_remote_unavailable(self, operations, client, caplog):
        client.list_components.side_effect = RemoteUnavailable("503 Service Unavailable")

        with caplog.at_level(logging.WARNING):
            result = operations.list_components()

        assert not result.ok
        assert result.error_code == "remote_unavailable"
        assert result.text == "Failed to fetch component index: 503 Service Unavailable"
        assert any(record.levelno == logging.WARNING for record in caplog.records)

    def test_malformed_response_logged_as_error(self, operations, client, caplog):
        client.list_components.side_effect = MalformedResponse("missing 'components' list")

        with caplog.at_level(logging.WARNING):
            result = operations.list_components()

        assert result.error_code == "malformed_response"
        assert result.text.startswith("Malformed catalog response:")
        assert any(record.levelno == logging.ERROR for record in caplog.records)


class TestGetComponent:
    def test_success(self, operations, client):
        document = {"name": "ChipsView", "description": "Filter chips", "properties": []}
        client.get_component.return_value = ComponentSpec(
            "ChipsView", "Filter chips", [], document
        )

        result = operations.get_component("ChipsView")

        assert result.ok
        assert json.loads(result.text) == document

    def test_not_found_suggests_listing(self, operations, client):
        client.get_component.side_effect = NotFound("Nope")

        result = operations.get_component("Nope")

        assert result.error_code == "not_found"
        assert result.text == (
            'Component "Nope" not found. Use list_components to see available components.'
        )

    def test_invalid_name(self, operations, client):
        client.get_component.side_effect = ValueError("Component name must be a non-empty string")

        result = operations.get_component("")

        assert result.error_code == "invalid_argument"

    def test_transport_failure(self, operations, client):
        client.get_component.side_effect = RemoteUnavailable("offline")

        result = operations.get_component("ChipsView")

        assert result.error_code == "remote_unavailable"
        assert result.text == 'Failed to fetch component "ChipsView": offline'


class TestSearchComponents:
    def test_matches(self, operations, client):
        client.search_components.return_value = [CHIPS]

        result = operations.search_components("chip")

        assert result.ok
        assert [entry["name"] for entry in json.loads(result.text)] == ["ChipsView"]
        client.search_components.assert_called_once_with("chip")

    def test_no_matches_is_success_with_message(self, operations, client):
        client.search_components.return_value = []

        result = operations.search_components("xyz")

        assert result.ok
        assert result.data == []
        assert result.text == 'No components found matching "xyz".'

    def test_failure(self, operations, client):
        client.search_components.side_effect = RemoteUnavailable("timeout")

        result = operations.search_components("chip")

        assert result.error_code == "remote_unavailable"


class TestCheckUpdates:
    def test_unreachable_is_informational(self, operations, checker):
        checker.check.return_value = UpdateReport(
            UpdateStatus.UNREACHABLE, message=UNREACHABLE_MESSAGE
        )

        result = operations.check_updates()

        assert result.ok
        assert result.error_code == "upstream_unreachable"
        assert result.text == UNREACHABLE_MESSAGE

    def test_error_is_failure(self, operations, checker):
        checker.check.return_value = UpdateReport(UpdateStatus.ERROR, message="bad revision")

        result = operations.check_updates()

        assert not result.ok
        assert result.error_code == "diff_failed"
        assert result.text == "Error: bad revision"

    def test_behind_renders_report(self, operations, checker):
        change_set = ChangeSet(commits_behind=2, new_paths=["components/Foo.json"])
        checker.check.return_value = UpdateReport(
            UpdateStatus.BEHIND, message="2 commit(s) behind remote", change_set=change_set
        )

        result = operations.check_updates()

        assert result.ok
        assert "2 commit(s) behind" in result.text
        assert result.data["change_set"]["new_paths"] == ["components/Foo.json"]


class TestConstruction:
    def test_from_settings(self, tmp_path):
        settings = Settings.from_env(
            base_url="https://catalog.example.com/specs/",
            repo_root=tmp_path,
            remote="upstream",
            branch="develop",
        )

        operations = CatalogOperations.from_settings(settings)

        assert operations.client.base_url == "https://catalog.example.com/specs"
        assert operations.checker.tracking_ref == "upstream/develop"
        assert operations.checker.repo.root == tmp_path
        operations.close()

    def test_result_factories(self):
        assert OperationResult.success({"a": 1}).text == '{\n  "a": 1\n}'
        failure = OperationResult.failure("not_found", "missing")
        assert (failure.ok, failure.error_code, failure.data) == (False, "not_found", None)
