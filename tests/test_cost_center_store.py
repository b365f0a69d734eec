"""Tests for the enterprise cost center client."""

from unittest.mock import MagicMock

import pytest
import requests

from cost_center_sync.cost_center_store import CostCenterStore
from cost_center_sync.errors import AuthFailedError, GroupNotFoundError
from tests.fakes import make_response

COST_CENTERS_URL = "https://api.github.com/enterprises/test-enterprise/settings/billing/cost-centers"


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def store(session):
    return CostCenterStore("test-token", "test-enterprise", session=session)


def test_requires_enterprise(session):
    with pytest.raises(ValueError):
        CostCenterStore("test-token", "", session=session)


def test_list_cost_centers(store, session, cost_center_data):
    session.get.return_value = make_response(200, {"costCenters": [cost_center_data]})

    cost_centers = store.list_cost_centers()

    assert [cc.id for cc in cost_centers] == ["test-id-123"]
    assert session.get.call_args.args[0] == COST_CENTERS_URL


def test_find_cost_center_by_exact_name(store, session, cost_center_data):
    other = {"id": "other-id", "name": "Test-Cost-Center", "resources": []}
    session.get.return_value = make_response(200, {"costCenters": [other, cost_center_data]})

    cost_center = store.find_cost_center("test-cost-center")

    assert cost_center.id == "test-id-123"
    assert cost_center.organizations == ["org1", "org2"]
    assert cost_center.direct_members == ["direct-user1", "direct-user2"]


def test_find_cost_center_not_found_lists_available(store, session, cost_center_data):
    session.get.return_value = make_response(200, {"costCenters": [cost_center_data]})

    with pytest.raises(GroupNotFoundError) as exc_info:
        store.find_cost_center("nonexistent-cost-center")

    message = str(exc_info.value)
    assert "nonexistent-cost-center" in message
    assert "test-cost-center" in message
    assert exc_info.value.available == ["test-cost-center"]


def test_find_cost_center_with_no_cost_centers(store, session):
    session.get.return_value = make_response(200, {"costCenters": []})

    with pytest.raises(GroupNotFoundError):
        store.find_cost_center("anything")


def test_find_inactive_cost_center_warns(store, session, caplog):
    session.get.return_value = make_response(200, {"costCenters": [
        {"id": "gone", "name": "old", "state": "deleted", "resources": []}
    ]})

    with caplog.at_level("WARNING"):
        cost_center = store.find_cost_center("old")

    assert cost_center.id == "gone"
    assert "deleted" in caplog.text


def test_add_user_posts_single_user(store, session):
    session.post.return_value = make_response(200, {"message": "Resources successfully added"})

    store.add_user("test-id-123", "octocat")

    session.post.assert_called_once()
    call = session.post.call_args
    assert call.args[0] == f"{COST_CENTERS_URL}/test-id-123/resource"
    assert call.kwargs["json"] == {"users": ["octocat"]}


def test_remove_user_deletes_single_user(store, session):
    session.delete.return_value = make_response(204)

    store.remove_user("test-id-123", "octocat")

    call = session.delete.call_args
    assert call.args[0] == f"{COST_CENTERS_URL}/test-id-123/resource"
    assert call.kwargs["json"] == {"users": ["octocat"]}


def test_mutation_error_propagates(store, session):
    session.post.return_value = make_response(500, {"message": "boom"})

    with pytest.raises(requests.exceptions.HTTPError):
        store.add_user("test-id-123", "octocat")


def test_rejected_token(store, session):
    session.get.return_value = make_response(401, {"message": "Bad credentials"})

    with pytest.raises(AuthFailedError):
        store.list_cost_centers()


def test_base_url_override(session):
    store = CostCenterStore("t", "acme", base_url="https://billing.example.com/", session=session)
    session.get.return_value = make_response(200, {"costCenters": []})

    store.list_cost_centers()

    assert session.get.call_args.args[0] == "https://billing.example.com/enterprises/acme/settings/billing/cost-centers"
