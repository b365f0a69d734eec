"""Tests for the GitHub membership client."""

from unittest.mock import MagicMock

import pytest
import requests

from cost_center_sync.config_models import SourceSpecifier
from cost_center_sync.errors import AuthFailedError
from cost_center_sync.github_api import GitHubAPIClient, GitHubMembershipSource
from tests.fakes import make_response


def make_source(responses):
    session = MagicMock()
    session.get.side_effect = responses
    return GitHubMembershipSource("test-token", session=session), session


class TestGitHubAPIClient:

    def test_requires_token(self):
        with pytest.raises(ValueError):
            GitHubAPIClient("")

    def test_session_headers(self):
        client = GitHubAPIClient("test-token")

        assert client.session.headers["Authorization"] == "token test-token"
        assert client.session.headers["X-GitHub-Api-Version"] == "2022-11-28"

    def test_base_url_trailing_slash_is_stripped(self):
        client = GitHubAPIClient("t", base_url="https://ghe.example.com/api/v3/", session=MagicMock())

        assert client.base_url == "https://ghe.example.com/api/v3"

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failures_raise_auth_failed(self, status):
        session = MagicMock()
        session.get.return_value = make_response(status, {"message": "Bad credentials"})
        client = GitHubAPIClient("t", session=session)

        with pytest.raises(AuthFailedError) as exc_info:
            client._make_request("https://api.github.com/orgs/org1/members")

        assert str(status) in str(exc_info.value)

    def test_other_http_errors_propagate(self):
        session = MagicMock()
        session.get.return_value = make_response(500, {"message": "boom"})
        client = GitHubAPIClient("t", session=session)

        with pytest.raises(requests.exceptions.HTTPError):
            client._make_request("https://api.github.com/orgs/org1/members")

    def test_no_content_returns_none(self):
        session = MagicMock()
        session.post.return_value = make_response(204)
        client = GitHubAPIClient("t", session=session)

        assert client._make_request("https://api.github.com/x", method="POST", json={}) is None

    def test_unsupported_method(self):
        client = GitHubAPIClient("t", session=MagicMock())

        with pytest.raises(ValueError):
            client._make_request("https://api.github.com/x", method="PATCH")

    def test_timeout_is_passed_through(self):
        session = MagicMock()
        session.get.return_value = make_response(200, [])
        client = GitHubAPIClient("t", timeout=5, session=session)

        client._make_request("https://api.github.com/x")

        assert session.get.call_args.kwargs["timeout"] == 5


class TestGitHubMembershipSource:

    def test_org_members(self):
        source, session = make_source([make_response(200, [{"login": "a"}, {"login": "b"}])])

        assert source.get_org_members("org1") == ["a", "b"]
        assert session.get.call_args.args[0] == "https://api.github.com/orgs/org1/members"

    def test_team_members(self):
        source, session = make_source([make_response(200, [{"login": "team-user1"}])])

        assert source.get_team_members("org1", "platform") == ["team-user1"]
        assert session.get.call_args.args[0] == "https://api.github.com/orgs/org1/teams/platform/members"

    def test_get_members_dispatches_on_team(self):
        source, session = make_source([
            make_response(200, [{"login": "a"}]),
            make_response(200, [{"login": "b"}]),
        ])

        assert source.get_members(SourceSpecifier("org1")) == ["a"]
        assert source.get_members(SourceSpecifier("org1", "t1")) == ["b"]
        urls = [call.args[0] for call in session.get.call_args_list]
        assert urls == [
            "https://api.github.com/orgs/org1/members",
            "https://api.github.com/orgs/org1/teams/t1/members",
        ]

    def test_walks_all_pages(self):
        first_page = [{"login": f"user{i}"} for i in range(100)]
        source, session = make_source([
            make_response(200, first_page),
            make_response(200, [{"login": "last"}]),
        ])

        members = source.get_org_members("org1")

        assert len(members) == 101
        assert members[-1] == "last"
        pages = [call.kwargs["params"]["page"] for call in session.get.call_args_list]
        assert pages == [1, 2]

    def test_stops_on_empty_page(self):
        source, session = make_source([make_response(200, [])])

        assert source.get_org_members("org1") == []
        assert session.get.call_count == 1

    def test_entries_without_login_are_skipped(self):
        source, _ = make_source([make_response(200, [{"login": "a"}, {"id": 1}, {"login": ""}])])

        assert source.get_org_members("org1") == ["a"]

    def test_unexpected_payload_raises(self):
        source, _ = make_source([make_response(200, {"message": "not a list"})])

        with pytest.raises(ValueError):
            source.get_org_members("org1")

    def test_not_found_propagates(self):
        source, _ = make_source([make_response(404, {"message": "Not Found"})])

        with pytest.raises(requests.exceptions.HTTPError):
            source.get_team_members("org1", "missing")
