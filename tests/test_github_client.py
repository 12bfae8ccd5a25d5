"""Tests for dependabot_merger.github.client."""

import json
import sys
from io import BytesIO
from unittest.mock import Mock, patch
from urllib.error import HTTPError, URLError

import pytest

from dependabot_merger.github import GitHubApiError, GitHubClient, GitHubNotFound

client_module = sys.modules["dependabot_merger.github.client"]


def _fake_response(payload, status: int = 200, link: str | None = None):
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    mock_response = Mock()
    mock_response.status = status
    mock_response.read.return_value = body
    mock_response.headers = {"Link": link} if link else {}
    mock_response.__enter__ = Mock(return_value=mock_response)
    mock_response.__exit__ = Mock(return_value=None)
    return mock_response


def _http_error(code: int, reason: str = "Error") -> HTTPError:
    return HTTPError("url", code, reason, {}, BytesIO(b'{"message": "nope"}'))


def _next_link(url: str) -> str:
    return f'<{url}>; rel="next", <https://api.github.com/last>; rel="last"'


class TestGitHubClient:
    def test_pull_requests_query_and_headers(self) -> None:
        """Test open PRs are requested oldest first with the token header."""
        with patch.object(client_module, "urlopen", return_value=_fake_response([{"number": 1}])) as m:
            result = GitHubClient("tok").pull_requests("o/r")

        assert result == [{"number": 1}]
        req = m.call_args[0][0]
        assert req.full_url.startswith("https://api.github.com/repos/o/r/pulls?")
        assert "state=open" in req.full_url
        assert "sort=created" in req.full_url
        assert "per_page=100" in req.full_url
        assert req.get_header("Authorization") == "token tok"
        assert req.get_method() == "GET"

    def test_pull_requests_follow_next_links(self) -> None:
        """Test every page of open PRs is collected in order."""
        page_two = "https://api.github.com/repositories/1/pulls?page=2"
        responses = [
            _fake_response([{"number": 1}, {"number": 2}], link=_next_link(page_two)),
            _fake_response([{"number": 3}]),
        ]
        with patch.object(client_module, "urlopen", side_effect=responses) as m:
            result = GitHubClient("tok").pull_requests("o/r")

        assert [pr["number"] for pr in result] == [1, 2, 3]
        assert m.call_count == 2
        assert m.call_args_list[1][0][0].full_url == page_two

    def test_workflow_runs_passes_head_sha(self) -> None:
        """Test workflow runs are filtered by the head commit sha."""
        with patch.object(
            client_module, "urlopen", return_value=_fake_response({"workflow_runs": []})
        ) as m:
            GitHubClient("tok").workflow_runs("o/r", "abc")
        url = m.call_args[0][0].full_url
        assert url.startswith("https://api.github.com/repos/o/r/actions/runs?")
        assert "head_sha=abc" in url
        assert "per_page=100" in url

    def test_workflow_runs_merges_pages(self) -> None:
        """Test a CI run on a later page is still listed."""
        page_two = "https://api.github.com/repos/o/r/actions/runs?head_sha=abc&page=2"
        responses = [
            _fake_response(
                {"total_count": 2, "workflow_runs": [{"id": 1, "name": "Lint"}]},
                link=_next_link(page_two),
            ),
            _fake_response({"total_count": 2, "workflow_runs": [{"id": 2, "name": "CI"}]}),
        ]
        with patch.object(client_module, "urlopen", side_effect=responses):
            result = GitHubClient("tok").workflow_runs("o/r", "abc")

        assert result["total_count"] == 2
        assert [run["name"] for run in result["workflow_runs"]] == ["Lint", "CI"]

    def test_listing_without_key_is_returned_as_is(self) -> None:
        """Test an unexpected listing shape is passed through for the caller to reject."""
        link = _next_link("https://api.github.com/never-fetched")
        with patch.object(
            client_module, "urlopen", return_value=_fake_response({"message": "Bad credentials"}, link=link)
        ) as m:
            assert GitHubClient("tok").workflow_jobs("o/r", 9) == {"message": "Bad credentials"}
        assert m.call_count == 1

    def test_contents_returns_raw_text(self) -> None:
        """Test file contents are fetched with the raw media type."""
        with patch.object(client_module, "urlopen", return_value=_fake_response(b"api_version: 1\n")) as m:
            text = GitHubClient("tok").contents("o/r", ".dependabot_merger.yml")
        assert text == "api_version: 1\n"
        assert m.call_args[0][0].get_header("Accept") == "application/vnd.github.raw"

    def test_not_found_raises_github_not_found(self) -> None:
        """Test a 404 is raised as GitHubNotFound."""
        with patch.object(client_module, "urlopen", side_effect=_http_error(404, "Not Found")):
            with pytest.raises(GitHubNotFound) as exc_info:
                GitHubClient("tok").contents("o/r", ".dependabot_merger.yml")
        assert exc_info.value.status == 404

    def test_other_http_errors_raise_api_error(self) -> None:
        """Test other HTTP errors keep their status."""
        with patch.object(client_module, "urlopen", side_effect=_http_error(500)):
            with pytest.raises(GitHubApiError) as exc_info:
                GitHubClient("tok").commit("o/r", "abc")
        assert exc_info.value.status == 500
        assert not isinstance(exc_info.value, GitHubNotFound)

    def test_network_error_raises_api_error(self) -> None:
        """Test network failures are wrapped in GitHubApiError."""
        with patch.object(client_module, "urlopen", side_effect=URLError("refused")):
            with pytest.raises(GitHubApiError, match="network error"):
                GitHubClient("tok").pull_request_commits("o/r", 1)

    def test_post_review_returns_status(self) -> None:
        """Test posting a review returns the HTTP status."""
        with patch.object(client_module, "urlopen", return_value=_fake_response({"id": 5})) as m:
            status = GitHubClient("tok").post_review("o/r", 3, "LGTM")
        assert status == 200
        req = m.call_args[0][0]
        assert req.get_method() == "POST"
        assert json.loads(req.data) == {"event": "APPROVE", "body": "LGTM"}

    def test_post_review_returns_error_status(self) -> None:
        """Test a rejected review returns the error status instead of raising."""
        with patch.object(client_module, "urlopen", side_effect=_http_error(422)):
            assert GitHubClient("tok").post_review("o/r", 3, "LGTM") == 422

    def test_merge_uses_put(self) -> None:
        """Test merging uses PUT on the merge endpoint."""
        with patch.object(client_module, "urlopen", return_value=_fake_response({"merged": True})) as m:
            assert GitHubClient("tok").merge_pull_request("o/r", 3) == {"merged": True}
        req = m.call_args[0][0]
        assert req.get_method() == "PUT"
        assert req.full_url == "https://api.github.com/repos/o/r/pulls/3/merge"

    def test_timeout_is_passed(self) -> None:
        """Test the configured timeout reaches urlopen."""
        with patch.object(client_module, "urlopen", return_value=_fake_response({})) as m:
            GitHubClient("tok", timeout=5).commit("o/r", "abc")
        assert m.call_args[1]["timeout"] == 5


def test_next_page_url() -> None:
    """Test extracting the rel="next" URL from a Link header."""
    assert client_module.next_page_url(_next_link("https://x/2")) == "https://x/2"
    assert client_module.next_page_url('<https://x/1>; rel="prev"') is None
    assert client_module.next_page_url(None) is None
