"""Unit tests for the QueryAPI facade."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import pytest

from forgehub.query.api import QueryAPI
from forgehub.query.core import (
    AuthSessionProvider,
    IssueFilter,
    ProviderId,
    ProviderTransport,
    PullRequestFilter,
)
from forgehub.query.models import (
    Identity,
    IdentityFilterOptions,
    Issue,
    Page,
    PullRequest,
    RepoDescriptor,
    Repository,
)

R1 = RepoDescriptor(namespace="acme", name="api")
R2 = RepoDescriptor(namespace="acme", name="web")


@pytest.fixture
def transport():
    """Create a mock transport."""
    transport = AsyncMock(spec=ProviderTransport)
    transport.get_current_user.return_value = Identity(id="42", username="alice")
    transport.get_current_user_for_organization.return_value = Identity(
        id="a1", name="Alice Example"
    )
    return transport


@pytest.fixture
def auth():
    """Create a session gate that always grants a session."""
    auth = AsyncMock(spec=AuthSessionProvider)
    auth.ensure_session.return_value = True
    return auth


@pytest.fixture
def api(transport, auth):
    """Create a QueryAPI with mocked collaborators."""
    return QueryAPI(transport, auth)


class TestSessionGate:
    """Test session gating."""

    @pytest.mark.asyncio
    async def test_no_session_fails_without_calls(self, api, auth, transport):
        """Test a missing session yields SessionUnavailable and no transport calls."""
        auth.ensure_session.return_value = False
        result = await api.get_pull_requests(ProviderId.BITBUCKET, [R1])

        assert not result
        assert result.category == "SessionUnavailable"
        assert result.unwrap_or_none() is None
        transport.get_pull_requests_for_repo.assert_not_called()

    @pytest.mark.asyncio
    async def test_session_error_is_categorized(self, api, auth):
        """Test an auth failure is reported as SessionUnavailable."""
        auth.ensure_session.side_effect = RuntimeError("keychain locked")
        result = await api.get_issues(ProviderId.GITHUB, [R1])
        assert result.category == "SessionUnavailable"

    @pytest.mark.asyncio
    async def test_session_uses_provider_domain_and_scopes(self, api, auth):
        """Test ensure_session receives the registry's domain and scopes."""
        assert await api.ensure_session(ProviderId.GITLAB) is True
        provider_id, domain, scopes = auth.ensure_session.await_args.args
        assert provider_id == ProviderId.GITLAB
        assert domain == "gitlab.com"
        assert "read_api" in scopes

    @pytest.mark.asyncio
    async def test_ensure_session_false(self, api, auth):
        """Test ensure_session reports False instead of raising."""
        auth.ensure_session.return_value = False
        assert await api.ensure_session(ProviderId.GITHUB) is False


class TestPullRequests:
    """Test get_pull_requests."""

    @pytest.mark.asyncio
    async def test_bulk_with_author_filter(self, api, transport):
        """Test GitHub author filter resolves the user and sends only the author slot."""
        page = Page[PullRequest](values=[PullRequest(id="1", title="t")], more=False)
        transport.get_pull_requests_for_repos.return_value = page

        result = await api.get_pull_requests(
            ProviderId.GITHUB, [R1, R2], filters=[PullRequestFilter.AUTHOR]
        )

        assert result.unwrap() is page
        transport.get_pull_requests_for_repos.assert_awaited_once_with(
            ProviderId.GITHUB,
            [R1, R2],
            cursor=None,
            options=IdentityFilterOptions(author_login="alice"),
        )

    @pytest.mark.asyncio
    async def test_fan_out_per_repository(self, api, transport):
        """Test Bitbucket fans out per repository and merges the pages."""
        pages = {
            "api": Page(values=[PullRequest(id="1", title="a")], more=True, cursor="c1"),
            "web": Page(values=[PullRequest(id="2", title="b")]),
        }

        async def per_repo(provider_id, repo, *, cursor=None, options=None):
            return pages[repo.name]

        transport.get_pull_requests_for_repo.side_effect = per_repo

        result = await api.get_pull_requests(ProviderId.BITBUCKET, [R1, R2])

        page = result.unwrap()
        assert [v.id for v in page.values] == ["1", "2"]
        assert page.more is True
        assert transport.get_pull_requests_for_repo.await_count == 2
        transport.get_current_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_mapping_input_accepted(self, api, transport):
        """Test repository mappings are accepted like descriptors."""
        transport.get_pull_requests_for_repo.return_value = Page()
        result = await api.get_pull_requests(
            ProviderId.BITBUCKET, [{"namespace": "acme", "name": "api"}]
        )
        assert result
        repo = transport.get_pull_requests_for_repo.await_args.args[1]
        assert repo == R1

    @pytest.mark.asyncio
    async def test_unsupported_filter_skips_identity(self, api, transport):
        """Test unsupported filters fail before identity resolution."""
        result = await api.get_pull_requests(
            ProviderId.BITBUCKET, [R1], filters=[PullRequestFilter.ASSIGNEE]
        )
        assert result.category == "UnsupportedFilter"
        transport.get_current_user.assert_not_called()
        transport.get_pull_requests_for_repo.assert_not_called()

    @pytest.mark.asyncio
    async def test_multiple_organizations_skip_identity(self, api, transport):
        """Test the organization check runs before identity resolution."""
        repos = [
            RepoDescriptor(namespace="orgA", project="p", name="r1"),
            RepoDescriptor(namespace="orgB", project="p", name="r2"),
        ]
        result = await api.get_pull_requests(
            ProviderId.AZURE_DEVOPS, repos, filters=[PullRequestFilter.AUTHOR]
        )
        assert result.category == "MultipleOrganizationsNotSupported"
        transport.get_current_user_for_organization.assert_not_called()
        transport.get_pull_requests_for_repo.assert_not_called()

    @pytest.mark.asyncio
    async def test_ids_rejected_for_per_unit_provider(self, api, transport):
        """Test ids against Bitbucket yield UnsupportedInput."""
        result = await api.get_pull_requests(ProviderId.BITBUCKET, ["1", "2"])
        assert result.category == "UnsupportedInput"
        transport.get_pull_requests_for_repos.assert_not_called()

    @pytest.mark.asyncio
    async def test_identity_failure(self, api, transport):
        """Test a failing current-user lookup yields IdentityUnavailable."""
        transport.get_current_user.side_effect = RuntimeError("401")
        result = await api.get_pull_requests(
            ProviderId.GITLAB, [R1], filters=[PullRequestFilter.AUTHOR]
        )
        assert result.category == "IdentityUnavailable"
        transport.get_pull_requests_for_repos.assert_not_called()

    @pytest.mark.asyncio
    async def test_unit_failure_logged_with_category(self, api, transport, caplog):
        """Test a failing unit yields ProviderCallFailed and an ERROR log."""
        transport.get_pull_requests_for_repo.side_effect = RuntimeError("boom")
        with caplog.at_level(logging.DEBUG, logger="forgehub.query"):
            result = await api.get_pull_requests(ProviderId.BITBUCKET, [R1])

        assert result.category == "ProviderCallFailed"
        records = [r for r in caplog.records if getattr(r, "category", None)]
        assert records[-1].levelno == logging.ERROR
        assert records[-1].category == "ProviderCallFailed"

    @pytest.mark.asyncio
    async def test_validation_failure_logged_as_warning(self, api, caplog):
        """Test validation failures log at WARNING."""
        with caplog.at_level(logging.WARNING, logger="forgehub.query"):
            await api.get_pull_requests(ProviderId.BITBUCKET, ["1"])
        record = next(r for r in caplog.records if getattr(r, "category", None))
        assert record.levelno == logging.WARNING
        assert record.category == "UnsupportedInput"

    @pytest.mark.asyncio
    async def test_malformed_cursor_skips_identity(self, api, transport):
        """Test a malformed cursor fails before the current user is resolved."""
        result = await api.get_pull_requests(
            ProviderId.BITBUCKET, [R1], filters=[PullRequestFilter.AUTHOR], cursor="garbage"
        )
        assert result.category == "UnsupportedInput"
        transport.get_current_user.assert_not_awaited()
        transport.get_pull_requests_for_repo.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrong_kind_cursor_skips_identity(self, api, transport):
        """Test a repository cursor on a project-unit issue query makes no provider call."""
        repos = [RepoDescriptor(namespace="contoso", project="p1", name="a")]
        cursor = '{"cursors":[{"repo":{"namespace":"contoso","name":"a"},"cursor":"c"}]}'
        result = await api.get_issues(
            ProviderId.AZURE_DEVOPS, repos, filters=[IssueFilter.AUTHOR], cursor=cursor
        )
        assert result.category == "UnsupportedInput"
        assert transport.mock_calls == []

    @pytest.mark.asyncio
    async def test_unknown_provider_makes_no_transport_calls(self, api, transport):
        """Test a provider missing from the registry fails without transport calls."""
        result = await api.get_pull_requests("gitea", [RepoDescriptor(namespace="a", name="b")])
        assert not result
        assert result.category == "UnsupportedInput"
        assert transport.mock_calls == []


class TestIssues:
    """Test get_issues."""

    @pytest.mark.asyncio
    async def test_azure_devops_issues_per_project(self, api, transport):
        """Test Azure DevOps issues page per project with display-name filters."""
        transport.get_issues_for_project.return_value = Page[Issue](
            values=[Issue(id="7", title="bug")], more=False
        )
        repos = [
            RepoDescriptor(namespace="contoso", project="p1", name="a"),
            RepoDescriptor(namespace="contoso", project="p1", name="b"),
        ]

        result = await api.get_issues(
            ProviderId.AZURE_DEVOPS, repos, filters=[IssueFilter.ASSIGNEE]
        )

        assert [v.id for v in result.unwrap().values] == ["7"]
        transport.get_current_user_for_organization.assert_awaited_once_with(
            ProviderId.AZURE_DEVOPS, "contoso"
        )
        transport.get_issues_for_project.assert_awaited_once_with(
            "contoso",
            "p1",
            cursor=None,
            options=IdentityFilterOptions(assignee_logins=["Alice Example"]),
        )
        transport.get_issues_for_repo.assert_not_called()

    @pytest.mark.asyncio
    async def test_gitlab_issue_ids_bulk(self, api, transport):
        """Test GitLab issues accept ids and pass the cursor through."""
        transport.get_issues_for_repos.return_value = Page(more=True, cursor="next")
        result = await api.get_issues(ProviderId.GITLAB, ["101"], cursor="prev")
        assert result.unwrap().cursor == "next"
        transport.get_issues_for_repos.assert_awaited_once_with(
            ProviderId.GITLAB, ["101"], cursor="prev", options=None
        )

    @pytest.mark.asyncio
    async def test_bitbucket_issue_filters_unsupported(self, api):
        """Test Bitbucket rejects every issue filter."""
        result = await api.get_issues(ProviderId.BITBUCKET, [R1], filters=[IssueFilter.AUTHOR])
        assert result.category == "UnsupportedFilter"


class TestRepositoriesForProject:
    """Test get_repositories_for_project."""

    @pytest.mark.asyncio
    async def test_pass_through(self, api, transport, auth):
        """Test the call is gated on the Azure DevOps session and passed through."""
        page = Page[Repository](values=[Repository(id="1", name="a")])
        transport.get_repositories_for_project.return_value = page

        result = await api.get_repositories_for_project("contoso", "p1", cursor="c")

        assert result.unwrap() is page
        assert auth.ensure_session.await_args.args[0] == ProviderId.AZURE_DEVOPS
        transport.get_repositories_for_project.assert_awaited_once_with(
            "contoso", "p1", cursor="c"
        )

    @pytest.mark.asyncio
    async def test_failure_is_categorized(self, api, transport):
        """Test transport errors become ProviderCallFailed."""
        transport.get_repositories_for_project.side_effect = RuntimeError("404")
        result = await api.get_repositories_for_project("contoso", "p1")
        assert result.category == "ProviderCallFailed"
        assert result.error.unit == "contoso/p1"


class TestLifecycle:
    """Test resource management."""

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport_once(self, transport, auth):
        """Test closing is idempotent."""
        async with QueryAPI(transport, auth) as api:
            pass
        await api.close()
        transport.close.assert_awaited_once()
