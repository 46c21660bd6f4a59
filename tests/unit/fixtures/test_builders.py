"""
Unit tests for fixtures.builders module.

Tests:
- Tag layout of every NIP-34 builder (announcement, state, issue, reply,
  patch, pull request, status)
- Status kind selection and validation
- NIP-32 label tags and validation

Builders are signed with a roster identity so assertions run on real events.
"""

import pytest

from mockstr.fixtures.builders import (
    RepoRef,
    build_issue,
    build_issue_reply,
    build_label,
    build_patch,
    build_pull_request,
    build_repo_announcement,
    build_repo_state,
    build_status,
)
from mockstr.fixtures.identities import BASE_TIMESTAMP, TEST_IDENTITIES
from mockstr.models import EventKind, StatusKind


ALICE = TEST_IDENTITIES["alice"]
REPO_ADDRESS = f"30617:{ALICE.pubkey}:repo-x"
TARGET_ID = "ab" * 32
COMMIT = "c0ffee" + "0" * 34


def signed(builder):
    return ALICE.sign(builder, BASE_TIMESTAMP)


def tag_lists(event):
    return [t.to_list() for t in event.tags]


# ============================================================================
# Repositories
# ============================================================================


class TestRepoAnnouncement:
    """Kind 30617."""

    def test_full(self):
        event = signed(
            build_repo_announcement(
                identifier="repo-x",
                name="Repo X",
                description="A test repository",
                web=["https://git.example.com/repo-x"],
                clone=["https://git.example.com/repo-x.git", "ssh://git@example.com/repo-x"],
                relays=["ws://localhost:7000"],
                maintainers=["b" * 64],
                earliest_unique_commit=COMMIT,
                hashtags=["rust", "nostr"],
            )
        )
        assert event.kind == EventKind.REPO_ANNOUNCEMENT
        assert tag_lists(event) == [
            ["d", "repo-x"],
            ["name", "Repo X"],
            ["description", "A test repository"],
            ["web", "https://git.example.com/repo-x"],
            ["clone", "https://git.example.com/repo-x.git", "ssh://git@example.com/repo-x"],
            ["relays", "ws://localhost:7000"],
            ["maintainers", "b" * 64],
            ["r", COMMIT, "euc"],
            ["t", "rust"],
            ["t", "nostr"],
        ]
        assert str(event.address) == REPO_ADDRESS

    def test_minimal(self):
        event = signed(build_repo_announcement(identifier="repo-x", name="repo-x"))
        assert tag_lists(event) == [["d", "repo-x"], ["name", "repo-x"]]


class TestRepoState:
    """Kind 30618."""

    def test_refs_and_head(self):
        refs = [RepoRef("main", COMMIT), RepoRef("v1.0", COMMIT, type="tags")]
        event = signed(build_repo_state(identifier="repo-x", refs=refs, head="main"))
        assert event.kind == EventKind.REPO_STATE
        assert tag_lists(event) == [
            ["d", "repo-x"],
            ["refs/heads/main", COMMIT],
            ["refs/tags/v1.0", COMMIT],
            ["HEAD", "ref: refs/heads/main"],
        ]

    def test_ref_path(self):
        assert RepoRef("feature", COMMIT).path == "refs/heads/feature"


# ============================================================================
# Threads
# ============================================================================


class TestIssue:
    """Kinds 1621 and 1622."""

    def test_issue(self):
        event = signed(
            build_issue(
                repo_address=REPO_ADDRESS,
                content="It crashes",
                subject="Crash on startup",
                recipients=[ALICE.pubkey],
                labels=["bug"],
            )
        )
        assert event.kind == EventKind.ISSUE
        assert event.content == "It crashes"
        assert tag_lists(event) == [
            ["a", REPO_ADDRESS],
            ["subject", "Crash on startup"],
            ["p", ALICE.pubkey],
            ["t", "bug"],
        ]

    def test_reply(self):
        event = signed(
            build_issue_reply(root_id=TARGET_ID, content="+1", repo_address=REPO_ADDRESS)
        )
        assert event.kind == EventKind.ISSUE_REPLY
        assert tag_lists(event) == [["e", TARGET_ID, "", "root"], ["a", REPO_ADDRESS]]


class TestPatch:
    """Kind 1617."""

    def test_root_patch(self):
        event = signed(
            build_patch(
                repo_address=REPO_ADDRESS,
                content="diff",
                subject="Fix crash",
                commit=COMMIT,
                parent_commit="f" * 40,
            )
        )
        assert event.kind == EventKind.PATCH
        assert event.first_tag_value("commit") == COMMIT
        assert event.first_tag_value("parent-commit") == "f" * 40
        assert ["t", "root"] in tag_lists(event)
        assert event.tag_values("e") == []

    def test_follow_up_patch(self):
        event = signed(
            build_patch(
                repo_address=REPO_ADDRESS, content="diff", in_reply_to=TARGET_ID, root=False
            )
        )
        assert ["e", TARGET_ID, "", "reply"] in tag_lists(event)
        assert ["t", "root"] not in tag_lists(event)


class TestPullRequest:
    """Kind 1618."""

    def test_pull_request(self):
        event = signed(
            build_pull_request(
                repo_address=REPO_ADDRESS,
                content="Please merge",
                subject="Add feature",
                branch_name="feature",
                commits=[COMMIT],
                clone=["https://git.example.com/fork.git"],
                merge_base="e" * 40,
            )
        )
        assert event.kind == EventKind.PULL_REQUEST
        assert event.first_tag_value("branch-name") == "feature"
        assert event.tag_values("c") == [COMMIT]
        assert event.first_tag_value("merge-base") == "e" * 40
        assert event.first_tag_value("a") == REPO_ADDRESS


# ============================================================================
# Status and labels
# ============================================================================


class TestStatus:
    """Kinds 1630-1633."""

    @pytest.mark.parametrize(
        ("status", "kind"),
        [
            ("open", 1630),
            ("applied", 1631),
            ("Closed", 1632),
            (StatusKind.DRAFT, 1633),
        ],
    )
    def test_kind_selection(self, status, kind):
        event = signed(build_status(status=status, target_id=TARGET_ID))
        assert event.kind == kind
        assert tag_lists(event)[0] == ["e", TARGET_ID, "", "root"]

    def test_optional_tags(self):
        event = signed(
            build_status(
                status="applied",
                target_id=TARGET_ID,
                repo_address=REPO_ADDRESS,
                recipients=["b" * 64],
                merge_commit=COMMIT,
                applied_as_commits=[COMMIT],
            )
        )
        assert event.first_tag_value("a") == REPO_ADDRESS
        assert event.first_tag_value("p") == "b" * 64
        assert event.first_tag_value("merge-commit") == COMMIT
        assert ["applied-as-commits", COMMIT] in tag_lists(event)

    def test_unknown_status(self):
        with pytest.raises(ValueError, match="Unknown status 'merged'"):
            build_status(status="merged", target_id=TARGET_ID)


class TestLabel:
    """Kind 1985."""

    def test_label(self):
        event = signed(
            build_label(namespace="review", values=["approved", "lgtm"], events=[TARGET_ID])
        )
        assert event.kind == EventKind.LABEL
        assert tag_lists(event) == [
            ["L", "review"],
            ["l", "approved", "review"],
            ["l", "lgtm", "review"],
            ["e", TARGET_ID],
        ]

    def test_requires_values(self):
        with pytest.raises(ValueError, match="at least one value"):
            build_label(namespace="review", values=[], events=[TARGET_ID])

    def test_requires_target(self):
        with pytest.raises(ValueError, match="at least one target"):
            build_label(namespace="review", values=["approved"])
