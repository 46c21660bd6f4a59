"""NIP-34 / NIP-32 event builders for git collaboration fixtures.

Standalone functions returning unsigned ``nostr_sdk.EventBuilder`` objects.
Sign them with [Identity.sign()][mockstr.fixtures.identities.Identity.sign],
or let [ScenarioBuilder][mockstr.fixtures.scenario.ScenarioBuilder] wire the
references and timestamps.

Reference tags follow the shapes git clients expect:

* issues, patches and pull requests point at their repository with
  ``["a", "30617:<owner>:<repo>"]``;
* replies and statuses point at their target with
  ``["e", <id>, "", "root"]``;
* labels declare ``["L", <namespace>]`` and one ``["l", <value>, <namespace>]``
  per value.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import NamedTuple

from nostr_sdk import EventBuilder, Kind, Tag

from mockstr.models import EventKind, StatusKind


class RepoRef(NamedTuple):
    """A branch or tag pointer of a repository state event."""

    name: str
    commit: str
    type: str = "heads"
    ancestry: tuple[str, ...] = ()

    @property
    def path(self) -> str:
        return f"refs/{self.type}/{self.name}"


def _tags(rows: Iterable[Sequence[str]]) -> list[Tag]:
    return [Tag.parse(list(row)) for row in rows]


def _repeat(name: str, values: Iterable[str]) -> list[list[str]]:
    return [[name, value] for value in values]


# =============================================================================
# Kind 30617 / 30618 (NIP-34 repositories)
# =============================================================================


def build_repo_announcement(  # noqa: PLR0913
    *,
    identifier: str,
    name: str,
    description: str | None = None,
    web: Sequence[str] = (),
    clone: Sequence[str] = (),
    relays: Sequence[str] = (),
    maintainers: Sequence[str] = (),
    earliest_unique_commit: str | None = None,
    hashtags: Sequence[str] = (),
) -> EventBuilder:
    """Build a Kind 30617 repository announcement."""
    rows: list[list[str]] = [["d", identifier], ["name", name]]
    if description:
        rows.append(["description", description])
    lists = (("web", web), ("clone", clone), ("relays", relays), ("maintainers", maintainers))
    for tag_name, values in lists:
        if values:
            rows.append([tag_name, *values])
    if earliest_unique_commit:
        rows.append(["r", earliest_unique_commit, "euc"])
    rows.extend(_repeat("t", hashtags))
    return EventBuilder(Kind(EventKind.REPO_ANNOUNCEMENT), "").tags(_tags(rows))


def build_repo_state(
    *,
    identifier: str,
    refs: Sequence[RepoRef] = (),
    head: str | None = None,
) -> EventBuilder:
    """Build a Kind 30618 repository state (branch and tag pointers)."""
    rows: list[list[str]] = [["d", identifier]]
    rows.extend([ref.path, ref.commit, *ref.ancestry] for ref in refs)
    if head:
        rows.append(["HEAD", f"ref: refs/heads/{head}"])
    return EventBuilder(Kind(EventKind.REPO_STATE), "").tags(_tags(rows))


# =============================================================================
# Kind 1621 / 1622 (issues)
# =============================================================================


def build_issue(  # noqa: PLR0913
    *,
    repo_address: str,
    content: str,
    subject: str | None = None,
    recipients: Sequence[str] = (),
    labels: Sequence[str] = (),
    references: Sequence[str] = (),
) -> EventBuilder:
    """Build a Kind 1621 issue."""
    rows: list[list[str]] = [["a", repo_address]]
    if subject:
        rows.append(["subject", subject])
    rows.extend(_repeat("p", recipients))
    rows.extend(_repeat("t", labels))
    rows.extend(_repeat("e", references))
    return EventBuilder(Kind(EventKind.ISSUE), content).tags(_tags(rows))


def build_issue_reply(
    *,
    root_id: str,
    content: str,
    repo_address: str | None = None,
    recipients: Sequence[str] = (),
) -> EventBuilder:
    """Build a Kind 1622 reply to an issue, patch or pull request."""
    rows: list[list[str]] = [["e", root_id, "", "root"]]
    if repo_address:
        rows.append(["a", repo_address])
    rows.extend(_repeat("p", recipients))
    return EventBuilder(Kind(EventKind.ISSUE_REPLY), content).tags(_tags(rows))


# =============================================================================
# Kind 1617 / 1618 (patches and pull requests)
# =============================================================================


def build_patch(  # noqa: PLR0913
    *,
    repo_address: str,
    content: str,
    subject: str | None = None,
    commit: str | None = None,
    parent_commit: str | None = None,
    earliest_unique_commit: str | None = None,
    recipients: Sequence[str] = (),
    labels: Sequence[str] = (),
    in_reply_to: str | None = None,
    root: bool = True,
) -> EventBuilder:
    """Build a Kind 1617 patch.

    Root patches (the first of a series) carry ``["t", "root"]``; follow-up
    patches reference the previous one with ``in_reply_to``.
    """
    rows: list[list[str]] = [["a", repo_address]]
    if earliest_unique_commit:
        rows.append(["r", earliest_unique_commit])
    if commit:
        rows.append(["commit", commit])
    if parent_commit:
        rows.append(["parent-commit", parent_commit])
    rows.extend(_repeat("p", recipients))
    if subject:
        rows.append(["subject", subject])
    rows.extend(_repeat("t", labels))
    if in_reply_to:
        rows.append(["e", in_reply_to, "", "reply"])
    if root:
        rows.append(["t", "root"])
    return EventBuilder(Kind(EventKind.PATCH), content).tags(_tags(rows))


def build_pull_request(  # noqa: PLR0913
    *,
    repo_address: str,
    content: str,
    subject: str | None = None,
    branch_name: str | None = None,
    commits: Sequence[str] = (),
    clone: Sequence[str] = (),
    merge_base: str | None = None,
    recipients: Sequence[str] = (),
    labels: Sequence[str] = (),
) -> EventBuilder:
    """Build a Kind 1618 pull request."""
    rows: list[list[str]] = [["a", repo_address]]
    if subject:
        rows.append(["subject", subject])
    rows.extend(_repeat("p", recipients))
    rows.extend(_repeat("t", labels))
    rows.extend(_repeat("c", commits))
    if clone:
        rows.append(["clone", *clone])
    if branch_name:
        rows.append(["branch-name", branch_name])
    if merge_base:
        rows.append(["merge-base", merge_base])
    return EventBuilder(Kind(EventKind.PULL_REQUEST), content).tags(_tags(rows))


# =============================================================================
# Kind 1630-1633 (NIP-34 status)
# =============================================================================


def build_status(  # noqa: PLR0913
    *,
    status: StatusKind | str,
    target_id: str,
    content: str = "",
    repo_address: str | None = None,
    recipients: Sequence[str] = (),
    merge_commit: str | None = None,
    applied_as_commits: Sequence[str] = (),
) -> EventBuilder:
    """Build a status event; the kind is chosen by *status*.

    Raises:
        ValueError: If *status* is a name outside open/applied/closed/draft.
    """
    kind = status if isinstance(status, StatusKind) else StatusKind.from_name(status)
    rows: list[list[str]] = [["e", target_id, "", "root"]]
    rows.extend(_repeat("p", recipients))
    if repo_address:
        rows.append(["a", repo_address])
    if merge_commit:
        rows.append(["merge-commit", merge_commit])
    if applied_as_commits:
        rows.append(["applied-as-commits", *applied_as_commits])
    return EventBuilder(Kind(kind), content).tags(_tags(rows))


# =============================================================================
# Kind 1985 (NIP-32 labels)
# =============================================================================


def build_label(  # noqa: PLR0913
    *,
    namespace: str,
    values: Sequence[str],
    events: Sequence[str] = (),
    addresses: Sequence[str] = (),
    pubkeys: Sequence[str] = (),
    content: str = "",
) -> EventBuilder:
    """Build a Kind 1985 label event.

    Raises:
        ValueError: If *values* is empty or no target is given.
    """
    if not values:
        raise ValueError("label event needs at least one value")
    if not (events or addresses or pubkeys):
        raise ValueError("label event needs at least one target")
    rows: list[list[str]] = [["L", namespace]]
    rows.extend(["l", value, namespace] for value in values)
    rows.extend(_repeat("e", events))
    rows.extend(_repeat("a", addresses))
    rows.extend(_repeat("p", pubkeys))
    return EventBuilder(Kind(EventKind.LABEL), content).tags(_tags(rows))
