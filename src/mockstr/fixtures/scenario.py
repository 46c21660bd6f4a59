"""
Fluent construction of referentially consistent event graphs.

A [ScenarioBuilder][mockstr.fixtures.scenario.ScenarioBuilder] names every
entity with a local key. Later entities reference earlier ones by key, and
the builder resolves the key to an address (repositories) or an event id
(issues, patches, pull requests...). Referencing a key that was not added
earlier raises
[ReferentialIntegrityError][mockstr.core.exceptions.ReferentialIntegrityError],
so a built scenario never contains dangling references. The store itself
accepts anything; this check lives only here.

Timestamps come from a [Clock][mockstr.fixtures.identities.Clock], so
events are strictly ordered by ``created_at`` in the order they were added.

Examples:
    ```python
    scenario = (
        ScenarioBuilder()
        .repo("repo-x", name="Repo X")
        .patch("fix", repo="repo-x", subject="Fix crash")
        .status("fix-open", target="fix", status="open")
        .label("fix-review", target="fix", namespace="review", values=["approved"])
    )
    scenario.seed(simulator)
    str(scenario.address_for("repo-x"))   # '30617:<alice>:repo-x'
    ```
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

from nostr_sdk import EventBuilder

from mockstr.core.exceptions import FixtureError, ReferentialIntegrityError
from mockstr.models import Address, Event, EventKind, StatusKind

from .builders import (
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
from .identities import Clock, Identity, get_identity, identity_for_pubkey


if TYPE_CHECKING:
    from mockstr.relay import RelaySimulator


Author = str | Identity

_THREAD_KINDS = frozenset({EventKind.ISSUE, EventKind.PATCH, EventKind.PULL_REQUEST})


@dataclass(frozen=True, slots=True)
class _Entry:
    key: str
    event: Event
    repo_key: str | None = None


class ScenarioBuilder:
    """Builds a batch of events whose cross-references all resolve.

    Args:
        clock: Timestamp source. Defaults to a fresh
            [Clock][mockstr.fixtures.identities.Clock] at ``BASE_TIMESTAMP``.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = clock or Clock()
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------

    def repo(  # noqa: PLR0913
        self,
        key: str,
        *,
        name: str | None = None,
        author: Author = "alice",
        description: str | None = None,
        maintainers: Sequence[Author] = (),
        clone: Sequence[str] = (),
        web: Sequence[str] = (),
        relays: Sequence[str] = (),
        hashtags: Sequence[str] = (),
        earliest_unique_commit: str | None = None,
    ) -> Self:
        """Add a repository announcement whose ``d`` tag is *key*."""
        builder = build_repo_announcement(
            identifier=key,
            name=name or key,
            description=description,
            web=web,
            clone=clone,
            relays=relays,
            maintainers=[get_identity(m).pubkey for m in maintainers],
            earliest_unique_commit=earliest_unique_commit,
            hashtags=hashtags,
        )
        return self._add(key, author, builder, repo_key=key)

    def repo_state(
        self,
        key: str,
        *,
        repo: str,
        refs: Sequence[RepoRef] | Mapping[str, str] = (),
        head: str | None = None,
    ) -> Self:
        """Add a repository state for *repo*, signed by the repository owner.

        *refs* may be a mapping of branch name to commit.
        """
        announcement = self._repo(repo)
        if isinstance(refs, Mapping):
            refs = [RepoRef(name, commit) for name, commit in refs.items()]
        builder = build_repo_state(
            identifier=announcement.identifier or repo, refs=refs, head=head
        )
        owner = _owner(announcement)
        return self._add(key, owner, builder, repo_key=repo)

    # -------------------------------------------------------------------------
    # Threads
    # -------------------------------------------------------------------------

    def issue(  # noqa: PLR0913
        self,
        key: str,
        *,
        repo: str,
        subject: str,
        content: str = "",
        author: Author = "charlie",
        labels: Sequence[str] = (),
    ) -> Self:
        """Add an issue on *repo*, addressed to the repository owner."""
        announcement = self._repo(repo)
        builder = build_issue(
            repo_address=str(announcement.address),
            content=content or subject,
            subject=subject,
            recipients=[announcement.pubkey],
            labels=labels,
        )
        return self._add(key, author, builder, repo_key=repo)

    def reply(self, key: str, *, to: str, content: str, author: Author = "bob") -> Self:
        """Add a reply to the issue, patch or pull request *to*."""
        target = self._thread(to)
        repo_key = self._entries[to].repo_key
        builder = build_issue_reply(
            root_id=target.id,
            content=content,
            repo_address=self._address_of(repo_key),
            recipients=[target.pubkey],
        )
        return self._add(key, author, builder, repo_key=repo_key)

    def patch(  # noqa: PLR0913
        self,
        key: str,
        *,
        repo: str,
        subject: str,
        content: str = "",
        author: Author = "bob",
        commit: str | None = None,
        parent_commit: str | None = None,
        labels: Sequence[str] = (),
        follows: str | None = None,
    ) -> Self:
        """Add a patch on *repo*.

        Without *follows* the patch is the root of a series; with it, the
        patch replies to the earlier patch *follows*.
        """
        announcement = self._repo(repo)
        previous = self._thread(follows) if follows is not None else None
        builder = build_patch(
            repo_address=str(announcement.address),
            content=content or _format_patch(subject),
            subject=subject,
            commit=commit,
            parent_commit=parent_commit,
            recipients=[announcement.pubkey],
            labels=labels,
            in_reply_to=previous.id if previous is not None else None,
            root=previous is None,
        )
        return self._add(key, author, builder, repo_key=repo)

    def pull_request(  # noqa: PLR0913
        self,
        key: str,
        *,
        repo: str,
        subject: str,
        content: str = "",
        author: Author = "bob",
        branch_name: str | None = None,
        commits: Sequence[str] = (),
        clone: Sequence[str] = (),
        merge_base: str | None = None,
    ) -> Self:
        """Add a pull request on *repo*."""
        announcement = self._repo(repo)
        builder = build_pull_request(
            repo_address=str(announcement.address),
            content=content or subject,
            subject=subject,
            branch_name=branch_name,
            commits=commits,
            clone=clone,
            merge_base=merge_base,
            recipients=[announcement.pubkey],
        )
        return self._add(key, author, builder, repo_key=repo)

    # -------------------------------------------------------------------------
    # Annotations
    # -------------------------------------------------------------------------

    def status(
        self,
        key: str,
        *,
        target: str,
        status: StatusKind | str,
        author: Author | None = None,
        content: str = "",
        merge_commit: str | None = None,
    ) -> Self:
        """Add a status for the issue, patch or pull request *target*.

        The author defaults to the repository owner.

        Raises:
            FixtureError: If *status* is not open, applied, closed or draft.
        """
        target_event = self._thread(target)
        repo_key = self._entries[target].repo_key
        try:
            builder = build_status(
                status=status,
                target_id=target_event.id,
                content=content,
                repo_address=self._address_of(repo_key),
                recipients=[target_event.pubkey],
                merge_commit=merge_commit,
            )
        except ValueError as e:
            raise FixtureError(str(e)) from e
        signer = author if author is not None else self._owner_of(repo_key, target_event)
        return self._add(key, signer, builder, repo_key=repo_key)

    def label(  # noqa: PLR0913
        self,
        key: str,
        *,
        target: str,
        namespace: str,
        values: Sequence[str],
        author: Author = "maintainer",
    ) -> Self:
        """Add a label event pointing at the event *target* (any earlier key)."""
        target_entry = self._entry(target)
        builder = build_label(
            namespace=namespace,
            values=values,
            events=[target_entry.event.id],
        )
        return self._add(key, author, builder, repo_key=target_entry.repo_key)

    def event(self, key: str, event: Event | Mapping[str, Any]) -> Self:
        """Add a pre-built event verbatim. No references are checked."""
        self._reserve(key)
        parsed = event if isinstance(event, Event) else Event.from_dict(event)
        self._entries[key] = _Entry(key, parsed)
        return self

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def build(self) -> list[Event]:
        """All events in the order they were added."""
        return [entry.event for entry in self._entries.values()]

    def event_for(self, key: str) -> Event:
        """The event added under *key*.

        Raises:
            ReferentialIntegrityError: If *key* was never added.
        """
        return self._entry(key).event

    def address_for(self, key: str) -> Address:
        """The coordinate of the addressable event added under *key*.

        Raises:
            ReferentialIntegrityError: If *key* was never added or is not
                addressable.
        """
        address = self._entry(key).event.address
        if address is None:
            raise ReferentialIntegrityError(f"{key!r} is not an addressable event")
        return address

    def seed(self, simulator: RelaySimulator) -> list[Event]:
        """Seed the built events as backlog and return them."""
        events = self.build()
        simulator.seed_events(events)
        return events

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _reserve(self, key: str) -> None:
        if not key:
            raise FixtureError("scenario keys must be non-empty")
        if key in self._entries:
            raise FixtureError(f"duplicate scenario key {key!r}")

    def _add(
        self, key: str, author: Author, builder: EventBuilder, *, repo_key: str | None
    ) -> Self:
        self._reserve(key)
        event = get_identity(author).sign(builder, self._clock.tick())
        self._entries[key] = _Entry(key, event, repo_key)
        return self

    def _entry(self, key: str) -> _Entry:
        try:
            return self._entries[key]
        except KeyError:
            raise ReferentialIntegrityError(f"unknown scenario key {key!r}") from None

    def _repo(self, key: str) -> Event:
        event = self._entry(key).event
        if event.kind != EventKind.REPO_ANNOUNCEMENT:
            raise ReferentialIntegrityError(f"{key!r} is not a repository announcement")
        return event

    def _thread(self, key: str) -> Event:
        event = self._entry(key).event
        if event.kind not in _THREAD_KINDS:
            raise ReferentialIntegrityError(f"{key!r} is not an issue, patch or pull request")
        return event

    def _address_of(self, repo_key: str | None) -> str | None:
        if repo_key is None:
            return None
        return str(self._repo(repo_key).address)

    def _owner_of(self, repo_key: str | None, fallback: Event) -> Identity:
        source = self._repo(repo_key) if repo_key is not None else fallback
        return _owner(source)


def _owner(event: Event) -> Identity:
    identity = identity_for_pubkey(event.pubkey)
    if identity is None:
        raise FixtureError(f"no roster identity for pubkey {event.pubkey}")
    return identity


def _format_patch(subject: str) -> str:
    return (
        "From 0000000000000000000000000000000000000000 Mon Sep 17 00:00:00 2001\n"
        f"Subject: [PATCH] {subject}\n\n---\n"
    )
