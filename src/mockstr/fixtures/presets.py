"""
Ready-made scenarios and web-client routes.

[preset_scenario()][mockstr.fixtures.presets.preset_scenario] returns one of
five canned [ScenarioBuilder][mockstr.fixtures.scenario.ScenarioBuilder]
graphs for tests that only need "some data on the relay";
[multi_repo_scenario()][mockstr.fixtures.presets.multi_repo_scenario] seeds
several repositories at once. Threads are generated deterministically:
titles, authors and statuses depend only on the thread's position, so ids are
stable across runs.

The route helpers build the client's URL paths for a relay and a repository
``naddr``.

Examples:
    ```python
    scenario = preset_scenario("with-issues")
    scenario.seed(relay_simulator)
    await page.goto(base_url + repo_path(scenario.address_for("test-project"), "issues"))
    ```
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any
from urllib.parse import quote

from mockstr.core.exceptions import FixtureError
from mockstr.models import Address

from .identities import Clock
from .scenario import ScenarioBuilder


TEST_RELAY = "ws://localhost:7000"

# Thread authors rotate through the contributors by position
_CONTRIBUTORS = ("charlie", "bob", "alice")

_ISSUE_TITLES = (
    "Bug: Application crashes on startup",
    "Feature: Add dark mode support",
    "Bug: Form validation not working",
    "Enhancement: Improve loading performance",
    "Bug: Memory leak in event handler",
    "Feature: Add keyboard shortcuts",
    "Documentation: Update README",
    "Bug: CSS styling broken on mobile",
    "Enhancement: Add search functionality",
    "Feature: Export data to CSV",
)

_PATCH_TITLES = (
    "Fix null pointer exception",
    "Add new utility function",
    "Refactor authentication module",
    "Update dependencies",
    "Fix CSS layout issues",
    "Add unit tests",
    "Improve error handling",
    "Optimize database queries",
    "Add input validation",
    "Fix memory leak",
)


class ScenarioPreset(StrEnum):
    """Names accepted by [preset_scenario()][mockstr.fixtures.presets.preset_scenario]."""

    EMPTY = "empty"
    SINGLE_REPO = "single-repo"
    WITH_ISSUES = "with-issues"
    WITH_PATCHES = "with-patches"
    FULL = "full"


@dataclass(frozen=True, slots=True)
class RepoSeed:
    """One repository plus generated threads.

    Every third thread, starting with the first, is closed (issues) or
    applied (patches); the rest are open.

    Attributes:
        name: Display name; the identifier defaults to its slug.
        identifier: ``d`` tag and scenario key of the announcement.
        issues: Number of issues to generate.
        patches: Number of root patches to generate.
    """

    name: str
    identifier: str | None = None
    description: str | None = None
    author: str = "alice"
    maintainers: tuple[str, ...] = ()
    hashtags: tuple[str, ...] = ()
    clone: tuple[str, ...] = ()
    web: tuple[str, ...] = ()
    issues: int = 0
    patches: int = 0

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise FixtureError("repository name must be non-empty")
        if self.issues < 0 or self.patches < 0:
            raise FixtureError("issue and patch counts must be non-negative")
        if not self.key:
            raise FixtureError(f"repository name {self.name!r} has no usable identifier")

    @property
    def key(self) -> str:
        return self.identifier or slugify(self.name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RepoSeed:
        """Build from keyword data; sequence fields may be lists."""
        fields = dict(data)
        for name in ("maintainers", "hashtags", "clone", "web"):
            if name in fields:
                fields[name] = tuple(fields[name])
        try:
            return cls(**fields)
        except TypeError as e:
            raise FixtureError(f"invalid repository seed: {e}") from e


def slugify(text: str) -> str:
    """Lowercase *text* and collapse non-alphanumeric runs into ``-``."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def add_repo(builder: ScenarioBuilder, seed: RepoSeed) -> ScenarioBuilder:
    """Add *seed*'s repository, threads and statuses to *builder*.

    Keys follow ``<repo>-issue-<n>`` / ``<repo>-patch-<n>``, with
    ``-status`` appended for each thread's status event.
    """
    key = seed.key
    builder.repo(
        key,
        name=seed.name,
        author=seed.author,
        description=seed.description,
        maintainers=seed.maintainers,
        clone=seed.clone,
        web=seed.web,
        hashtags=seed.hashtags,
    )
    for i in range(seed.issues):
        title = _ISSUE_TITLES[i % len(_ISSUE_TITLES)]
        issue_key = f"{key}-issue-{i + 1}"
        builder.issue(
            issue_key,
            repo=key,
            subject=title,
            content=_issue_body(title),
            author=_CONTRIBUTORS[i % len(_CONTRIBUTORS)],
            labels=[_issue_label(title)],
        )
        builder.status(
            f"{issue_key}-status", target=issue_key, status="closed" if i % 3 == 0 else "open"
        )
    for i in range(seed.patches):
        title = _PATCH_TITLES[i % len(_PATCH_TITLES)]
        patch_key = f"{key}-patch-{i + 1}"
        builder.patch(
            patch_key,
            repo=key,
            subject=title,
            author=_CONTRIBUTORS[i % len(_CONTRIBUTORS)],
            commit=f"{i + 1:040x}",
        )
        builder.status(
            f"{patch_key}-status", target=patch_key, status="applied" if i % 3 == 0 else "open"
        )
    return builder


def preset_scenario(preset: ScenarioPreset | str, *, clock: Clock | None = None) -> ScenarioBuilder:
    """Build one of the canned scenarios.

    * ``empty``: no events.
    * ``single-repo``: ``test-project`` without threads.
    * ``with-issues``: ``test-project`` with 5 issues (open and closed).
    * ``with-patches``: ``test-project`` with 5 patches (open and applied).
    * ``full``: ``flotilla-budabit`` with 5 issues, 5 patches, their
      statuses, and a maintainer reply on the first issue.

    Raises:
        FixtureError: If *preset* is not a known name.
    """
    try:
        preset = ScenarioPreset(preset)
    except ValueError:
        valid = ", ".join(p.value for p in ScenarioPreset)
        raise FixtureError(
            f"Unknown scenario preset {preset!r}, expected one of: {valid}"
        ) from None

    builder = ScenarioBuilder(clock=clock)
    if preset is ScenarioPreset.EMPTY:
        return builder
    if preset is ScenarioPreset.FULL:
        add_repo(
            builder,
            RepoSeed(
                name="flotilla-budabit",
                description="A Discord-like Nostr client with git collaboration",
                maintainers=("alice", "bob"),
                hashtags=("nostr", "git", "collaboration", "svelte"),
                clone=("https://github.com/example/flotilla-budabit.git",),
                web=("https://flotilla.dev",),
                issues=5,
                patches=5,
            ),
        )
        return builder.reply(
            "flotilla-budabit-issue-1-reply",
            to="flotilla-budabit-issue-1",
            content="Thanks for reporting! I'll look into this.",
            author="alice",
        )

    seeds = {
        ScenarioPreset.SINGLE_REPO: RepoSeed(
            name="test-project",
            description="A test project for E2E testing",
            maintainers=("alice",),
            hashtags=("test", "nostr"),
        ),
        ScenarioPreset.WITH_ISSUES: RepoSeed(
            name="test-project",
            description="A test project with issues",
            maintainers=("alice",),
            issues=5,
        ),
        ScenarioPreset.WITH_PATCHES: RepoSeed(
            name="test-project",
            description="A test project with patches",
            maintainers=("alice",),
            patches=5,
        ),
    }
    return add_repo(builder, seeds[preset])


def multi_repo_scenario(
    repos: Iterable[RepoSeed | Mapping[str, Any]], *, clock: Clock | None = None
) -> ScenarioBuilder:
    """Build a scenario with one entry per repository seed, in order."""
    builder = ScenarioBuilder(clock=clock)
    for repo in repos:
        add_repo(builder, repo if isinstance(repo, RepoSeed) else RepoSeed.from_dict(repo))
    return builder


# =============================================================================
# Web client routes
# =============================================================================


def git_path(relay: str = TEST_RELAY) -> str:
    """Path of the repository list for *relay*."""
    return f"/spaces/{quote(relay, safe='')}/git"


def repo_path(repo: Address | str, *segments: str, relay: str = TEST_RELAY) -> str:
    """Path of a repository page.

    *repo* is an [Address][mockstr.models.address.Address] or an ``naddr``.
    Without *segments* the path ends with ``/`` (the repository overview);
    otherwise the segments are appended (``"issues"``, ``"patches", id``...).
    """
    naddr = repo.to_naddr() if isinstance(repo, Address) else repo
    base = f"{git_path(relay)}/{naddr}"
    if not segments:
        return f"{base}/"
    return "/".join((base, *segments))


def _issue_label(title: str) -> str:
    prefix, _, _ = title.partition(":")
    return prefix.lower()


def _issue_body(title: str) -> str:
    summary = title.partition(": ")[2] or title
    return (
        f"## Description\n{summary}\n\n"
        "## Steps to Reproduce\n"
        "1. Open the application\n"
        "2. Navigate to the affected area\n"
        "3. Observe the issue\n\n"
        "## Expected Behavior\n"
        "The application should work correctly.\n"
    )

