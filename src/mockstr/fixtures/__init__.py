"""Fixture layer: test identities, event builders, and scenarios.

Depends on ``mockstr.core`` and ``mockstr.models``; seeds a
[RelaySimulator][mockstr.relay.simulator.RelaySimulator] through its public
surface only.

Attributes:
    ScenarioBuilder: Fluent, reference-checked construction of repositories,
        issues, patches, statuses and labels. See
        [ScenarioBuilder][mockstr.fixtures.scenario.ScenarioBuilder].
    TEST_IDENTITIES: Deterministic roster (alice, bob, charlie, maintainer,
        dev_user).
    Clock: Monotonic ``created_at`` source from ``BASE_TIMESTAMP``.
    build_*: Per-kind ``nostr_sdk.EventBuilder`` factories.
    preset_scenario: Canned scenarios (empty, single-repo, with-issues,
        with-patches, full) and client route helpers in
        [mockstr.fixtures.presets][].
"""

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
from .identities import (
    BASE_TIMESTAMP,
    TEST_IDENTITIES,
    Clock,
    Identity,
    event_from_nostr,
    get_identity,
    identity_for_pubkey,
)
from .presets import (
    TEST_RELAY,
    RepoSeed,
    ScenarioPreset,
    add_repo,
    git_path,
    multi_repo_scenario,
    preset_scenario,
    repo_path,
    slugify,
)
from .scenario import ScenarioBuilder


__all__ = [
    "BASE_TIMESTAMP",
    "TEST_IDENTITIES",
    "TEST_RELAY",
    "Clock",
    "Identity",
    "RepoRef",
    "RepoSeed",
    "ScenarioBuilder",
    "ScenarioPreset",
    "add_repo",
    "build_issue",
    "build_issue_reply",
    "build_label",
    "build_patch",
    "build_pull_request",
    "build_repo_announcement",
    "build_repo_state",
    "build_status",
    "event_from_nostr",
    "get_identity",
    "git_path",
    "identity_for_pubkey",
    "multi_repo_scenario",
    "preset_scenario",
    "repo_path",
    "slugify",
]
