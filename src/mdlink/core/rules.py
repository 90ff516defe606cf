"""Service rule catalog: which URLs mdlink recognizes and how it labels them."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from mdlink.core.patterns import SegmentPattern
from mdlink.exceptions import RuleSetError

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable, Iterator

    from mdlink.core.patterns import Captures, PathPattern

RepoPrefix = Literal["org-and-repo", "repo-only", "none"]

GITHUB_HOSTS = ("github.com", "www.github.com")
X_HOSTS = ("x.com", "www.x.com", "twitter.com", "www.twitter.com", "mobile.twitter.com")


@dataclass(frozen=True)
class ExactHost:
    """Host predicate matching one of the listed host names exactly."""

    hosts: tuple[str, ...]

    def __call__(self, host: str) -> bool:
        return host in self.hosts

    def describe(self) -> str:
        return ", ".join(self.hosts)


@dataclass(frozen=True)
class DomainSuffix:
    """Host predicate matching a domain and any of its subdomains."""

    domain: str

    def __call__(self, host: str) -> bool:
        return host == self.domain or host.endswith("." + self.domain)

    def describe(self) -> str:
        return f"*.{self.domain}"


@dataclass(frozen=True)
class ServiceRule:
    """A declarative description of how to recognize and label one kind of URL."""

    id: str
    host_predicate: Callable[[str], bool]
    pattern: PathPattern
    label_template: str
    priority: int = 1000
    description: str = ""

    @property
    def placeholders(self) -> frozenset[str]:
        """Placeholder names used by the label template."""
        return template_placeholders(self.label_template)


def template_placeholders(template: str) -> frozenset[str]:
    """Extract placeholder names from a ``str.format`` style template.

    Raises:
        RuleSetError: If a placeholder is positional or uses attribute/index access.
    """
    names = set()
    for _, field_name, _, _ in string.Formatter().parse(template):
        if field_name is None:
            continue
        if not field_name.isidentifier():
            raise RuleSetError(f"unsupported placeholder {{{field_name}}} in {template!r}")
        names.add(field_name)
    return frozenset(names)


class RuleSet:
    """Immutable, ordered collection of service rules.

    Rules are kept sorted by ascending priority; rules with equal priority
    keep their declaration order.
    """

    def __init__(self, rules: Iterable[ServiceRule]) -> None:
        ordered = sorted(rules, key=lambda rule: rule.priority)
        by_id: dict[str, ServiceRule] = {}
        for rule in ordered:
            if rule.id in by_id:
                raise RuleSetError(f"duplicate rule id {rule.id!r}")
            missing = rule.placeholders - rule.pattern.capture_names
            if missing:
                raise RuleSetError(
                    f"rule {rule.id!r} template uses captures its pattern never produces: "
                    f"{', '.join(sorted(missing))}"
                )
            by_id[rule.id] = rule
        self._rules = tuple(ordered)
        self._by_id = by_id

    def __iter__(self) -> Iterator[ServiceRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(rule.id for rule in self._rules)

    def get(self, rule_id: str) -> ServiceRule | None:
        return self._by_id.get(rule_id)

    def without(self, rule_ids: Collection[str]) -> RuleSet:
        """Return a new rule set with the given rules removed.

        Raises:
            RuleSetError: If an id does not name a rule in this set.
        """
        unknown = set(rule_ids) - self._by_id.keys()
        if unknown:
            raise RuleSetError(f"unknown rule id(s): {', '.join(sorted(unknown))}")
        return RuleSet(rule for rule in self._rules if rule.id not in rule_ids)


def default_repo_prefix(_owner: str, _repo: str) -> RepoPrefix:
    return "org-and-repo"


def _repo_ref(prefix: RepoPrefix, owner: str, repo: str) -> str:
    if prefix == "org-and-repo":
        return f"{owner}/{repo}"
    if prefix == "repo-only":
        return repo
    return ""


def _github_rules(repo_prefix: Callable[[str, str], RepoPrefix]) -> list[ServiceRule]:
    def repo_ref(captures: Captures) -> Captures:
        owner, repo = captures["owner"], captures["repo"]
        return {"repo_ref": _repo_ref(repo_prefix(owner, repo), owner, repo)}

    def repo_label(captures: Captures) -> Captures:
        owner, repo = captures["owner"], captures["repo"]
        # A repository page always names at least the repository
        prefix = repo_prefix(owner, repo)
        label = f"{owner}/{repo}" if prefix == "org-and-repo" else repo
        return {"repo_label": label}

    def blob_location(captures: Captures) -> Captures:
        ref = repo_ref(captures)["repo_ref"]
        start, end = captures["start"], captures["end"]
        if start and end:
            lines = f":{start}-{end}"
        elif start:
            lines = f":{start}"
        else:
            lines = ""
        return {"ref_prefix": f"{ref}:" if ref else "", "lines": lines}

    hosts = ExactHost(GITHUB_HOSTS)
    return [
        ServiceRule(
            id="github-issue",
            host_predicate=hosts,
            pattern=SegmentPattern(
                "{owner}", "{repo}", "issues", "{num:\\d+}", "...",
                derive=repo_ref, derived_names=("repo_ref",),
            ),
            label_template="{repo_ref}#{num}",
            priority=100,
            description="GitHub issue",
        ),
        ServiceRule(
            id="github-pull",
            host_predicate=hosts,
            pattern=SegmentPattern(
                "{owner}", "{repo}", "pull", "{num:\\d+}", "...",
                derive=repo_ref, derived_names=("repo_ref",),
            ),
            label_template="{repo_ref}#{num}",
            priority=101,
            description="GitHub pull request",
        ),
        ServiceRule(
            id="github-blob",
            host_predicate=hosts,
            pattern=SegmentPattern(
                "{owner}", "{repo}", "blob", "{ref}", "{path+}",
                fragment=r"L(?P<start>\d+)(?:C\d+)?(?:-L(?P<end>\d+)(?:C\d+)?)?",
                derive=blob_location, derived_names=("ref_prefix", "lines"),
            ),
            label_template="{ref_prefix}{ref}:{path}{lines}",
            priority=110,
            description="File (and line range) at a commit, branch or tag",
        ),
        ServiceRule(
            id="github-commit-file",
            host_predicate=hosts,
            pattern=SegmentPattern("{owner}", "{repo}", "commit", "{sha}", "{path+}"),
            label_template="{owner}/{repo}:{sha}:{path}",
            priority=120,
            description="File changes in a GitHub commit",
        ),
        ServiceRule(
            id="github-commit",
            host_predicate=hosts,
            pattern=SegmentPattern("{owner}", "{repo}", "commit", "{sha}"),
            label_template="{owner}/{repo}:{sha}",
            priority=121,
            description="GitHub commit",
        ),
        ServiceRule(
            id="github-release-component",
            host_predicate=hosts,
            pattern=SegmentPattern(
                "{owner}", "{repo}", "releases", "tag",
                "{tag:(?P<component>.+)-(?P<version>v\\d+(?:\\.\\d+){0,2})}",
            ),
            label_template="{component} {version}",
            priority=130,
            description="Release of one component in a monorepo",
        ),
        ServiceRule(
            id="github-release",
            host_predicate=hosts,
            pattern=SegmentPattern("{owner}", "{repo}", "releases", "tag", "{tag}"),
            label_template="{tag} tag release",
            priority=131,
            description="GitHub release",
        ),
        ServiceRule(
            id="github-repo",
            host_predicate=hosts,
            pattern=SegmentPattern(
                "{owner}", "{repo}", derive=repo_label, derived_names=("repo_label",)
            ),
            label_template="{repo_label}",
            priority=190,
            description="GitHub repository",
        ),
    ]


def _gitlab_rules() -> list[ServiceRule]:
    hosts = DomainSuffix("gitlab.com")
    return [
        ServiceRule(
            id="gitlab-merge-request",
            host_predicate=hosts,
            pattern=SegmentPattern("{project+}", "-", "merge_requests", "{num:\\d+}", "..."),
            label_template="{project}!{num}",
            priority=200,
            description="GitLab merge request",
        ),
        ServiceRule(
            id="gitlab-issue",
            host_predicate=hosts,
            pattern=SegmentPattern("{project+}", "-", "issues", "{num:\\d+}", "..."),
            label_template="{project}#{num}",
            priority=201,
            description="GitLab issue",
        ),
    ]


def _social_rules() -> list[ServiceRule]:
    return [
        ServiceRule(
            id="x-post",
            host_predicate=ExactHost(X_HOSTS),
            pattern=SegmentPattern("{user}", "status", "{id:\\d+}", "..."),
            label_template="@{user} on X ({id})",
            priority=300,
            description="Post on X (formerly Twitter)",
        ),
        ServiceRule(
            id="bluesky-post",
            host_predicate=ExactHost(("bsky.app",)),
            pattern=SegmentPattern("profile", "{handle}", "post", "{id}"),
            label_template="@{handle} on Bluesky ({id})",
            priority=310,
            description="Bluesky post",
        ),
        ServiceRule(
            id="reddit-post",
            host_predicate=DomainSuffix("reddit.com"),
            pattern=SegmentPattern("r", "{sub}", "comments", "{id}", "..."),
            label_template="r/{sub} post {id}",
            priority=320,
            description="Reddit post",
        ),
        ServiceRule(
            id="reddit-subreddit",
            host_predicate=DomainSuffix("reddit.com"),
            pattern=SegmentPattern("r", "{sub}"),
            label_template="r/{sub}",
            priority=321,
            description="Subreddit",
        ),
        ServiceRule(
            id="youtube-video",
            host_predicate=DomainSuffix("youtube.com"),
            pattern=SegmentPattern("watch", query={"v": "{id}"}),
            label_template="YouTube video {id}",
            priority=330,
            description="YouTube video",
        ),
        ServiceRule(
            id="youtube-short-link",
            host_predicate=ExactHost(("youtu.be",)),
            pattern=SegmentPattern("{id}"),
            label_template="YouTube video {id}",
            priority=331,
            description="YouTube short link",
        ),
        ServiceRule(
            id="stackoverflow-question",
            host_predicate=ExactHost(("stackoverflow.com",)),
            pattern=SegmentPattern("questions", "{id:\\d+}", "..."),
            label_template="Stack Overflow question {id}",
            priority=340,
            description="Stack Overflow question",
        ),
    ]


def _package_rules() -> list[ServiceRule]:
    pypi = ExactHost(("pypi.org",))
    return [
        ServiceRule(
            id="pypi-project-version",
            host_predicate=pypi,
            pattern=SegmentPattern("project", "{name}", "{version}"),
            label_template="{name} {version} on PyPI",
            priority=400,
            description="Specific release of a PyPI project",
        ),
        ServiceRule(
            id="pypi-project",
            host_predicate=pypi,
            pattern=SegmentPattern("project", "{name}"),
            label_template="{name} on PyPI",
            priority=401,
            description="PyPI project",
        ),
        ServiceRule(
            id="crates-io-crate",
            host_predicate=ExactHost(("crates.io",)),
            pattern=SegmentPattern("crates", "{name}", "..."),
            label_template="{name} crate",
            priority=410,
            description="Rust crate on crates.io",
        ),
    ]


def default_rules(
    repo_prefix: Callable[[str, str], RepoPrefix] = default_repo_prefix,
    disabled: Collection[str] = (),
) -> RuleSet:
    """Build the built-in rule catalog.

    Args:
        repo_prefix: Decides how much of ``owner/repo`` GitHub labels carry.
        disabled: Ids of rules to leave out.

    Returns:
        The rule set, sorted for evaluation.

    Raises:
        RuleSetError: If ``disabled`` names an unknown rule.
    """
    rules = RuleSet(
        [*_github_rules(repo_prefix), *_gitlab_rules(), *_social_rules(), *_package_rules()]
    )
    if disabled:
        rules = rules.without(disabled)
    return rules
