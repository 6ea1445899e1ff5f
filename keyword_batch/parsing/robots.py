"""Robots.txt parsing and cached per-origin compliance checks.

The parser understands ``User-agent``, ``Allow`` and ``Disallow`` groups
with ``*`` and ``$`` wildcards. The longest matching rule wins and Allow
beats Disallow on equal length.

:class:`RobotsPolicyCache` fetches ``{origin}/robots.txt`` on demand and
remembers one allow/deny decision per origin. A timed-out fetch denies
without caching; any other failure allows and is cached.

Reference: https://www.robotstxt.org/robotstxt.html
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List
from urllib.parse import urlsplit

import requests

from keyword_batch.caching import LRUCache
from keyword_batch.parsing.config import DEFAULT_USER_AGENT, RobotsCacheOptions

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass
class RobotRule:
    """A single Allow or Disallow line.

    Attributes:
        path: The path pattern (may contain * and $)
        allowed: True for Allow, False for Disallow
    """

    path: str
    allowed: bool
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        anchored = self.path.endswith("$")
        body = self.path[:-1] if anchored else self.path
        regex = ".*".join(re.escape(part) for part in body.split("*"))
        self._pattern = re.compile(f"^{regex}{'$' if anchored else ''}")

    def matches(self, url_path: str) -> bool:
        # An empty Disallow means "allow everything" and matches nothing
        if not self.path:
            return False
        return self._pattern.match(url_path) is not None


@dataclass
class RobotGroup:
    """Rules shared by one or more user agents."""

    user_agents: List[str]
    rules: List[RobotRule] = field(default_factory=list)

    def decide(self, url_path: str) -> bool:
        """Return whether ``url_path`` may be crawled under this group."""
        best: RobotRule | None = None
        for rule in self.rules:
            if not rule.matches(url_path):
                continue
            if best is None or (len(rule.path), rule.allowed) > (len(best.path), best.allowed):
                best = rule
        return True if best is None else best.allowed


@dataclass
class RobotsTxt:
    """Parsed robots.txt file bound to the URL it was served from."""

    robots_url: str
    groups: List[RobotGroup] = field(default_factory=list)

    def group_for(self, user_agent: str) -> RobotGroup | None:
        """Pick the group for ``user_agent``, falling back to ``*``.

        Agents are compared by product token, so ``Mozilla/5.0`` matches a
        ``User-agent: mozilla`` group.
        """
        token = user_agent.split("/", 1)[0].strip().lower()
        wildcard: RobotGroup | None = None
        for group in self.groups:
            for agent in group.user_agents:
                agent = agent.lower()
                if agent == "*":
                    wildcard = wildcard or group
                elif agent == token:
                    return group
        return wildcard

    def is_allowed(self, url: str, user_agent: str = "*") -> bool | None:
        """Check whether ``url`` may be crawled.

        Returns:
            True or False, or None when ``url`` is not on the origin this
            file was served from and no decision can be made.
        """
        if origin_of(url) != origin_of(self.robots_url):
            return None

        parts = urlsplit(url)
        path = parts.path or "/"
        if parts.query:
            path = f"{path}?{parts.query}"

        group = self.group_for(user_agent)
        if group is None:
            return True
        return group.decide(path)


def parse_robots_txt(robots_url: str, content: str) -> RobotsTxt:
    """Parse the text of a robots.txt file served at ``robots_url``."""
    robots = RobotsTxt(robots_url=robots_url)
    current: RobotGroup | None = None
    collecting_agents = False

    for raw_line in content.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if ":" not in line:
            continue

        directive, _, value = line.partition(":")
        directive = directive.strip().lower()
        value = value.strip()

        if directive == "user-agent":
            # Consecutive User-agent lines share one group
            if current is None or not collecting_agents:
                current = RobotGroup(user_agents=[])
                robots.groups.append(current)
            current.user_agents.append(value)
            collecting_agents = True
        elif directive in ("allow", "disallow"):
            collecting_agents = False
            if current is not None:
                current.rules.append(RobotRule(path=value, allowed=directive == "allow"))

    return robots


def origin_of(url: str) -> str:
    """Return scheme://host[:port] for ``url``, omitting default ports."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    try:
        port = parts.port
    except ValueError:
        port = None
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"


class RobotsPolicyCache:
    """Per-origin robots.txt decisions, fetched lazily and memoized.

    Decisions are cached at origin granularity: the first URL checked on an
    origin decides for every later URL on it until the entry expires or is
    evicted. Safe to share between crawler threads; two threads missing on
    the same origin may both fetch robots.txt.

    Usage:
        robots = RobotsPolicyCache()
        if robots.is_allowed("https://example.com/page", "Mozilla/5.0"):
            # crawl the page
    """

    def __init__(
        self,
        options: RobotsCacheOptions | None = None,
        session: requests.Session | None = None,
    ):
        self.options = options or RobotsCacheOptions()
        self._http = session or requests
        self._cache: LRUCache[str, bool] = LRUCache(
            max_size=self.options.max_size,
            max_age=self.options.max_age,
        )

    def __len__(self) -> int:
        return len(self._cache)

    def is_allowed(self, target_url: str, user_agent: str = DEFAULT_USER_AGENT) -> bool:
        """Decide whether ``target_url`` may be crawled. Never raises."""
        try:
            origin = origin_of(target_url)
        except ValueError as exc:
            logger.warning("Cannot check robots.txt for malformed URL %r: %s", target_url, exc)
            return False

        cached = self._cache.get(origin)
        if cached is not None:
            return cached

        robots_url = f"{origin}/robots.txt"
        try:
            response = self._http.get(
                robots_url,
                headers={"User-Agent": user_agent},
                timeout=self.options.request_timeout,
            )
            response.raise_for_status()
            robots = parse_robots_txt(robots_url, response.text)
        except requests.Timeout:
            logger.warning("Timeout fetching robots.txt for %s", robots_url)
            return False
        except requests.RequestException as exc:
            logger.warning(
                "Failed to fetch robots.txt for %s, allowing by default: %s",
                robots_url,
                exc,
            )
            self._cache.set(origin, True)
            return True

        decision = robots.is_allowed(target_url, user_agent)
        allowed = True if decision is None else decision
        self._cache.set(origin, allowed)
        logger.debug("robots.txt for %s: allowed=%s", origin, allowed)
        return allowed

    def clear(self) -> None:
        """Forget every cached decision."""
        self._cache.clear()
