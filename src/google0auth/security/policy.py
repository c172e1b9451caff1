"""Access policy for incoming requests.

The policy is an ordered table of request matchers, each mapped to an
access rule. The first matching entry wins, and the table always ends with
a catch-all so every request resolves to exactly one rule.

## Pattern Syntax

- `/api/public` - matches that exact path only
- `/api/*` - matches one path segment below `/api`
- `/api/**` - matches `/api` and everything below it

## Example

```python
policy = AccessPolicy.build(public_paths=["/api/public"])

policy.evaluate("/api/public")   # AccessRule.PUBLIC
policy.evaluate("/api/private")  # AccessRule.AUTHENTICATED
```
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable


class AccessRule(str, Enum):
    """What a matched request needs before reaching a handler."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class RequestMatcher:
    """Matches request paths against a single pattern."""

    pattern: str

    def __post_init__(self) -> None:
        if self.pattern != ANY_REQUEST_PATTERN and not self.pattern.startswith("/"):
            raise ValueError(f"Pattern must start with '/': {self.pattern!r}")

    @property
    def regex(self) -> re.Pattern[str]:
        return _compile(self.pattern)

    def matches(self, path: str) -> bool:
        """Check whether a request path matches this pattern."""
        if self.pattern == ANY_REQUEST_PATTERN:
            return True
        return self.regex.fullmatch(path) is not None


ANY_REQUEST_PATTERN = "**"
ANY_REQUEST = RequestMatcher(ANY_REQUEST_PATTERN)


@lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str]:
    if pattern.endswith("/**"):
        base = re.escape(pattern[:-3])
        return re.compile(f"{base}(/.*)?")

    parts = [re.escape(part) for part in pattern.split("*")]
    return re.compile("[^/]*".join(parts))


@dataclass(frozen=True)
class PolicyEntry:
    """One row of the access policy table."""

    matcher: RequestMatcher
    rule: AccessRule


@dataclass(frozen=True)
class AccessPolicy:
    """Ordered, read-only table of (matcher, rule) entries."""

    entries: tuple[PolicyEntry, ...]

    def __post_init__(self) -> None:
        if not self.entries or self.entries[-1].matcher != ANY_REQUEST:
            raise ValueError("Access policy must end with an any-request entry")

    @classmethod
    def build(
        cls,
        public_paths: Iterable[str],
        default: AccessRule = AccessRule.AUTHENTICATED,
    ) -> AccessPolicy:
        """Build the policy: listed paths are public, anything else gets `default`."""
        entries = [
            PolicyEntry(RequestMatcher(path), AccessRule.PUBLIC) for path in public_paths
        ]
        entries.append(PolicyEntry(ANY_REQUEST, default))
        return cls(entries=tuple(entries))

    def evaluate(self, path: str) -> AccessRule:
        """Return the rule of the first entry matching the path."""
        return self.match(path).rule

    def match(self, path: str) -> PolicyEntry:
        for entry in self.entries:
            if entry.matcher.matches(path):
                return entry
        # Unreachable: the catch-all entry always matches
        raise AssertionError(f"No policy entry matched {path!r}")

    def requires_authentication(self, path: str) -> bool:
        return self.evaluate(path) is AccessRule.AUTHENTICATED
