"""
Auth Module - Authorization Policy
===================================
Ordered route matrix (path glob x HTTP method -> requirement). The first
matching rule wins; anything unmatched needs an authenticated principal.

Glob syntax:
    /api/products/**   the prefix itself and everything below it
    /api/users/{id}    exactly one path segment, captured as `id`
"""

import enum
import logging
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence

from config.settings import DEBUG
from common.exceptions import Forbidden, Unauthenticated
from modules.auth.principal import UserPrincipal

logger = logging.getLogger("fivepapa.security")

ANY_METHOD: FrozenSet[str] = frozenset()
WRITE_METHODS = frozenset({"POST", "PUT", "DELETE"})


class Requirement(str, enum.Enum):
    PUBLIC = "PUBLIC"
    AUTHENTICATED = "AUTHENTICATED"
    ADMIN = "ADMIN"
    SELF_OR_ADMIN = "SELF_OR_ADMIN"


def compile_pattern(pattern: str) -> "re.Pattern":
    if pattern.endswith("/**"):
        base, tail = pattern[:-3], r"(?:/.*)?"
    else:
        base, tail = pattern, ""
    parts = re.split(r"(\{\w+\})", base)
    regex = ""
    for part in parts:
        if part.startswith("{") and part.endswith("}"):
            regex += f"(?P<{part[1:-1]}>[^/]+)"
        else:
            regex += re.escape(part)
    return re.compile(f"^{regex}{tail}$")


@dataclass
class Rule:
    patterns: Sequence[str]
    requirement: Requirement
    methods: FrozenSet[str] = ANY_METHOD

    def __post_init__(self):
        self._compiled = [compile_pattern(p) for p in self.patterns]

    def match(self, method: str, path: str) -> Optional[Dict[str, str]]:
        """Return the captured path variables on a match, else None."""
        if self.methods and method.upper() not in self.methods:
            return None
        for regex in self._compiled:
            m = regex.match(path)
            if m:
                return m.groupdict()
        return None


# ==========================================
# 🔐 Route Matrix
# ==========================================

PUBLIC_PATHS = ["/", "/health", "/api/csrf"]
AUTH_PATHS = ["/api/auth/login", "/api/auth/register", "/api/auth/refresh", "/api/auth/logout"]
DOCS_PATHS = ["/docs", "/docs/**", "/openapi.json", "/redoc"]


def build_rules(debug: bool = DEBUG) -> List[Rule]:
    rules = [
        Rule(PUBLIC_PATHS, Requirement.PUBLIC),
        Rule(AUTH_PATHS, Requirement.PUBLIC),
    ]
    if debug:
        rules.append(Rule(DOCS_PATHS, Requirement.PUBLIC))
    rules += [
        Rule(["/api/products/**"], Requirement.PUBLIC, frozenset({"GET"})),
        Rule(["/api/products/**"], Requirement.ADMIN, WRITE_METHODS),
        Rule(["/api/categories/**"], Requirement.PUBLIC, frozenset({"GET"})),
        Rule(["/api/categories/**"], Requirement.ADMIN, WRITE_METHODS),
        Rule(["/api/cart/**"], Requirement.AUTHENTICATED),
        Rule(["/api/users/{id}"], Requirement.SELF_OR_ADMIN, frozenset({"GET"})),
        Rule(["/api/users/**"], Requirement.ADMIN),
        Rule(["/**"], Requirement.AUTHENTICATED),
    ]
    return rules


def build_csrf_exemptions(debug: bool = DEBUG) -> List[Rule]:
    """Paths that never go through the double-submit check."""
    patterns = PUBLIC_PATHS + AUTH_PATHS + ["/api/products/**", "/api/categories/**", "/api/cart/**"]
    if debug:
        patterns += DOCS_PATHS
    return [Rule(patterns, Requirement.PUBLIC)]


RULES = build_rules()
CSRF_EXEMPTIONS = build_csrf_exemptions()


def resolve(method: str, path: str, rules: List[Rule] = None):
    """Return (rule, path_variables) for the first matching rule."""
    for rule in rules or RULES:
        variables = rule.match(method, path)
        if variables is not None:
            return rule, variables
    return None, {}


def is_csrf_exempt(method: str, path: str, exemptions: List[Rule] = None) -> bool:
    return any(rule.match(method, path) is not None for rule in exemptions or CSRF_EXEMPTIONS)


def authorize(method: str, path: str, principal: Optional[UserPrincipal], rules: List[Rule] = None):
    """
    Raises Unauthenticated when the matched rule needs a principal and there is none,
    Forbidden when the principal lacks the role or ownership the rule requires.
    """
    rule, variables = resolve(method, path, rules)
    requirement = rule.requirement if rule else Requirement.AUTHENTICATED

    if requirement == Requirement.PUBLIC:
        return
    if principal is None:
        raise Unauthenticated()
    if requirement == Requirement.AUTHENTICATED:
        return
    if principal.is_admin:
        return
    if requirement == Requirement.SELF_OR_ADMIN and variables.get("id") == str(principal.user_id):
        return

    logger.info(f"Access denied: {principal.username} ({principal.role}) -> {method} {path}")
    raise Forbidden()
