"""Version constraint matching for box versions.

Constraints use the box-server dialect: comma separated clauses of
``=``, ``!=``, ``>``, ``<``, ``>=``, ``<=`` and the pessimistic ``~>``
operator (``~> 1.2`` means ``>= 1.2, < 2``; ``~> 1.2.3`` means
``>= 1.2.3, < 1.3``). A bare version means equality. Clauses are
translated to a ``packaging`` SpecifierSet, which does the comparisons.
"""
from __future__ import annotations

import re
from typing import List, Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from boxget.kernel.errors import BoxAddInvalidVersionConstraint

_CLAUSE = re.compile(r"^(~>|==|>=|<=|!=|=|>|<)?\s*([0-9A-Za-z.\-+_]+)$")


class VersionMatcher:
    """Parses constraints once and answers match/order questions about version tokens."""

    def parse_version(self, version: str) -> Version:
        """Parse a version token; raises ``packaging.version.InvalidVersion``."""
        return Version(version)

    def is_valid(self, version: str) -> bool:
        try:
            self.parse_version(version)
        except InvalidVersion:
            return False
        return True

    def parse_constraint(self, expression: Optional[str]) -> Optional[SpecifierSet]:
        """Translate a constraint expression; None or blank means "any version".

        Raises:
            BoxAddInvalidVersionConstraint: if a clause cannot be understood.
        """
        if expression is None or not expression.strip():
            return None

        specifiers: List[str] = []
        for clause in expression.split(","):
            clause = clause.strip()
            match = _CLAUSE.match(clause)
            if not match:
                raise BoxAddInvalidVersionConstraint(
                    constraint=expression, error=f"cannot parse '{clause}'"
                )
            operator, version = match.group(1) or "=", match.group(2)
            try:
                parsed = self.parse_version(version)
            except InvalidVersion as exc:
                raise BoxAddInvalidVersionConstraint(constraint=expression, error=str(exc)) from exc

            if operator == "~>":
                specifiers.append(f">={version}")
                specifiers.append(f"<{self._bump(parsed)}")
            elif operator in ("=", "=="):
                specifiers.append(f"=={version}")
            else:
                specifiers.append(f"{operator}{version}")

        try:
            return SpecifierSet(",".join(specifiers))
        except InvalidSpecifier as exc:
            raise BoxAddInvalidVersionConstraint(constraint=expression, error=str(exc)) from exc

    def matches(self, version: str, constraint: Optional[SpecifierSet]) -> bool:
        """Whether ``version`` satisfies ``constraint``. Unparseable versions never match."""
        try:
            parsed = self.parse_version(version)
        except InvalidVersion:
            return False
        if constraint is None:
            return True
        return constraint.contains(parsed, prereleases=True)

    @staticmethod
    def _bump(version: Version) -> str:
        # "~> 1.2.3" caps at 1.3, "~> 1.2" and "~> 1" both cap at 2
        release = list(version.release)
        if len(release) > 1:
            release.pop()
        release[-1] += 1
        return ".".join(str(part) for part in release)
