import pytest

from boxget.kernel.errors import BoxAddInvalidVersionConstraint
from boxget.kernel.versions import VersionMatcher


@pytest.fixture
def matcher():
    return VersionMatcher()


@pytest.mark.parametrize("constraint, version, expected", [
    ("~> 0.1", "0.5", True),
    ("~> 0.1", "1.1", False),
    ("~> 2.0", "1.1", False),
    ("~> 1.2.3", "1.2.9", True),
    ("~> 1.2.3", "1.3.0", False),
    ("~> 1", "1.9", True),
    ("~> 1", "2.0", False),
    (">= 1.0, < 2.0", "1.5", True),
    (">= 1.0, < 2.0", "2.0", False),
    ("= 0.7", "0.7", True),
    ("== 0.7", "0.7.0", True),
    ("0.7", "0.8", False),
    ("!= 0.7", "0.7", False),
    ("> 1.0", "1.0.1", True),
    ("<= 1.0", "1.0", True),
    (">= 1.0", "1.1.0rc1", True),
    (None, "3.0", True),
    ("  ", "3.0", True),
])
def test_matches(matcher, constraint, version, expected):
    assert matcher.matches(version, matcher.parse_constraint(constraint)) is expected


@pytest.mark.parametrize("constraint", [">> 1.0", "~>", "banana", "1.0,", "~> 1.0 2.0"])
def test_invalid_constraints_raise(matcher, constraint):
    with pytest.raises(BoxAddInvalidVersionConstraint) as excinfo:
        matcher.parse_constraint(constraint)

    assert constraint in str(excinfo.value)


def test_unparseable_version_never_matches(matcher):
    assert matcher.is_valid("latest") is False
    assert matcher.matches("latest", None) is False
