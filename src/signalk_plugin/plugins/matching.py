"""Value matching helpers for filtering streams by optional config values."""

from typing import Any


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def wildcard_eq(test_val: Any, match_val: Any) -> bool:
    """Match a value against an optional filter value.

    A blank match_val (None, or a string that is empty after stripping
    whitespace) is a wildcard that matches anything. Useful when an unset
    config option should mean "no filter".

    Other falsy values are not wildcards: a match_val of 0 or False only
    matches an equal test_val. Filters ported from JavaScript plugins that
    rely on any falsy value matching everything need an explicit None.

    Args:
        test_val: The value being tested
        match_val: The filter value

    Returns:
        True if match_val is blank or test_val == match_val
    """
    return _is_blank(match_val) or test_val == match_val
