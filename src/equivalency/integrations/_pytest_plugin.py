"""pytest plugin for equivalency.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from equivalency.api import OptionsLike, assert_equivalent as _assert_equivalent

__all__ = ["assert_equivalent"]


@pytest.fixture(scope="session")
def assert_equivalent() -> Any:
    """Fixture that returns a callable structural equivalence asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to equivalency.assert_equivalent, which builds a fresh
    validator per call).

    Usage in tests::

        def test_order(assert_equivalent):
            assert_equivalent([1, 2, 3], [3, 2, 1])

        def test_missing_key(assert_equivalent):
            with pytest.raises(AssertionError, match=r"misses key"):
                assert_equivalent({"A": 1}, {"A": 1, "B": 2})

    Returns:
        A callable ``_assert(actual, expected, options=None, because="") -> None``
        that raises ``EquivalencyError`` (an ``AssertionError``) when the two
        object graphs are not equivalent.
    """

    def _assert(
        actual: Any,
        expected: Any,
        options: OptionsLike = None,
        because: str = "",
    ) -> None:
        """Assert that ``actual`` is structurally equivalent to ``expected``.

        Args:
            actual:   The object graph produced by the code under test.
            expected: The expected object graph.
            options:  Optional options, builder, or builder callable.
            because:  Optional reason included in the failure message.

        Raises:
            EquivalencyError: Listing every difference (at most 10 rendered).
        """
        __tracebackhide__ = True
        _assert_equivalent(actual, expected, options, because=because)

    return _assert
