"""
Tests for the Result[P] envelope and the Timer.
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from regworkbench.core.config import DEFAULT_FIT_OPTIONS, FitOptions
from regworkbench.core.result import Result
from regworkbench.core.timing import Timer


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


class TestResult:

    def test_fields(self):
        r = Result(params=FakeParams(1.5), info={'method': 'irls'},
                   timing=None, backend_name='statsmodels_glm')
        assert r.params.value == 1.5
        assert r.info['method'] == 'irls'
        assert r.warnings == ()

    def test_frozen(self):
        r = Result(params=FakeParams(1.0), info={}, timing=None, backend_name='x')
        with pytest.raises(FrozenInstanceError):
            r.backend_name = 'y'

    def test_warnings_kept_in_order(self):
        r = Result(params=FakeParams(1.0), info={}, timing=None,
                   backend_name='x', warnings=("first", "second"))
        assert r.warnings == ("first", "second")


class TestTimer:

    def test_sections_and_total(self):
        timer = Timer()
        timer.start()
        with timer.section('solver'):
            pass
        with timer.section('solver'):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'solver'}
        assert result['total_seconds'] >= result['solver'] >= 0.0

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()


class TestFitOptions:

    def test_overrides_skip_none(self):
        opts = DEFAULT_FIT_OPTIONS.with_overrides(max_iter=5, tol=None)
        assert opts.max_iter == 5
        assert opts.tol == DEFAULT_FIT_OPTIONS.tol

    def test_no_overrides_returns_same(self):
        assert DEFAULT_FIT_OPTIONS.with_overrides() is DEFAULT_FIT_OPTIONS

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            FitOptions().max_iter = 3
