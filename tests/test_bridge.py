"""Tests for the string-returning UI bridge."""

import math

import pytest

from scicalc_pkg import bridge


@pytest.fixture(autouse=True)
def reset_state():
    bridge.clear_memory()
    bridge.evaluate("0", True)  # clears the last error
    yield
    bridge.clear_memory()


class TestBridgeEvaluate:
    """Test evaluate() display strings."""

    def test_results(self):
        assert bridge.evaluate("3+4*2", True) == "11"
        assert bridge.evaluate("2^3^2", True) == "512"
        assert bridge.evaluate("7mod(3)", True) == "1"
        assert bridge.evaluate("1.0E10+1", True) == "10000000001"

    def test_angle_mode_is_per_call(self):
        assert bridge.evaluate("sin(90)", True) == "1"
        assert bridge.evaluate("sin(90)", False) == "0.893996663600558"
        assert bridge.evaluate("sin(90)", True) == "1"

    def test_domain_error(self):
        result = bridge.evaluate("sqrt(-4)", True)
        assert result.startswith("ERROR: Domain error")

    def test_division_by_zero(self):
        result = bridge.evaluate("5/0", True)
        assert result.startswith("ERROR: Division by zero")

    def test_syntax_error(self):
        assert bridge.evaluate("((2+3", True).startswith("ERROR: Syntax error")

    def test_internal_error(self, monkeypatch, caplog):
        def boom(expression, degree_mode, exact=False):
            raise RuntimeError("engine fault")

        monkeypatch.setattr(bridge, "evaluate_structured", boom)
        assert bridge.evaluate("1+1", True) == "ERROR: Internal error"
        assert bridge.get_last_error() == "Internal error"
        assert "engine fault" in caplog.text


class TestLastError:
    """Test the last-error slot."""

    def test_set_on_failure(self):
        result = bridge.evaluate("5/0", True)
        assert bridge.get_last_error() == result[len(bridge.ERROR_PREFIX) :]

    def test_cleared_on_success(self):
        bridge.evaluate("5/0", True)
        assert bridge.get_last_error() != ""
        bridge.evaluate("1+1", True)
        assert bridge.get_last_error() == ""

    def test_memory_success_keeps_last_error(self):
        bridge.evaluate("5/0", True)
        assert bridge.store_memory(1) is None
        assert bridge.get_last_error().startswith("Division by zero")


class TestBridgeMemory:
    """Test flattened memory operations."""

    def test_store_add_recall(self):
        assert bridge.store_memory(5) is None
        assert bridge.add_memory(3) is None
        assert bridge.recall_memory() == 8.0
        assert bridge.subtract_memory(10) is None
        assert bridge.recall_memory() == -2.0

    def test_clear(self):
        bridge.store_memory(5)
        bridge.clear_memory()
        assert bridge.recall_memory() == 0.0

    def test_invalid_operand(self):
        bridge.store_memory(8)
        error = bridge.add_memory(math.nan)
        assert error.startswith("ERROR: Invalid operand")
        assert bridge.get_last_error() == error[len(bridge.ERROR_PREFIX) :]
        assert bridge.recall_memory() == 8.0

    def test_integer_too_large_for_a_double(self):
        bridge.store_memory(8)
        error = bridge.store_memory(10**400)
        assert error.startswith("ERROR: Invalid operand")
        assert bridge.recall_memory() == 8.0

    def test_overflow(self):
        bridge.store_memory(1.7e308)
        error = bridge.add_memory(1.7e308)
        assert error.startswith("ERROR: Overflow error")
        assert bridge.recall_memory() == 1.7e308

    def test_store_evaluated_result(self):
        bridge.store_memory(float(bridge.evaluate("2^10", True)))
        assert bridge.evaluate(f"{bridge.recall_memory()}+1", True) == "1025"
