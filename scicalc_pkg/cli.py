from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from . import bridge, memory
from .api import evaluate
from .config import VERSION
from .formatter import format_error, format_result
from .logging_config import get_logger
from .memory import MemoryStatus
from .types import CalculatorError

logger = get_logger("cli")

MEMORY_COMMANDS = ("ms", "m+", "m-")


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running SciCalc health check...")
    print("-" * 50)

    try:
        import sympy as sp

        print(f"[OK] SymPy {sp.__version__} imported successfully")
        checks_passed += 1
    except ImportError as e:
        print(f"[FAIL] SymPy import failed: {e}")
        checks_failed += 1

    expectations = [
        ("3+4*2", True, "11"),
        ("2^3^2", True, "512"),
        ("sin(90)", True, "1"),
        ("factorial(5)", True, "120"),
    ]
    for expression, degree_mode, expected in expectations:
        result = evaluate(expression, degree_mode)
        if result.ok and result.result == expected:
            print(f"[OK] {expression} = {expected}")
            checks_passed += 1
        else:
            print(f"[FAIL] {expression}: expected {expected}, got {result!r}")
            checks_failed += 1

    result = evaluate("5/0")
    if not result.ok and result.error_code == "DIVISION_BY_ZERO":
        print("[OK] Division by zero is reported")
        checks_passed += 1
    else:
        print(f"[FAIL] Division by zero check failed: {result!r}")
        checks_failed += 1

    register = memory.MemoryRegister()
    register.store(5)
    register.add(3)
    if register.recall() == 8.0:
        print("[OK] Memory register works")
        checks_passed += 1
    else:
        print(f"[FAIL] Memory register check failed: {register.recall()}")
        checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def print_result_pretty(res: dict[str, Any], output_format: str = "human") -> None:
    """Print result in specified format.

    Args:
        res: Result dictionary (see EvalResult.to_dict)
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res, indent=2, ensure_ascii=False))
        return
    if not res.get("ok"):
        print("Error:", res.get("error"))
        return
    print(res.get("result"))
    exact = res.get("exact")
    if exact:
        try:
            print("Exact:", exact)
        except UnicodeEncodeError:
            # Console without Unicode support
            safe_exact = (
                exact.replace("π", "pi").replace("φ", "phi").replace("√", "sqrt").replace("×", "*")
            )
            print("Exact:", safe_exact)


def print_help_text() -> None:
    print(
        """SciCalc scientific calculator

Expressions:
  Operators     + - * / ^  (also × ÷ −),  a mod(b)
  Functions     sin cos tan asin acos atan sinh cosh tanh
                log (base 10)  ln  sqrt  cbrt  exp  abs  factorial
  Constants     π (pi)  e  φ (phi)
  Numbers       12, 3.5, .5, 1.5e-3
  Multiplication must be explicit: write 2*π, not 2π.

Commands:
  deg / rad     Switch angle mode
  mode          Show angle mode
  ms [expr]     Store last result (or expr) in memory
  m+ [expr]     Add last result (or expr) to memory
  m- [expr]     Subtract last result (or expr) from memory
  mr            Show memory
  mc            Clear memory
  lasterror     Show the most recent error message
  help          Show this help
  quit / exit   Leave
"""
    )


def _memory_operand(argument: str, last_value: float | None, degree_mode: bool) -> float | None:
    """Resolve the operand of ms/m+/m-: an expression argument, or the last result."""
    if argument:
        result = bridge.evaluate_result(argument, degree_mode)
        if not result.ok:
            print("Error:", result.error)
            return None
        return result.value
    if last_value is None:
        print("Error: No result to use. Evaluate an expression first or pass one, e.g. 'ms 2+3'.")
        return None
    return last_value


def _print_memory_status(status: MemoryStatus, value: float) -> None:
    if status is MemoryStatus.EMPTY:
        print("[Memory cleared]")
    else:
        print(f"[M = {format_result(value)}]")


def repl_loop(output_format: str = "human", degree_mode: bool = True, show_exact: bool = True) -> None:
    """Interactive REPL loop with graceful interrupt handling."""
    try:
        import readline  # noqa: F401
    except ImportError:
        # readline not available on Windows - that's fine
        pass

    memory.default_register().subscribe(_print_memory_status)
    last_value: float | None = None

    print("SciCalc: type 'help' for commands, 'quit' to exit.")
    while True:
        prompt = "[DEG]>>> " if degree_mode else "[RAD]>>> "
        try:
            raw = input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            break

        line = raw.strip()
        if not line:
            continue
        command, _, argument = line.partition(" ")
        command = command.lower()
        argument = argument.strip()

        if command in ("quit", "exit"):
            break
        if command == "help":
            print_help_text()
            continue
        if command == "deg":
            degree_mode = True
            print("Degree mode")
            continue
        if command == "rad":
            degree_mode = False
            print("Radian mode")
            continue
        if command == "mode":
            print("Degree mode" if degree_mode else "Radian mode")
            continue
        if command == "mr":
            print(format_result(bridge.recall_memory()))
            continue
        if command == "mc":
            bridge.clear_memory()
            continue
        if command == "lasterror":
            print(bridge.get_last_error() or "No error")
            continue
        if command in MEMORY_COMMANDS:
            operand = _memory_operand(argument, last_value, degree_mode)
            if operand is None:
                continue
            operation = {
                "ms": bridge.store_memory,
                "m+": bridge.add_memory,
                "m-": bridge.subtract_memory,
            }[command]
            error = operation(operand)
            if error is not None:
                print(error)
            continue

        result = bridge.evaluate_result(line, degree_mode, exact=show_exact)
        if result.ok:
            last_value = result.value
        print_result_pretty(result.to_dict(), output_format)

    memory.default_register().unsubscribe(_print_memory_status)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for SciCalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    from . import config as _config

    parser = argparse.ArgumentParser(prog="scicalc")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Emit JSON for machine parsing (deprecated, use --format json)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    angle = parser.add_mutually_exclusive_group()
    angle.add_argument(
        "--degrees",
        dest="degree_mode",
        action="store_true",
        default=None,
        help="Interpret angles in degrees",
    )
    angle.add_argument(
        "--radians",
        dest="degree_mode",
        action="store_false",
        help="Interpret angles in radians",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument(
        "--no-exact",
        action="store_true",
        help="Do not print exact (symbolic) forms of results",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    output_format = args.format
    if args.json:  # Backward compatibility for deprecated -j flag
        output_format = "json"

    from .logging_config import setup_logging

    setup_logging(level=args.log_level, log_file=args.log_file)

    # Apply CLI configuration overrides
    if args.precision is not None:
        if args.precision <= 0:
            parser.error(f"--precision must be a positive integer, got {args.precision}")
        _config.OUTPUT_PRECISION = args.precision
    degree_mode = _config.DEFAULT_DEGREE_MODE if args.degree_mode is None else args.degree_mode

    if args.version:
        print(VERSION)
        return 0
    if args.health_check:
        return _health_check()
    if args.eval_expr is not None:
        expr = args.eval_expr.strip()
        # Remove ">>>" prompt if present
        if expr.startswith(">>>"):
            expr = expr[3:].strip()
        if not expr:
            print("Error: Empty input. Please enter a valid expression.")
            return 1
        result = bridge.evaluate_result(expr, degree_mode, exact=not args.no_exact)
        print_result_pretty(result.to_dict(), output_format)
        return 0 if result.ok else 1

    try:
        repl_loop(output_format, degree_mode, show_exact=not args.no_exact)
    except CalculatorError as e:
        # Every calculator error is handled per line; reaching here is a bug
        logger.error("Unhandled calculator error: %s", format_error(e), exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main_entry())
