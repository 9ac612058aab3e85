"""SciCalc package: tokenizer, parser, evaluator, memory register and CLI."""

__all__ = [
    "config",
    "tokenizer",
    "nodes",
    "parser",
    "evaluator",
    "memory",
    "formatter",
    "symbolic",
    "types",
    "api",
    "bridge",
    "cli",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "calculate",
    "evaluate",
    "exact",
    "validate_expression",
]
