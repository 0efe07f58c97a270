"""
Utility decorators for input validation and logging.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

from backtest_report.core.exceptions.backtest import ValidationError
from backtest_report.core.utils.validation import validate_fee_ratio, validate_positive

_POSITIVE_PARAMS = ("initial_amount", "annualization_factor")
_CONTEXT_PARAMS = ("initial_amount", "fee_ratio", "interval", "annualization_factor")

F = TypeVar("F", bound=Callable[..., Any])


def _validate_evaluation_parameter(param_name: str, value: Any, bound_args: Any) -> None:
    """Validate a single evaluation parameter."""
    if value is None:
        return

    if param_name in _POSITIVE_PARAMS:
        try:
            bound_args.arguments[param_name] = validate_positive(value, param_name)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid {param_name}: {e}") from e

    elif param_name == "fee_ratio":
        try:
            bound_args.arguments[param_name] = validate_fee_ratio(value, param_name)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid {param_name}: {e}") from e


def _bind_arguments(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> inspect.BoundArguments:
    """Bind call arguments to the function signature, applying defaults."""
    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()
    return bound_args


def validate_inputs(func: F) -> F:
    """Decorator to validate evaluation inputs (initial amount, fee ratio)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bound_args = _bind_arguments(func, args, kwargs)
        for param_name, value in bound_args.arguments.items():
            if param_name != "self":
                _validate_evaluation_parameter(param_name, value, bound_args)
        return func(*bound_args.args, **bound_args.kwargs)

    return wrapper  # type: ignore


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    elif hasattr(value, "quantize"):
        return str(value)  # Handle Decimal types
    else:
        return value


def _extract_evaluation_context(bound_args: inspect.BoundArguments) -> dict[str, Any]:
    """Extract evaluation context from function arguments."""
    context: dict[str, Any] = {}
    for param_name, value in bound_args.arguments.items():
        if param_name in _CONTEXT_PARAMS:
            context[param_name] = _serialize_parameter_value(value)
        elif param_name == "config" and hasattr(value, "to_dict"):
            context.update(
                {k: v for k, v in value.to_dict().items() if k in (*_CONTEXT_PARAMS, "strategy_name")}
            )
        elif param_name in ("bars", "positions") and hasattr(value, "__len__"):
            context[f"{param_name}_count"] = len(value)
    return context


def log_evaluation(func: F) -> F:
    """Decorator to log evaluation stages with correlation IDs and timing."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = {
            "correlation_id": str(uuid.uuid4())[:8],
            **_extract_evaluation_context(_bind_arguments(func, args, kwargs)),
        }
        func_name = func.__name__

        logger.debug(f"Evaluation step started: {func_name}", extra=context)
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Evaluation step failed: {func_name}",
                extra={
                    **context,
                    "success": False,
                    "execution_time_ms": round(execution_time_ms, 2),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Evaluation step completed: {func_name}",
            extra={
                **context,
                "success": True,
                "execution_time_ms": round(execution_time_ms, 2),
                "result_type": type(result).__name__,
            },
        )
        return result

    return wrapper  # type: ignore
