"""
Backtest evaluation API endpoints.
"""

from fastapi import APIRouter, HTTPException
from loguru import logger

from backtest_report.core.exceptions.backtest import ValidationError
from backtest_report.metrics import evaluate_backtest

from ..schemas.api_models import EvaluationRequest, EvaluationResponse

router = APIRouter()


@router.post("/", response_model=EvaluationResponse)
async def evaluate(request: EvaluationRequest) -> EvaluationResponse:
    """Evaluate a completed backtest and return its performance report."""
    try:
        bars = [bar.to_domain() for bar in request.bars]
        positions = [position.to_domain() for position in request.positions]
        config = request.to_config().validate()
    except ValidationError as e:
        logger.warning(f"Rejected evaluation request: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    report = evaluate_backtest(
        bars, positions, config, benchmark_closes=request.benchmark_closes
    )
    return EvaluationResponse(
        success=report.success,
        error_message=report.error_message,
        summary=report.summary(),
        report=report.to_dict(),
    )
