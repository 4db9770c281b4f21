from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from pydantic import ValidationError
import logging
from datetime import datetime
from typing import List

from fraud_service.api.models import (
    BatchRequest,
    BatchSummary,
    HistoryItem,
    ModelName,
    PredictionResponse,
    TransactionRequest,
)
from fraud_service.config import Config
from fraud_service.data.generator import TransactionGenerator, records_from_frame
from fraud_service.features.engineering import (
    AMOUNT_SUGGESTIONS,
    TIME_SUGGESTIONS,
    format_time,
    generate_feature_vector,
)
from fraud_service.history.export import export_history, summary_line
from fraud_service.history.store import HistoryEntry, PredictionHistory
from fraud_service.models.decision_tree import DecisionTreeClassifier
from fraud_service.models.records import TransactionRecord
from fraud_service.models.risk_score import RiskScoreClassifier

logger = logging.getLogger(__name__)

# Classifiers hold only read-only rule data and are shared across requests
router = APIRouter()
classifiers = {
    ModelName.STANDARD: RiskScoreClassifier(),
    ModelName.DECISION_TREE: DecisionTreeClassifier(),
}


def get_history(request: Request) -> PredictionHistory:
    """History owned by the running application"""
    return request.app.state.history


def _to_response(entry: HistoryEntry) -> PredictionResponse:
    result = entry.result
    return PredictionResponse(
        id=entry.id,
        timestamp=entry.timestamp,
        model=entry.model,
        prediction=result.prediction.value,
        confidence=result.confidence,
        risk=result.risk.value,
        features=result.features,
        details=result.details,
        summary=summary_line(result),
    )


def _to_history_item(entry: HistoryEntry) -> HistoryItem:
    return HistoryItem(
        **_to_response(entry).model_dump(),
        time=entry.record.time,
        amount=entry.record.amount,
        v_values=list(entry.record.v_values),
    )


@router.get("/")
async def root():
    """API health check endpoint"""
    return {
        "service": Config.API_TITLE,
        "status": "running",
        "models": [name.value for name in classifiers],
        "version": Config.API_VERSION,
    }


@router.post("/predict", response_model=PredictionResponse)
async def predict_fraud(transaction: TransactionRequest,
                        history: PredictionHistory = Depends(get_history)):
    """
    Classify a transaction with the selected model.

    Args:
        transaction: Time, amount, optional features and model name

    Returns:
        Prediction with confidence, risk label and explanation
    """
    v_values = transaction.v_values
    if v_values is None:
        v_values = generate_feature_vector()

    try:
        record = TransactionRecord(time=transaction.time, amount=transaction.amount,
                                   v_values=tuple(v_values))
    except ValidationError as e:
        logger.warning(f"Rejected transaction: {e.errors()}")
        # Rejected inputs may be NaN/inf, which JSON responses cannot carry
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=422, detail=errors)

    try:
        result = classifiers[transaction.model].classify(record)
    except Exception as e:
        logger.error(f"Prediction error: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Prediction failed: {str(e)}")

    entry = history.add(record, result, transaction.model.value)

    logger.info(f"Prediction: {entry.id} [{transaction.model.value}] at {format_time(record.time)} "
                f"-> {result.prediction.value} ({result.confidence}%, risk {result.risk.value})")

    return _to_response(entry)


@router.get("/features/random")
async def random_features():
    """Generate a random feature vector (V1..V28)"""
    return {"v_values": generate_feature_vector()}


@router.get("/history", response_model=List[HistoryItem])
async def list_history(history: PredictionHistory = Depends(get_history)):
    """Predictions made so far, newest first"""
    return [_to_history_item(entry) for entry in history]


@router.get("/history/export")
async def export_predictions(full_features: bool = True,
                             history: PredictionHistory = Depends(get_history)):
    """Download the prediction history as CSV"""
    content = export_history(history, full_features=full_features)
    filename = "fraud_detection_results.csv" if full_features else "decision_tree_results.csv"

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/history/{entry_id}", response_model=HistoryItem)
async def get_prediction(entry_id: str, history: PredictionHistory = Depends(get_history)):
    entry = history.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Prediction {entry_id} not found")
    return _to_history_item(entry)


@router.delete("/history/{entry_id}")
async def delete_prediction(entry_id: str, history: PredictionHistory = Depends(get_history)):
    """Remove a prediction from the history"""
    if not history.delete(entry_id):
        raise HTTPException(status_code=404, detail=f"Prediction {entry_id} not found")
    return {"message": "Prediction deleted", "id": entry_id}


@router.delete("/history")
async def clear_history(history: PredictionHistory = Depends(get_history)):
    removed = history.clear()
    return {"message": "History cleared", "removed": removed}


@router.get("/tree")
async def decision_tree():
    """Describe the decision tree used by the decision_tree model"""
    return classifiers[ModelName.DECISION_TREE].describe()


@router.post("/batch", response_model=BatchSummary)
async def score_batch(batch: BatchRequest):
    """Score a batch of generated transactions without recording them"""
    generator = TransactionGenerator(seed=batch.seed)
    df = generator.generate_batch(batch.n_samples)

    classifier = classifiers[batch.model]
    results = [classifier.classify(record) for record in records_from_frame(df)]

    df["Prediction"] = [r.prediction.value for r in results]
    df["Confidence"] = [r.confidence for r in results]
    df["Risk"] = [r.risk.value for r in results]

    fraud_count = int((df["Prediction"] == "Fraud").sum())

    logger.info(f"Batch: {len(df)} transactions [{batch.model.value}] -> {fraud_count} flagged")

    return BatchSummary(
        model=batch.model,
        n_samples=len(df),
        fraud_count=fraud_count,
        fraud_rate=round(fraud_count / len(df), 4),
        avg_confidence=round(float(df["Confidence"].mean()), 2),
        high_risk_count=int((df["Risk"] == "High").sum()),
    )


@router.get("/test-data")
async def generate_test_transactions():
    """Sample transactions and input suggestions for trying the API"""
    zeros = [0.0] * Config.FEATURE_COUNT
    critical = list(zeros)
    critical[0] = 6.0

    test_cases = [
        {"name": "night_card_test", "time": 0, "amount": 1.99, "v_values": zeros},
        {"name": "daytime_purchase", "time": 50000, "amount": 150, "v_values": zeros},
        {"name": "extreme_features", "time": 3600, "amount": 1, "v_values": critical},
        {"name": "large_night_transfer", "time": 7200, "amount": 15000, "v_values": zeros},
    ]

    return {
        "test_transactions": test_cases,
        "time_suggestions": TIME_SUGGESTIONS,
        "amount_suggestions": AMOUNT_SUGGESTIONS,
        "usage": "Use POST /predict with any of these transactions to test the API",
    }


@router.get("/health")
async def health_check(history: PredictionHistory = Depends(get_history)):
    """Health check for the fraud detection service"""
    return {
        "status": "healthy",
        "components": {name.value: classifiers[name] is not None for name in classifiers},
        "history": history.stats(),
        "timestamp": datetime.now().isoformat(),
    }
