from fraud_service.models.decision_tree import DecisionTreeClassifier
from fraud_service.models.records import Prediction, PredictionResult, RiskLevel, TransactionRecord
from fraud_service.models.risk_score import RiskScoreClassifier

__all__ = [
    "DecisionTreeClassifier",
    "Prediction",
    "PredictionResult",
    "RiskLevel",
    "RiskScoreClassifier",
    "TransactionRecord",
]
