import logging
import math
from typing import Dict, List

from fraud_service.config import Config
from fraud_service.models.records import Prediction, PredictionResult, RiskLevel, TransactionRecord

logger = logging.getLogger(__name__)


class RiskScoreClassifier:
    """
    Weighted risk-score classifier.

    Adds up independent contributions from the time of day, the amount and
    the number of extreme feature values, and calls the transaction fraud
    when the sum exceeds the fraud threshold.
    """

    def __init__(self):
        self.suspicious_times = Config.SUSPICIOUS_TIMES
        self.fraud_threshold = Config.FRAUD_THRESHOLD
        self.high_risk_positions = Config.HIGH_RISK_FEATURE_POSITIONS

    def score(self, record: TransactionRecord) -> Dict[str, float]:
        """Break the risk score down into its weighted components"""
        time_risk = self._time_risk(record.time)
        amount_risk = self._amount_risk(record.amount)
        feature_risk = self._feature_risk(record)

        return {
            "time_risk": time_risk,
            "amount_risk": amount_risk,
            "feature_risk": feature_risk,
            "total_risk": time_risk + amount_risk + feature_risk,
        }

    def classify(self, record: TransactionRecord) -> PredictionResult:
        """
        Classify a transaction from its total risk score.

        Confidence is a whole-number percentage: 50 + risk*50 for fraud,
        (1 - risk)*100 otherwise.
        """
        scores = self.score(record)
        total_risk = scores["total_risk"]
        is_fraud = total_risk > self.fraud_threshold

        if is_fraud:
            confidence = 50 + total_risk * 50
        else:
            confidence = (1 - total_risk) * 100
        confidence = float(math.floor(max(0.0, min(100.0, confidence)) + 0.5))

        result = PredictionResult(
            prediction=Prediction.FRAUD if is_fraud else Prediction.NOT_FRAUD,
            confidence=confidence,
            risk=RiskLevel.LOW if total_risk < self.fraud_threshold else RiskLevel.HIGH,
            features={
                "time": record.time,
                "amount": record.amount,
                "V1": record.feature(0),
                "V12": record.feature(11),
                "V14": record.feature(13),
                "V17": record.feature(16),
            },
            details=self._explain(record, scores),
        )

        logger.debug(f"Risk score: {total_risk:.3f} -> {result.prediction.value} ({result.confidence:.0f}%)")

        return result

    def _time_risk(self, time: float) -> float:
        near_suspicious = any(
            abs(time - t) < Config.SUSPICIOUS_TIME_WINDOW for t in self.suspicious_times
        )
        return Config.TIME_RISK_WEIGHT if near_suspicious else 0.0

    def _amount_risk(self, amount: float) -> float:
        if amount < Config.TINY_AMOUNT:
            return Config.TINY_AMOUNT_WEIGHT
        if amount > Config.HUGE_AMOUNT:
            return Config.HUGE_AMOUNT_WEIGHT
        return 0.0

    def _extreme_count(self, record: TransactionRecord) -> int:
        return sum(1 for v in record.v_values if abs(v) > Config.EXTREME_FEATURE_VALUE)

    def _has_critical_feature(self, record: TransactionRecord) -> bool:
        return any(
            abs(record.feature(position)) > Config.EXTREME_FEATURE_VALUE
            for position in self.high_risk_positions
        )

    def _feature_risk(self, record: TransactionRecord) -> float:
        risk = 0.0
        if record.v_values:
            risk += Config.EXTREME_FEATURE_WEIGHT * self._extreme_count(record) / len(record.v_values)
        if self._has_critical_feature(record):
            risk += Config.HIGH_RISK_FEATURE_BONUS
        return risk

    def _explain(self, record: TransactionRecord, scores: Dict[str, float]) -> List[str]:
        details = []

        if scores["time_risk"] > 0:
            details.append("Transaction time is during high-risk hours")

        if scores["amount_risk"] > 0:
            details.append(
                "Very small transaction amount is suspicious"
                if record.amount < Config.TINY_AMOUNT
                else "Very large transaction amount is suspicious"
            )

        extreme_values = self._extreme_count(record)
        if extreme_values > 0:
            details.append(f"{extreme_values} features have extreme values")

        if self._has_critical_feature(record):
            details.append("Critical fraud indicators detected in high-risk features")

        return details
