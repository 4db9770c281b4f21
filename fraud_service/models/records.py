import math
from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fraud_service.config import Config


class Prediction(str, Enum):
    FRAUD = "Fraud"
    NOT_FRAUD = "Not Fraud"


class RiskLevel(str, Enum):
    LOW = "Low"
    HIGH = "High"


class TransactionRecord(BaseModel):
    """
    A single transaction submitted for classification.

    Records are validated on construction so the classifiers can assume
    well-formed input. A feature vector shorter than 28 values is accepted;
    positions past its end read as 0.
    """
    model_config = ConfigDict(frozen=True)

    time: float = Field(ge=0, lt=Config.SECONDS_PER_DAY)
    amount: float = Field(ge=0)
    v_values: Tuple[float, ...] = ()

    @field_validator("time", "amount")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value

    @field_validator("v_values")
    @classmethod
    def _finite_features(cls, values: Tuple[float, ...]) -> Tuple[float, ...]:
        if not all(math.isfinite(v) for v in values):
            raise ValueError("feature values must be finite numbers")
        return values

    def feature(self, index: int) -> float:
        """Return the feature at 0-based `index`, or 0 when it is absent."""
        if 0 <= index < len(self.v_values):
            return self.v_values[index]
        return 0.0


class PredictionResult(BaseModel):
    """Classifier output; created once per call and never changed."""
    model_config = ConfigDict(frozen=True)

    prediction: Prediction
    confidence: float
    risk: RiskLevel
    features: Dict[str, float]
    details: List[str]

    @property
    def is_fraud(self) -> bool:
        return self.prediction == Prediction.FRAUD
