from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Optional

from fraud_service.config import Config


class ModelName(str, Enum):
    STANDARD = "standard"
    DECISION_TREE = "decision_tree"


class TransactionRequest(BaseModel):
    """Transaction data model for API requests"""
    model_config = ConfigDict(allow_inf_nan=False)

    time: float = Field(ge=0, lt=Config.SECONDS_PER_DAY)  # seconds since midnight
    amount: float = Field(ge=0)
    v_values: Optional[List[float]] = None  # generated when omitted
    model: ModelName = ModelName.STANDARD


class PredictionResponse(BaseModel):
    """Fraud prediction response model"""
    id: str
    timestamp: str
    model: ModelName
    prediction: str
    confidence: float
    risk: str
    features: Dict[str, float]
    details: List[str]
    summary: str


class HistoryItem(PredictionResponse):
    """Stored prediction with the transaction it was made for"""
    time: float
    amount: float
    v_values: List[float]


class BatchRequest(BaseModel):
    """Request to score a batch of generated transactions"""
    n_samples: int = Field(default=100, ge=1, le=Config.MAX_BATCH_SIZE)
    model: ModelName = ModelName.STANDARD
    seed: Optional[int] = None


class BatchSummary(BaseModel):
    """Aggregate results of a batch run"""
    model: ModelName
    n_samples: int
    fraud_count: int
    fraud_rate: float
    avg_confidence: float
    high_risk_count: int
