import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from fraud_service.config import Config
from fraud_service.features.engineering import feature_index, format_number, format_time
from fraud_service.models.records import Prediction, PredictionResult, RiskLevel, TransactionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeafNode:
    """Terminal node carrying a prediction and its base confidence"""

    prediction: Prediction
    base_confidence: float
    details: Tuple[str, ...] = ()

    def __post_init__(self):
        if not 0 < self.base_confidence <= 1:
            raise ValueError(f"Leaf confidence must be in (0, 1], got {self.base_confidence}")


@dataclass(frozen=True)
class DecisionNode:
    """Internal node testing `feature < threshold`"""

    feature: str  # "time", "amount" or "V1".."V28"
    threshold: float
    left: "TreeNode"
    right: "TreeNode"
    details: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.feature not in ("time", "amount"):
            feature_index(self.feature)
        for child in (self.left, self.right):
            if not isinstance(child, (DecisionNode, LeafNode)):
                raise ValueError(f"Node '{self.feature}' is missing a child")


TreeNode = Union[DecisionNode, LeafNode]


FRAUD_DETECTION_TREE = DecisionNode(
    # Root node - check time first
    feature="time",
    threshold=10800,  # 3 AM
    details=("Evaluating transaction time",),
    left=DecisionNode(
        # Suspicious time (night hours)
        feature="amount",
        threshold=5,
        details=("Transaction during suspicious hours (before 3 AM)", "Evaluating transaction amount"),
        left=DecisionNode(
            feature="V14",
            threshold=0.5,
            details=("Small transaction amount during suspicious hours", "Checking transaction pattern (V14)"),
            left=LeafNode(
                prediction=Prediction.FRAUD,
                base_confidence=0.92,
                details=("Small transaction during suspicious hours with low V14 value",),
            ),
            right=DecisionNode(
                feature="V12",
                threshold=-2,
                details=("Small transaction during suspicious hours with high V14 value", "Checking V12 value"),
                left=LeafNode(
                    prediction=Prediction.FRAUD,
                    base_confidence=0.85,
                    details=("Small transaction during suspicious hours with strongly negative V12 value",),
                ),
                right=LeafNode(
                    prediction=Prediction.NOT_FRAUD,
                    base_confidence=0.75,
                    details=("Small transaction during suspicious hours but normal V12 value",),
                ),
            ),
        ),
        right=DecisionNode(
            feature="amount",
            threshold=10000,
            details=("Transaction during suspicious hours", "Evaluating if amount is very large"),
            left=LeafNode(
                prediction=Prediction.NOT_FRAUD,
                base_confidence=0.82,
                details=("Normal transaction amount during suspicious hours",),
            ),
            right=DecisionNode(
                feature="V17",
                threshold=1.5,
                details=("Large transaction during suspicious hours", "Checking transaction pattern (V17)"),
                left=LeafNode(
                    prediction=Prediction.NOT_FRAUD,
                    base_confidence=0.68,
                    details=("Large transaction during suspicious hours but normal V17 value",),
                ),
                right=LeafNode(
                    prediction=Prediction.FRAUD,
                    base_confidence=0.88,
                    details=("Large transaction during suspicious hours with abnormal V17 value",),
                ),
            ),
        ),
    ),
    right=DecisionNode(
        # Normal time
        feature="amount",
        threshold=2,
        details=("Transaction during normal hours (after 3 AM)", "Evaluating if amount is very small"),
        left=DecisionNode(
            feature="V17",
            threshold=0,
            details=("Very small transaction during normal hours", "Checking transaction pattern (V17)"),
            left=LeafNode(
                prediction=Prediction.FRAUD,
                base_confidence=0.78,
                details=("Very small transaction with negative V17 value",),
            ),
            right=LeafNode(
                prediction=Prediction.NOT_FRAUD,
                base_confidence=0.65,
                details=("Very small transaction with positive V17 value",),
            ),
        ),
        right=DecisionNode(
            feature="amount",
            threshold=15000,
            details=("Normal transaction time", "Evaluating if amount is extremely large"),
            left=LeafNode(
                prediction=Prediction.NOT_FRAUD,
                base_confidence=0.95,
                details=("Normal transaction amount during regular hours",),
            ),
            right=DecisionNode(
                feature="V12",
                threshold=3,
                details=("Very large transaction amount", "Checking transaction pattern (V12)"),
                left=LeafNode(
                    prediction=Prediction.NOT_FRAUD,
                    base_confidence=0.72,
                    details=("Large transaction with normal V12 value",),
                ),
                right=LeafNode(
                    prediction=Prediction.FRAUD,
                    base_confidence=0.82,
                    details=("Large transaction with abnormal V12 value",),
                ),
            ),
        ),
    ),
)


class DecisionTreeClassifier:
    """
    Classifies transactions by walking a fixed binary decision tree.

    The tree is shared read-only data; each call keeps its own trail of
    decision points, so one instance can serve any number of requests.
    """

    def __init__(self, tree: TreeNode = FRAUD_DETECTION_TREE):
        if not isinstance(tree, DecisionNode):
            raise ValueError("Decision tree root must be an internal node")
        self.tree = tree

    def classify(self, record: TransactionRecord) -> PredictionResult:
        """
        Classify a transaction.

        Args:
            record: Validated transaction record

        Returns:
            Prediction with adjusted confidence (percentage, 2 decimals),
            risk label, feature snapshot and the decision trail
        """
        leaf, details = self._traverse(record)
        confidence = self.adjust_confidence(leaf.base_confidence, leaf.prediction, record)

        # Risk follows the prediction alone
        risk = RiskLevel.HIGH if leaf.prediction == Prediction.FRAUD else RiskLevel.LOW

        result = PredictionResult(
            prediction=leaf.prediction,
            confidence=round(confidence * 100, 2),
            risk=risk,
            features={
                "time": record.time,
                "amount": record.amount,
                # Key features used by the tree
                "V12": record.feature(11),
                "V14": record.feature(13),
                "V17": record.feature(16),
            },
            details=details,
        )

        logger.debug(f"Decision tree: {result.prediction.value} ({result.confidence:.2f}%) "
                     f"after {len(details)} steps")

        return result

    def _traverse(self, record: TransactionRecord) -> Tuple[LeafNode, List[str]]:
        """Walk from the root to a leaf, collecting the explanation trail"""
        node = self.tree
        details: List[str] = []

        while isinstance(node, DecisionNode):
            value = self.resolve_feature(node.feature, record)
            details.extend(node.details)
            details.append(self._describe_decision(node, value))

            node = node.left if value < node.threshold else node.right

        details.extend(node.details)
        return node, details

    @staticmethod
    def resolve_feature(feature: str, record: TransactionRecord) -> float:
        """Look up the value a node tests; absent V-features read as 0"""
        if feature == "time":
            return record.time
        if feature == "amount":
            return record.amount
        return record.feature(feature_index(feature))

    @staticmethod
    def _describe_decision(node: DecisionNode, value: float) -> str:
        label = node.feature
        shown = f"{value:.2f}"

        if node.feature == "time":
            label = "Time"
            shown = f"{format_number(value)} ({format_time(value)})"

        op = "<" if value < node.threshold else "≥"
        return f"Decision point: {label} = {shown} {op} {format_number(node.threshold)}"

    @staticmethod
    def adjust_confidence(base_confidence: float, prediction: Prediction,
                          record: TransactionRecord) -> float:
        """
        Nudge a leaf's confidence by how far the transaction sits from the
        main thresholds, then clamp to [0.5, 0.99].
        """
        confidence = base_confidence
        time = record.time
        amount = record.amount
        v14 = abs(record.feature(13))
        v17 = abs(record.feature(16))

        if prediction == Prediction.FRAUD:
            if time < Config.NIGHT_CUTOFF_SECONDS:
                confidence += 0.05 * (1 - time / Config.NIGHT_CUTOFF_SECONDS)
            if amount < Config.SMALL_AMOUNT:
                confidence += 0.07 * (1 - amount / Config.SMALL_AMOUNT)
            if amount > Config.LARGE_AMOUNT:
                confidence += 0.05 * min((amount - Config.LARGE_AMOUNT) / Config.LARGE_AMOUNT_SPAN, 1)
            if v17 > Config.V17_ABNORMAL or v14 > Config.V14_ABNORMAL:
                confidence += 0.03
        else:
            if time >= Config.NIGHT_CUTOFF_SECONDS:
                confidence += 0.02
            if Config.SMALL_AMOUNT <= amount <= Config.LARGE_AMOUNT:
                confidence += 0.03
            if v17 <= Config.V17_ABNORMAL and v14 <= Config.V14_ABNORMAL:
                confidence += 0.04

        return max(Config.MIN_CONFIDENCE, min(Config.MAX_CONFIDENCE, confidence))

    def describe(self) -> Dict[str, Any]:
        """Return the tree as nested plain data for rendering"""
        return _describe_node(self.tree)


def _describe_node(node: TreeNode) -> Dict[str, Any]:
    if isinstance(node, LeafNode):
        return {
            "prediction": node.prediction.value,
            "confidence": node.base_confidence,
            "details": list(node.details),
        }

    return {
        "feature": node.feature,
        "threshold": node.threshold,
        "details": list(node.details),
        "left": _describe_node(node.left),
        "right": _describe_node(node.right),
    }
