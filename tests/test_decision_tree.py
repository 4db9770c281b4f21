import pytest

from fraud_service.models.decision_tree import (
    FRAUD_DETECTION_TREE,
    DecisionNode,
    DecisionTreeClassifier,
    LeafNode,
)
from fraud_service.models.records import Prediction, RiskLevel, TransactionRecord


@pytest.fixture
def classifier():
    return DecisionTreeClassifier()


def test_small_amount_at_midnight_is_fraud(classifier, make_record):
    result = classifier.classify(make_record(time=0, amount=1.99))

    assert result.prediction == Prediction.FRAUD
    assert result.risk == RiskLevel.HIGH
    assert result.details[:2] == ["Evaluating transaction time", "Decision point: Time = 0 (12:00 AM) < 10800"]
    assert "Decision point: amount = 1.99 < 5" in result.details
    assert "Decision point: V14 = 0.00 < 0.5" in result.details
    assert result.details[-1] == "Small transaction during suspicious hours with low V14 value"
    # 0.92 + 0.05 + 0.07 * (1 - 1.99 / 5) exceeds the cap
    assert result.confidence == 99.0


def test_daytime_purchase_is_not_fraud(classifier, make_record):
    result = classifier.classify(make_record(time=50000, amount=150))

    assert result.prediction == Prediction.NOT_FRAUD
    assert result.risk == RiskLevel.LOW
    assert result.details[-1] == "Normal transaction amount during regular hours"
    assert "Decision point: Time = 50000 (1:53 PM) ≥ 10800" in result.details
    assert "Decision point: amount = 150.00 < 15000" in result.details
    assert result.confidence == 99.0


def test_base_confidence_of_daytime_leaf(make_record):
    record = make_record(time=50000, amount=150)
    adjusted = DecisionTreeClassifier.adjust_confidence(0.95, Prediction.NOT_FRAUD, record)
    assert adjusted == pytest.approx(0.99)


def test_large_night_transaction_with_abnormal_v17(classifier, make_record):
    result = classifier.classify(make_record(time=7200, amount=12500, V17=2.5))

    assert result.prediction == Prediction.FRAUD
    # 0.88 + 0.05 * (1 - 7200/10800) + 0.05 * 0.5 + 0.03
    expected = 0.88 + 0.05 * (1 - 7200 / 10800) + 0.025 + 0.03
    assert result.confidence == round(expected * 100, 2)


def test_large_night_transaction_with_normal_v17(classifier, make_record):
    result = classifier.classify(make_record(time=7200, amount=12500, V17=1.0))

    assert result.prediction == Prediction.NOT_FRAUD
    # Only the quiet-feature bonus applies: 0.68 + 0.04
    assert result.confidence == 72.0


def test_tiny_daytime_amount_follows_v17_sign(classifier, make_record):
    fraud = classifier.classify(make_record(time=40000, amount=1, V17=-0.3))
    legit = classifier.classify(make_record(time=40000, amount=1, V17=0.3))

    assert fraud.prediction == Prediction.FRAUD
    assert fraud.confidence == round((0.78 + 0.07 * (1 - 1 / 5)) * 100, 2)
    assert legit.prediction == Prediction.NOT_FRAUD
    assert legit.confidence == 71.0


def test_very_large_daytime_amount_checks_v12(classifier, make_record):
    result = classifier.classify(make_record(time=60000, amount=20000, V12=3.5))

    assert result.prediction == Prediction.FRAUD
    assert "Decision point: V12 = 3.50 ≥ 3" in result.details
    assert result.confidence == round((0.82 + 0.05) * 100, 2)


def test_high_v14_at_night_reaches_v12_check(classifier, make_record):
    result = classifier.classify(make_record(time=1800, amount=3, V14=1.0, V12=-2.5))

    assert result.prediction == Prediction.FRAUD
    assert "Checking V12 value" in result.details


def test_short_feature_vector_reads_missing_as_zero(classifier):
    record = TransactionRecord(time=50000, amount=150, v_values=(0.1, 0.2))
    result = classifier.classify(record)

    assert result.features == {"time": 50000, "amount": 150, "V12": 0.0, "V14": 0.0, "V17": 0.0}


def test_classification_is_deterministic(classifier, make_record):
    record = make_record(time=9000, amount=4.5, V14=0.7, V12=-1.2)
    first = classifier.classify(record)
    second = classifier.classify(record)

    assert first == second


@pytest.mark.parametrize("time", [0, 5000, 10799, 10800, 43200, 86399])
@pytest.mark.parametrize("amount", [0, 1.5, 4.99, 150, 10000, 14999, 50000])
def test_confidence_is_clamped(classifier, make_record, time, amount):
    for v in (-3.0, 0.0, 3.0):
        result = classifier.classify(make_record(time=time, amount=amount, V12=v, V14=v, V17=v))
        assert 50 <= result.confidence <= 99


def test_describe_mirrors_tree(classifier):
    tree = classifier.describe()

    assert tree["feature"] == "time"
    assert tree["threshold"] == 10800
    assert tree["left"]["left"]["left"] == {
        "prediction": "Fraud",
        "confidence": 0.92,
        "details": ["Small transaction during suspicious hours with low V14 value"],
    }


def test_tree_rejects_unknown_feature():
    leaf = LeafNode(prediction=Prediction.FRAUD, base_confidence=0.9)
    with pytest.raises(ValueError):
        DecisionNode(feature="V29", threshold=0, left=leaf, right=leaf)


def test_tree_rejects_missing_child():
    leaf = LeafNode(prediction=Prediction.FRAUD, base_confidence=0.9)
    with pytest.raises(ValueError):
        DecisionNode(feature="amount", threshold=0, left=leaf, right=None)


def test_leaf_rejects_bad_confidence():
    with pytest.raises(ValueError):
        LeafNode(prediction=Prediction.NOT_FRAUD, base_confidence=0)


def test_root_must_be_internal():
    with pytest.raises(ValueError):
        DecisionTreeClassifier(LeafNode(prediction=Prediction.FRAUD, base_confidence=0.9))


def test_custom_tree(make_record):
    tree = DecisionNode(
        feature="V1",
        threshold=0,
        left=LeafNode(prediction=Prediction.FRAUD, base_confidence=0.6, details=("low",)),
        right=LeafNode(prediction=Prediction.NOT_FRAUD, base_confidence=0.6, details=("high",)),
    )
    result = DecisionTreeClassifier(tree).classify(make_record(V1=-1.0))

    assert result.details == ["Decision point: V1 = -1.00 < 0", "low"]
    assert FRAUD_DETECTION_TREE.feature == "time"
