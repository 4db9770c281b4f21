"""CSV export of prediction history."""

import io
import logging
from typing import Iterable, List

import pandas as pd

from fraud_service.features.engineering import FEATURE_NAMES, format_number
from fraud_service.history.store import HistoryEntry
from fraud_service.models.records import PredictionResult

logger = logging.getLogger(__name__)

FULL_COLUMNS = ["Time", "Amount"] + FEATURE_NAMES + ["Prediction", "Confidence", "Timestamp"]
DECISION_TREE_COLUMNS = ["Time", "Amount", "V12", "V14", "V17", "Prediction", "Confidence",
                         "Decision Path", "Timestamp"]


def _full_row(entry: HistoryEntry) -> List[str]:
    record = entry.record
    features = [f"{record.feature(i):.8f}" for i in range(len(FEATURE_NAMES))]
    return [
        format_number(record.time),
        format_number(record.amount),
        *features,
        entry.result.prediction.value,
        f"{entry.result.confidence:.2f}",
        entry.timestamp,
    ]


def _decision_tree_row(entry: HistoryEntry) -> List[str]:
    record = entry.record
    return [
        format_number(record.time),
        format_number(record.amount),
        f"{record.feature(11):.6f}",
        f"{record.feature(13):.6f}",
        f"{record.feature(16):.6f}",
        entry.result.prediction.value,
        f"{entry.result.confidence:.2f}",
        "; ".join(entry.result.details),
        entry.timestamp,
    ]


def export_history(entries: Iterable[HistoryEntry], full_features: bool = True) -> str:
    """
    Render history entries as CSV text.

    Args:
        entries: History entries, exported in the given order
        full_features: All 28 features when True, otherwise the decision-tree
            subset (V12, V14, V17) plus the decision path

    Returns:
        CSV text with a header row; confidence is a bare number without '%'
    """
    if full_features:
        columns, make_row = FULL_COLUMNS, _full_row
    else:
        columns, make_row = DECISION_TREE_COLUMNS, _decision_tree_row

    rows = [make_row(entry) for entry in entries]
    df = pd.DataFrame(rows, columns=columns)

    logger.info(f"Exporting {len(df)} predictions ({'full' if full_features else 'decision tree'} columns)")

    return df.to_csv(index=False, lineterminator="\n")


def read_export(text: str) -> pd.DataFrame:
    """Parse CSV text produced by `export_history`"""
    return pd.read_csv(io.StringIO(text), keep_default_na=False)


def summary_line(result: PredictionResult) -> str:
    """Short human-readable summary, e.g. 'Fraud (87.50%)'"""
    return f"{result.prediction.value} ({result.confidence:.2f}%)"
