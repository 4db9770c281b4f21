import pandas as pd
import numpy as np
import logging
from typing import Iterator, Optional

from fraud_service.config import Config
from fraud_service.features.engineering import FEATURE_NAMES, generate_feature_vector
from fraud_service.models.records import TransactionRecord

logger = logging.getLogger(__name__)


class TransactionGenerator:
    """Generate synthetic transactions for demos and batch scoring"""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def generate_record(self) -> TransactionRecord:
        """Generate a single random transaction"""
        return TransactionRecord(
            time=self._generate_time(),
            amount=self._generate_amount(),
            v_values=tuple(generate_feature_vector(self.rng)),
        )

    def generate_batch(self, n_samples: int) -> pd.DataFrame:
        """
        Generate a batch of random transactions.

        Returns:
            DataFrame with columns Time, Amount, V1..V28
        """
        if n_samples < 0:
            raise ValueError("n_samples must be non-negative")

        logger.info(f"Generating {n_samples} synthetic transactions...")

        rows = []
        for _ in range(n_samples):
            record = self.generate_record()
            rows.append([record.time, record.amount, *record.v_values])

        return pd.DataFrame(rows, columns=["Time", "Amount"] + FEATURE_NAMES)

    def _generate_time(self) -> int:
        return int(self.rng.integers(0, Config.SECONDS_PER_DAY))

    def _generate_amount(self) -> float:
        """Mostly everyday spend, with occasional card-testing and very large amounts"""
        roll = self.rng.random()

        if roll < Config.CARD_TESTING_RATE:
            amount = self.rng.uniform(0.5, 2.0)
        elif roll < Config.CARD_TESTING_RATE + Config.LARGE_PURCHASE_RATE:
            amount = self.rng.uniform(10000, 25000)
        else:
            amount = self.rng.lognormal(mean=4.0, sigma=1.0)

        return round(float(amount), 2)


def records_from_frame(df: pd.DataFrame) -> Iterator[TransactionRecord]:
    """Yield TransactionRecords from a Time/Amount/V1..V28 DataFrame"""
    feature_columns = [name for name in FEATURE_NAMES if name in df.columns]

    for row in df.itertuples(index=False):
        values = row._asdict()
        yield TransactionRecord(
            time=float(values["Time"]),
            amount=float(values["Amount"]),
            v_values=tuple(float(values[name]) for name in feature_columns),
        )
