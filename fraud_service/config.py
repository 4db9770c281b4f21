import os


class Config:
    """Configuration settings for the fraud detection demo service"""

    # API Settings
    API_TITLE = "Fraud Detection Demo API"
    API_DESCRIPTION = "Rule-based transaction fraud classification (decision tree and risk score)"
    API_VERSION = "1.0.0"
    API_HOST = os.getenv("FRAUD_API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("FRAUD_API_PORT", "8001"))

    # Transaction domain
    SECONDS_PER_DAY = 86400
    FEATURE_COUNT = 28

    # Decision tree confidence adjustment
    NIGHT_CUTOFF_SECONDS = 10800  # 3 AM
    SMALL_AMOUNT = 5
    LARGE_AMOUNT = 10000
    LARGE_AMOUNT_SPAN = 5000
    V17_ABNORMAL = 2
    V14_ABNORMAL = 1.5
    MIN_CONFIDENCE = 0.5
    MAX_CONFIDENCE = 0.99

    # Risk score classifier
    SUSPICIOUS_TIMES = (0, 3600, 9000, 21600)  # Midnight, 1 AM, 2:30 AM, 6 AM
    SUSPICIOUS_TIME_WINDOW = 3600
    TIME_RISK_WEIGHT = 0.3
    TINY_AMOUNT = 2
    TINY_AMOUNT_WEIGHT = 0.25
    HUGE_AMOUNT = 10000
    HUGE_AMOUNT_WEIGHT = 0.35
    EXTREME_FEATURE_VALUE = 5
    EXTREME_FEATURE_WEIGHT = 0.4
    HIGH_RISK_FEATURE_POSITIONS = (12, 17, 14)
    HIGH_RISK_FEATURE_BONUS = 0.2
    FRAUD_THRESHOLD = 0.5

    # Data Generation
    SAMPLES_PER_FEATURE = 6
    FEATURE_DECIMALS = 8
    CARD_TESTING_RATE = 0.05
    LARGE_PURCHASE_RATE = 0.03
    MAX_BATCH_SIZE = 10000

    # Prediction history
    MAX_HISTORY_ENTRIES = int(os.getenv("FRAUD_MAX_HISTORY", "100"))

    # Logging
    LOG_LEVEL = os.getenv("FRAUD_LOG_LEVEL", "INFO")
