"""
Central configuration for Date Extract.

This module contains the library-wide defaults, logging settings, and
resolver settings. All other modules import configuration from here to
maintain consistency.
"""

import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _split_env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    """Library defaults and constants"""

    # ==========================================
    # Project Paths
    # ==========================================
    PROJECT_ROOT = Path(__file__).parent.parent
    PACKAGE_DIR = PROJECT_ROOT / "date_extract"
    TESTS_DIR = PROJECT_ROOT / "tests"

    # ==========================================
    # Extraction Defaults
    # ==========================================
    # Per-call arguments override instance defaults, which override these
    DEFAULT_RETURNS = os.getenv("DATE_EXTRACT_RETURNS", "first")
    DEFAULT_PREFERS = os.getenv("DATE_EXTRACT_PREFERS", "nearest")
    DEFAULT_TIME_ZONE = os.getenv("DATE_EXTRACT_TIME_ZONE", "floating")
    DEFAULT_OUTPUT = os.getenv("DATE_EXTRACT_OUTPUT", "datetime")

    # Marker for zone-agnostic (naive) timestamps
    FLOATING_TIME_ZONE = "floating"

    # ==========================================
    # Resolver Settings
    # ==========================================
    # Only English surface forms are recognized by the grammar
    RESOLVER_LANGUAGES: List[str] = _split_env_list("DATE_EXTRACT_LANGUAGES", "en")

    # Month/day order handed to dateparser for NN-NN-NN candidates
    NUMERIC_DATE_ORDER = os.getenv("DATE_EXTRACT_DATE_ORDER", "MDY")

    # ==========================================
    # Batch Settings
    # ==========================================
    BATCH_RESULT_COLUMN = "extracted_dates"
    BATCH_COUNT_COLUMN = "dates_found"
    BATCH_LIST_SEPARATOR = ";"

    # ==========================================
    # Logging Configuration
    # ==========================================
    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")  # DEBUG, INFO, WARNING, ERROR
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    # ==========================================
    # Class Methods
    # ==========================================
    @classmethod
    def is_floating(cls, time_zone: str) -> bool:
        """
        Check if a time zone value means "no fixed offset".

        Returns:
            bool: True for the floating marker or an empty value
        """
        return not time_zone or str(time_zone).strip().lower() == cls.FLOATING_TIME_ZONE

    @classmethod
    def print_config_summary(cls) -> None:
        """Print configuration summary for debugging"""
        print("=" * 60)
        print("Date Extract - Configuration Summary")
        print("=" * 60)
        print(f"Returns:              {cls.DEFAULT_RETURNS}")
        print(f"Prefers:              {cls.DEFAULT_PREFERS}")
        print(f"Time Zone:            {cls.DEFAULT_TIME_ZONE}")
        print(f"Output:               {cls.DEFAULT_OUTPUT}")
        print(f"Languages:            {', '.join(cls.RESOLVER_LANGUAGES)}")
        print(f"Numeric Date Order:   {cls.NUMERIC_DATE_ORDER}")
        print(f"Log Level:            {cls.LOG_LEVEL}")
        print("=" * 60)
