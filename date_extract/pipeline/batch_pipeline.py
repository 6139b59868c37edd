"""
Batch date extraction over tabular text.

Ingests a CSV (or an in-memory DataFrame), runs the extractor on one text
column, and returns the frame with the extracted dates attached:

1. Load CSV
2. Check the text column exists
3. Extract dates row by row (sequentially, in row order)
4. Return DataFrame plus processing metadata
"""

import logging
import time
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd

from date_extract.config import Config
from date_extract.extractor import DateExtractor
from date_extract.validation.options_validator import OutputFormat, ReturnsMode

logger = logging.getLogger(__name__)


class BatchExtractionPipeline:
    """
    Extracts dates from a text column of a DataFrame.

    Results are stored as ISO-8601 strings so the frame can be written back
    to CSV; list modes join their dates with Config.BATCH_LIST_SEPARATOR.
    """

    def __init__(self, extractor: Optional[DateExtractor] = None, **options):
        """
        Initialize pipeline.

        Args:
            extractor: Extractor to use (built from options when omitted)
            **options: DateExtractor options, ignored when extractor is given
        """
        self.extractor = extractor or DateExtractor(**options)
        self.result_column = Config.BATCH_RESULT_COLUMN
        self.count_column = Config.BATCH_COUNT_COLUMN
        self.separator = Config.BATCH_LIST_SEPARATOR

        logger.info("Batch pipeline initialized")

    def _extract_cell(self, value) -> Tuple[Optional[str], int]:
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return (None, 0)

        dates = self.extractor.extract_all(str(value), output=OutputFormat.ISO)
        if not dates:
            return (None, 0)
        if self.extractor.options.returns.is_list:
            return (self.separator.join(dates), len(dates))
        return (dates[0], 1)

    def process_text_column(self, df: pd.DataFrame, text_column: str) -> Tuple[pd.DataFrame, Dict]:
        """
        Extract dates from one column of a DataFrame.

        Args:
            df: Input frame (not modified)
            text_column: Name of the column holding free text

        Returns:
            Tuple of (result_dataframe, metadata_dict)

        Raises:
            ValueError: if the column is missing
        """
        start_time = time.time()

        if text_column not in df.columns:
            raise ValueError(f"Missing required column: {text_column}")

        result_df = df.copy()
        results = result_df[text_column].apply(self._extract_cell)
        result_df[self.result_column] = results.map(lambda r: r[0])
        result_df[self.count_column] = results.map(lambda r: r[1]).astype(int)

        metadata = {
            'total_rows': len(result_df),
            'rows_with_dates': int((result_df[self.count_column] > 0).sum()),
            'total_dates': int(result_df[self.count_column].sum()),
            'returns': self.extractor.options.returns.value,
            'processing_time_seconds': time.time() - start_time,
        }

        logger.info(f"Extracted {metadata['total_dates']} dates from "
                    f"{metadata['rows_with_dates']}/{metadata['total_rows']} rows "
                    f"in {metadata['processing_time_seconds']:.2f}s")

        return result_df, metadata

    def process_csv(self, csv_path: Path, text_column: str) -> Tuple[pd.DataFrame, Dict]:
        """
        Process a CSV file.

        Args:
            csv_path: Path to CSV file
            text_column: Name of the column holding free text

        Returns:
            Tuple of (result_dataframe, metadata_dict)
        """
        logger.info(f"Processing CSV: {csv_path}")

        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_path}")

        try:
            df = pd.read_csv(csv_path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise ValueError(f"Failed to read CSV file: {e}") from e

        logger.info(f"Loaded {len(df)} rows from CSV")

        result_df, metadata = self.process_text_column(df, text_column)
        metadata['input_file'] = str(csv_path)
        return result_df, metadata


# Helper function for CLI
def extract_dates_from_csv(
    csv_path: str,
    text_column: str,
    returns: str = ReturnsMode.ALL.value,
    **options
) -> Tuple[pd.DataFrame, Dict]:
    """
    Helper function to process a CSV file.

    Args:
        csv_path: Path to CSV file (string)
        text_column: Column to scan
        returns: Returns mode, all by default
        **options: Other DateExtractor options

    Returns:
        Tuple of (result_dataframe, metadata)
    """
    pipeline = BatchExtractionPipeline(returns=returns, **options)
    return pipeline.process_csv(Path(csv_path), text_column)
