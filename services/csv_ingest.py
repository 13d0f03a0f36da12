# ============================================================================
# CHOKE POINT CSV INGEST
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Service - CSV -> upsert rows
# PURPOSE: Parse an uploaded ChokePoint CSV into rows keyed by macAddress
# CREATED: 08 OCT 2026
# ============================================================================
"""
ChokePoint CSV ingest.

Expected header row: `name,macAddress` (extra columns are ignored, values
are trimmed). The uploaded temp file is removed once read, whether parsing
succeeded or not.
"""

import os
from typing import Dict, List

import pandas as pd

from core.errors import ValidationFailureError
from core.logging import get_logger

logger = get_logger(__name__)

CHOKE_POINT_COLUMNS = ("name", "macAddress")


def parse_choke_point_csv(path: str) -> List[Dict[str, str]]:
    """
    Read a ChokePoint CSV into row dicts.

    Args:
        path: Temporary upload path; deleted before returning

    Returns:
        [{"name": ..., "macAddress": ...}, ...] in file order

    Raises:
        ValidationFailureError: unreadable file or missing columns
    """
    try:
        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise ValidationFailureError(f"Could not read CSV file: {e}") from e

        df.columns = [str(c).strip() for c in df.columns]
        missing = [c for c in CHOKE_POINT_COLUMNS if c not in df.columns]
        if missing:
            raise ValidationFailureError(
                f"CSV is missing column(s): {', '.join(missing)}. "
                f"Available columns: {list(df.columns)[:20]}"
            )

        rows = [
            {column: str(record[column]).strip() for column in CHOKE_POINT_COLUMNS}
            for record in df[list(CHOKE_POINT_COLUMNS)].to_dict(orient="records")
        ]
        logger.info(f"Parsed {len(rows)} chokepoint row(s) from CSV")
        return rows
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


__all__ = ["parse_choke_point_csv", "CHOKE_POINT_COLUMNS"]
