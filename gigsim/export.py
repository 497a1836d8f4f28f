"""
Tabular export of the evaluation history.

One row per history entry: the timestamp, the nine parameters, and the
headline outputs. Currency-like values carry 2 decimals, probabilities
and the Gini coefficient 4.
"""
import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .config import PARAMETER_NAMES
from .history import SnapshotHistory

_LOG = logging.getLogger(__name__)

# column -> (snapshot attribute, decimals)
_OUTPUT_COLUMNS = {
    "D": ("demand", 2),
    "P": ("platform_profit", 2),
    "Ur": ("rider_utility", 2),
    "SW": ("social_welfare", 2),
    "CS": ("consumer_surplus", 2),
    "market_efficiency": ("market_efficiency", 2),
    "gini_coefficient": ("gini_coefficient", 4),
    "sustainability_index": ("sustainability_index", 2),
    "stress_probability": ("stress_probability", 4),
}

EXPORT_COLUMNS = ["timestamp", *PARAMETER_NAMES, *_OUTPUT_COLUMNS]


def history_to_frame(history: SnapshotHistory) -> pd.DataFrame:
    """History as a DataFrame of display-ready strings, oldest row first."""
    rows = []
    for entry in history:
        row = {"timestamp": entry.timestamp.isoformat()}
        row.update(entry.params.as_dict())
        for column, (attr, decimals) in _OUTPUT_COLUMNS.items():
            row[column] = f"{getattr(entry.snapshot, attr):.{decimals}f}"
        rows.append(row)
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_csv(history: SnapshotHistory, path: Optional[Union[str, Path]] = None) -> str:
    csv_text = history_to_frame(history).to_csv(index=False)
    if path is not None:
        Path(path).write_text(csv_text, encoding="utf-8")
        _LOG.info("export ▸ wrote %s  (%d rows)", path, len(history))
    return csv_text
