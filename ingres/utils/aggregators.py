"""
Data aggregation utility functions.
"""
import pandas as pd
from typing import Any, Dict, List, Literal


def aggregate_by_view_mode(
    points: List[Dict[str, Any]],
    view_mode: Literal["raw", "yearly"] = "raw"
) -> List[Dict[str, Any]]:
    """
    Aggregate historical points by view mode.

    ``raw`` returns the points untouched. ``yearly`` averages all points
    sharing (year, parameterType, unit), so monthly readings collapse into
    one annual figure; the output keeps the raw ordering (year desc).

    Args:
        points: Dicts with year, month, parameterType, value and unit keys
        view_mode: raw or yearly

    Returns:
        List of points (yearly points carry ``month: None`` and a ``readings`` count)
    """
    if view_mode == "raw" or not points:
        return points

    df = pd.DataFrame(points)
    group_cols = ["year", "parameterType", "unit"]

    agg_df = df.groupby(group_cols, sort=False).agg(
        value=("value", "mean"),
        readings=("value", "size"),
    ).reset_index()

    agg_df = agg_df.sort_values(
        ["year", "parameterType"], ascending=[False, True], kind="mergesort"
    )
    agg_df["value"] = agg_df["value"].round(3)

    return [
        {
            "year": int(row.year),
            "month": None,
            "parameterType": row.parameterType,
            "value": float(row.value),
            "unit": row.unit,
            "readings": int(row.readings),
        }
        for row in agg_df.itertuples(index=False)
    ]


def calculate_growth_rate(current_value: float, previous_value: float) -> float:
    """
    Calculate percentage growth rate.

    Args:
        current_value: Current period value
        previous_value: Previous period value

    Returns:
        Growth rate as percentage
    """
    if previous_value == 0:
        return 100.0 if current_value > 0 else 0.0

    return round(((current_value - previous_value) / previous_value) * 100, 2)
