"""
Access to indicator time series values, NoData and aggregation weights of spatial unit features.

Indicator values for a date are stored in a column named ``<prefix><YYYY-MM-DD>``
(``DATE_2018-01-01`` with the default prefix). A cell holds either a number, the
:data:`NO_DATA` sentinel (value is not computable) or null (value is absent).
"""
import re
import datetime
import numpy as np
import pandas as pd
from loguru import logger
from ..config import engine_config

NO_DATA = "NoData"
"""Sentinel for a value that cannot be computed. Distinct from 0, NaN and null."""

AGGREGATION_WEIGHT_COLUMN = "aggregation_weight"
DEFAULT_AGGREGATION_WEIGHT = 1.0

DATE_REGEX = r"^\d{4}-\d{2}-\d{2}$"
DATE_FORMAT = "%Y-%m-%d"

DateLike = str | datetime.date | datetime.datetime | pd.Timestamp


def is_no_data(value) -> bool:
    return isinstance(value, str) and value == NO_DATA


def parse_date(date: DateLike) -> datetime.date:
    """Parse a target date.

    Parameters
    ----------
    date : str or datetime.date or datetime.datetime or pandas.Timestamp
        Date as ``YYYY-MM-DD`` string (optionally with the date prefix) or a
        date-like object.

    Returns
    -------
    datetime.date
        Parsed date.

    Raises
    ------
    ValueError
        If the string does not follow the ``YYYY-MM-DD`` pattern.
    """

    if isinstance(date, datetime.datetime):
        return date.date()
    if isinstance(date, datetime.date):
        return date
    if isinstance(date, str):
        prefix = engine_config.date_prefix
        if date.startswith(prefix):
            date = date[len(prefix) :]
        if re.match(DATE_REGEX, date):
            try:
                return datetime.datetime.strptime(date, DATE_FORMAT).date()
            except ValueError:
                pass
        raise ValueError(f"Date must follow the YYYY-MM-DD pattern, got {date!r}")
    raise ValueError(f"Unsupported date type: {type(date).__name__}")


def date_key(date: DateLike) -> str:
    """Property name carrying indicator values of a date, e.g. ``DATE_2018-01-01``."""
    return engine_config.date_prefix + parse_date(date).isoformat()


def is_date_key(column) -> bool:
    prefix = engine_config.date_prefix
    if not isinstance(column, str) or not column.startswith(prefix):
        return False
    return re.match(DATE_REGEX, column[len(prefix) :]) is not None


def date_columns(df: pd.DataFrame) -> list[str]:
    """Names of the columns carrying indicator values, in frame order."""
    return [column for column in df.columns if is_date_key(column)]


def subtract_period(date: DateLike, years: int = 0, months: int = 0, days: int = 0) -> str:
    """Shift a date back in time.

    Month ends are clamped, so ``2020-02-29`` minus one year is ``2019-02-28``.

    Returns
    -------
    str
        Shifted date in ``YYYY-MM-DD`` format.
    """

    timestamp = pd.Timestamp(parse_date(date)) - pd.DateOffset(years=years, months=months, days=days)
    return timestamp.date().isoformat()


def to_feature_id(value) -> str:
    """Canonical string id of a feature.

    Integral floats lose their fraction (``1.0 -> "1"``), anything else is
    converted with ``str`` and stripped.

    Raises
    ------
    ValueError
        If *value* is null.
    """

    if value is None or (np.isscalar(value) and pd.isna(value)):
        raise ValueError("Feature id must not be null")
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        value = int(value)
    return str(value).strip()


def to_numeric_values(series: pd.Series) -> pd.Series:
    """Numeric view of indicator values: NoData, absent and non-finite values become NaN."""
    values = series.where(series.map(lambda v: not is_no_data(v)))
    values = pd.to_numeric(values, errors="coerce").astype(float)
    return values.where(np.isfinite(values))


def get_indicator_values(gdf: pd.DataFrame, date: DateLike) -> pd.Series:
    """Numeric indicator values of every feature for *date*.

    Parameters
    ----------
    gdf : pandas.DataFrame
        Features indexed by id.
    date : DateLike
        Target date or date key.

    Returns
    -------
    pandas.Series
        Float values indexed like *gdf*; NaN where the value is NoData or absent.
    """

    key = date_key(date)
    if key not in gdf.columns:
        logger.warning(f"Features do not contain values for {key}. They are treated as missing")
        return pd.Series(np.nan, index=gdf.index, dtype=float, name=key)
    return to_numeric_values(gdf[key]).rename(key)


def set_indicator_values(gdf: pd.DataFrame, date: DateLike, values) -> pd.DataFrame:
    """Write indicator values of *date* to every feature.

    Values missing for a feature, NaN or infinite values are stored as
    :data:`NO_DATA`. The frame is modified in place and returned.
    """

    key = date_key(date)
    if isinstance(values, pd.Series):
        values = values.reindex(gdf.index)
    else:
        values = pd.Series(values, index=gdf.index)
    values = to_numeric_values(values)
    gdf[key] = values.astype(object).where(values.notna(), NO_DATA)
    return gdf


def get_aggregation_weights(gdf: pd.DataFrame) -> pd.Series:
    """Aggregation weight of every feature: its own weight if present, else 1."""
    if AGGREGATION_WEIGHT_COLUMN not in gdf.columns:
        return pd.Series(DEFAULT_AGGREGATION_WEIGHT, index=gdf.index, dtype=float)
    weights = pd.to_numeric(gdf[AGGREGATION_WEIGHT_COLUMN], errors="coerce").astype(float)
    return weights.fillna(DEFAULT_AGGREGATION_WEIGHT)


def set_aggregation_weights(gdf: pd.DataFrame, weights) -> pd.DataFrame:
    """Write aggregation weights, modifying *gdf* in place.

    Null, zero and non-finite weights fall back to the default weight of 1.

    Raises
    ------
    ValueError
        If any weight is negative.
    """

    if isinstance(weights, pd.Series):
        weights = weights.reindex(gdf.index)
    else:
        weights = pd.Series(weights, index=gdf.index)
    weights = pd.to_numeric(weights, errors="coerce").astype(float)
    if (weights < 0).any():
        raise ValueError("Aggregation weights must be non-negative")
    valid = np.isfinite(weights) & (weights > 0)
    gdf[AGGREGATION_WEIGHT_COLUMN] = weights.where(valid, DEFAULT_AGGREGATION_WEIGHT)
    return gdf

