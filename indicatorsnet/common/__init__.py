from .errors import (
    IndicatorsNetError,
    LocalComputeGap,
    ParameterMissing,
    ParameterInvalid,
    DatasetNotFound,
    AggregationIncomplete,
    CollaboratorFailure,
    NotSupported,
)
from .values import (
    NO_DATA,
    AGGREGATION_WEIGHT_COLUMN,
    DateLike,
    is_no_data,
    parse_date,
    date_key,
    is_date_key,
    date_columns,
    subtract_period,
    to_feature_id,
    to_numeric_values,
    get_indicator_values,
    set_indicator_values,
    get_aggregation_weights,
    set_aggregation_weights,
)
