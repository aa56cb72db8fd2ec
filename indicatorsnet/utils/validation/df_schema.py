import pandera as pa
import pandas as pd
from loguru import logger
from pandera.typing import Index
from pandera.errors import SchemaErrors

TOP_N_ERRORS = 5


def _format_cases(cases: list, n_cases: int) -> str:
    cases_str = ", ".join(map(str, cases[:TOP_N_ERRORS]))
    if n_cases > TOP_N_ERRORS:
        cases_str += ", ..."
    return cases_str


def _summarize_errors(cases_df: pd.DataFrame) -> list[str]:
    messages = []
    contexts = {
        "DataFrameSchema": "dataframe-level",
        "DataFrame": "dataframe-level",
        "Index": "index-level",
        "Column": "column-level",
    }
    cases_df = cases_df.assign(level=cases_df["schema_context"].map(contexts).fillna("other"))
    cases_df[["column", "check"]] = cases_df[["column", "check"]].astype(object).fillna("-").astype(str)
    for (level, column, check), group in cases_df.groupby(["level", "column", "check"], sort=True):
        cases = list(group["index"] if level == "column-level" else group["failure_case"])
        where = f' at column "{column}"' if level == "column-level" else ""
        messages.append(f'{len(group)} {level} errors{where} at check "{check}": {_format_cases(cases, len(group))}')
    return messages


def _log_schema_errors(e: SchemaErrors):
    messages = ["Schema validation errors:"]
    messages.extend(_summarize_errors(e.failure_cases))
    logger.error(str.join("\n", messages))


class DfSchema(pa.DataFrameModel):
    """Base class for validating feature tables indexed by feature id.

    Columns not declared by a schema are kept untouched, so arbitrary feature
    properties survive validation.
    """

    idx: Index[str] = pa.Field(unique=True)

    class Config:
        strict = False
        add_missing_columns = True
        coerce = True

    def __new__(cls, *args, **kwargs) -> pd.DataFrame:
        return cls.validate(*args, **kwargs)

    @classmethod
    def _check_instance(cls, df):
        if not isinstance(df, pd.DataFrame):
            raise ValueError("An instance of DataFrame must be provided")

    @classmethod
    def _check_len(cls, df):
        if len(df) == 0:
            raise ValueError("Rows count must be greater than 0")

    @classmethod
    def _check_multi(cls, df):
        if df.index.nlevels > 1:
            raise ValueError("Index must not be multi-leveled")
        if df.columns.nlevels > 1:
            raise ValueError("Columns must not be multi-leveled")

    @classmethod
    def _before_validate(cls, df: pd.DataFrame) -> pd.DataFrame:
        return df

    @classmethod
    def _after_validate(cls, df: pd.DataFrame) -> pd.DataFrame:
        return df

    @classmethod
    def validate(cls, df: pd.DataFrame, allow_empty: bool = False) -> pd.DataFrame:
        """Validate and coerce a DataFrame according to the schema.

        Parameters
        ----------
        df : pandas.DataFrame
            DataFrame to validate. It is never modified.
        allow_empty : bool, default=False
            Whether to allow empty dataframes to pass validation.

        Returns
        -------
        pandas.DataFrame
            Validated copy of the input dataframe.

        Raises
        ------
        ValueError
            If the dataframe fails schema validation or required structure
            checks.
        """

        cls._check_instance(df)
        df = df.copy()
        if not allow_empty:
            cls._check_len(df)
        cls._check_multi(df)
        df.index.name = None

        df = cls._before_validate(df)
        try:
            df = super().to_schema().validate(df, lazy=True)
        except SchemaErrors as e:
            _log_schema_errors(e)
            raise ValueError(
                f"{e.schema.name} validation failed. Please check log and verify data according to schema"
            ) from None

        df = cls._after_validate(df)
        return df
