# rideshare_recon/utilities/__init__.py
from .config_logging import LOGGING, configure_logging
from .converters_scalar import (
    clean_amount,
    clean_date,
    figures_in,
    infer_year,
    split_formula,
    unwrap_formula,
)
from .core_util import collapse_ws, is_null_or_whitespace, open_for_read, read_text
from .errors import (
    MalformedAmount,
    MalformedDate,
    ReconciliationError,
    RowParseFailure,
    UnrecognizedLayout,
)
from .flags import IFlagStore, InMemoryFlagStore, JsonFlagStore

__all__ = [
    "LOGGING",
    "configure_logging",
    "clean_amount",
    "clean_date",
    "figures_in",
    "infer_year",
    "split_formula",
    "unwrap_formula",
    "collapse_ws",
    "is_null_or_whitespace",
    "open_for_read",
    "read_text",
    "ReconciliationError",
    "MalformedAmount",
    "MalformedDate",
    "RowParseFailure",
    "UnrecognizedLayout",
    "IFlagStore",
    "InMemoryFlagStore",
    "JsonFlagStore",
]
