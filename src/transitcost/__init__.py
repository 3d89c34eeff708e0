"""Transit costs SQL walkthrough library.

This library loads the transit costs dataset together with a country
codes reference table into a single-file database, queries it with
SQL, computes the same results with pandas, and translates SQL into
data-manipulation pipeline code.
"""

from importlib.metadata import PackageNotFoundError, version

from .config import Config, ConfigError, load_config
from .pipeline import (
    RelationStore,
    TransitPipeline,
    lines_by_country,
    normalize_country_codes,
    open_store,
    results_equivalent,
)
from .report import ReportResult, run_report
from .translate import (
    TranslationError,
    TranslationUnsupportedError,
    translate_sql,
)

try:
    __version__ = version("transit-cost-sql")
except PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.0.0"

__all__ = [
    "Config",
    "ConfigError",
    "RelationStore",
    "ReportResult",
    "TransitPipeline",
    "TranslationError",
    "TranslationUnsupportedError",
    "lines_by_country",
    "load_config",
    "normalize_country_codes",
    "open_store",
    "results_equivalent",
    "run_report",
    "translate_sql",
    "__version__",
]
