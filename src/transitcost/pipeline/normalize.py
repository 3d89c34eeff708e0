"""Module to normalize the country codes of the transit costs table."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

import pandas as pd

COUNTRY_CODE_ALIASES: Final[Mapping[str, str]] = MappingProxyType({"UK": "GB"})
"""Non-standard codes used by the transit costs dataset and their ISO code."""


def normalize_country_codes(
    frame: pd.DataFrame,
    *,
    column: str = "country_code",
    aliases: Mapping[str, str] = COUNTRY_CODE_ALIASES,
) -> pd.DataFrame:
    """
    Replace non-standard country codes with the standard ones.

    The input frame is not modified. Values that are not aliases
    (including missing values) are left unchanged. Applying this
    function to its own output returns an equal frame.

    Arguments:
        frame: the frame to normalize.
        column: name of the column containing the country code.
        aliases: mapping from non-standard to standard codes.

    Raises:
        ValueError if an alias maps to another alias, since that
        would make the result depend on how many times we apply it.
    """
    chained = sorted(target for target in aliases.values() if target in aliases)
    if chained:
        raise ValueError(f"alias targets must not be aliases themselves: {chained}")
    result = frame.copy()
    result[column] = result[column].replace(dict(aliases))
    return result


def unmatched_country_codes(
    transit: pd.DataFrame,
    codes: pd.DataFrame,
    *,
    column: str = "country_code",
) -> list[str]:
    """
    Return the sorted country codes of `transit` missing from `codes.iso2c`.

    An inner join silently drops the corresponding rows, so this is
    only useful to report about data quality.
    """
    known = set(codes["iso2c"].dropna())
    present = set(transit[column].dropna())
    return sorted(present - known)
