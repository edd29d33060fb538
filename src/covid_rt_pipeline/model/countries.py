"""Translation of free-text country names to ISO3 codes."""
import functools
from typing import Iterable, Optional

from loguru import logger
import pandas as pd
import pycountry

# Spellings used by the case data source that the ISO 3166 names and
# common names do not cover.
COUNTRY_ALIASES = {
    'South Korea': 'KOR',
    'Korea, South': 'KOR',
    'Turkey': 'TUR',
    'Czech Republic': 'CZE',
    'Russia': 'RUS',
    'Cape Verde': 'CPV',
    'Democratic Republic of Congo': 'COD',
    'Congo': 'COG',
    "Cote d'Ivoire": 'CIV',
    'Timor': 'TLS',
    'Micronesia (country)': 'FSM',
    'Vatican': 'VAT',
    'Brunei': 'BRN',
    'Laos': 'LAO',
    'Vietnam': 'VNM',
    'Palestine': 'PSE',
}


@functools.lru_cache(maxsize=None)
def to_iso3(name: str) -> Optional[str]:
    """Translates a country name to its ISO3 code.

    Returns ``None`` for names that are not countries (regions, income
    groups, the world total) or that the lookup does not know.

    """
    if not isinstance(name, str) or not name.strip():
        return None
    name = name.strip()
    if name in COUNTRY_ALIASES:
        return COUNTRY_ALIASES[name]
    try:
        return pycountry.countries.lookup(name).alpha_3
    except LookupError:
        return None


def filter_countries(long_data: pd.DataFrame, country_names: Iterable[str]) -> pd.DataFrame:
    """Restricts the long case table to the given countries.

    Adds a ``location`` column with the ISO3 code of each row. Rows whose
    name cannot be translated, or whose code is not among the translated
    targets, are dropped.

    """
    country_names = list(country_names)
    targets = set()
    for name in country_names:
        code = to_iso3(name)
        if code is None:
            logger.debug(f'Target country {name} has no ISO3 code and is out of scope.')
        else:
            targets.add(code)

    name_map = {name: to_iso3(name) for name in long_data['location_name'].unique()}
    untranslated = sorted(str(name) for name, code in name_map.items() if code is None)
    if untranslated:
        logger.debug(f'Dropping {len(untranslated)} names without an ISO3 code: {untranslated}.')

    filtered = long_data.assign(location=long_data['location_name'].map(name_map))
    filtered = filtered[filtered['location'].isin(targets)]

    duplicated = filtered.duplicated(subset=['date', 'location'], keep='first')
    if duplicated.any():
        names = sorted(filtered.loc[duplicated, 'location_name'].unique())
        logger.warning(f'Names {names} map to an already present location. Keeping the first occurrence.')
        filtered = filtered[~duplicated]

    return filtered.sort_values(['location', 'date']).reset_index(drop=True)


def to_location_table(filtered: pd.DataFrame) -> pd.DataFrame:
    """Pivots the filtered long table to one column per location code."""
    table = filtered.pivot(index='date', columns='location', values='value')
    table.columns.name = None
    return table.sort_index()
