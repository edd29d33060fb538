import io
from pathlib import Path
from typing import Union
from urllib.parse import urlparse

from loguru import logger
from matplotlib.figure import Figure
import pandas as pd
import requests

from covid_rt_pipeline.paths import RtPaths
from covid_rt_pipeline.specification import RtSpecification


class DataSourceError(RuntimeError):
    """Raised when the case data source is unreachable or malformed."""


def load_case_data(source: str) -> pd.DataFrame:
    """Reads the wide table of daily new cases per million.

    Parameters
    ----------
    source
        An http(s) url or a local path to a csv whose first column holds
        ISO dates and whose remaining columns hold one country each.

    Returns
    -------
    A data frame indexed by ``date`` with one float column per country.
    Empty cells are kept as missing values.

    """
    if urlparse(source).scheme in ('http', 'https'):
        logger.info(f'Downloading case data from {source}.')
        try:
            response = requests.get(source)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DataSourceError(f'Could not download case data from {source}: {e}') from e
        contents = io.StringIO(response.text)
    else:
        path = Path(source)
        if not path.exists():
            raise DataSourceError(f'No case data found at {source}.')
        logger.info(f'Reading case data from {path}.')
        contents = path

    try:
        wide = pd.read_csv(contents)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataSourceError(f'Could not parse case data from {source}: {e}') from e
    return _validate_case_data(wide, source)


def _validate_case_data(wide: pd.DataFrame, source: str) -> pd.DataFrame:
    if wide.shape[1] < 2:
        raise DataSourceError(f'Case data from {source} must have a date column and '
                              f'at least one country column. Found columns {list(wide.columns)}.')
    date_column = wide.columns[0]
    wide = wide.rename(columns={date_column: 'date'})
    try:
        wide['date'] = pd.to_datetime(wide['date'], format='%Y-%m-%d')
    except (ValueError, TypeError) as e:
        raise DataSourceError(f'Column {date_column} of {source} does not hold ISO dates.') from e
    if wide['date'].duplicated().any():
        raise DataSourceError(f'Case data from {source} has duplicated dates.')

    wide = wide.set_index('date').sort_index()
    try:
        wide = wide.apply(pd.to_numeric).astype(float)
    except (ValueError, TypeError) as e:
        raise DataSourceError(f'Case data from {source} has non-numeric values.') from e
    logger.debug(f'Loaded {wide.shape[1]} locations over {len(wide)} days '
                 f'({wide.index.min().date()} to {wide.index.max().date()}).')
    return wide


def to_long_form(wide: pd.DataFrame) -> pd.DataFrame:
    """Converts the wide case table to (date, location_name, value) rows."""
    long = (wide
            .rename_axis(columns=None)
            .reset_index()
            .melt(id_vars='date', var_name='location_name', value_name='value'))
    return long.sort_values(['location_name', 'date']).reset_index(drop=True)


class RtDataInterface:

    def __init__(self, case_data_url: str, rt_paths: RtPaths):
        self.case_data_url = case_data_url
        self.rt_paths = rt_paths

    @classmethod
    def from_specification(cls, specification: RtSpecification) -> 'RtDataInterface':
        return cls(
            case_data_url=specification.data.case_data_url,
            rt_paths=RtPaths(Path(specification.data.output_root), read_only=False),
        )

    def make_dirs(self):
        self.rt_paths.make_dirs()

    ##########
    # Inputs #
    ##########

    def load_case_data(self) -> pd.DataFrame:
        """Loads the case data in long form."""
        return to_long_form(load_case_data(self.case_data_url))

    ###########
    # Outputs #
    ###########

    def save_specification(self, specification: RtSpecification) -> None:
        specification.dump(self.rt_paths.specification_file)

    def save_rt_summary(self, rt_summary: pd.DataFrame) -> None:
        self._save_table(rt_summary, self.rt_paths.rt_summary_file)

    def load_rt_summary(self) -> pd.DataFrame:
        return self._load_table(self.rt_paths.rt_summary_file)

    def save_case_summary(self, case_summary: pd.DataFrame) -> None:
        self._save_table(case_summary, self.rt_paths.case_summary_file)

    def load_case_summary(self) -> pd.DataFrame:
        return self._load_table(self.rt_paths.case_summary_file)

    def save_manifest(self, manifest: pd.DataFrame) -> None:
        self._save_table(manifest, self.rt_paths.manifest_file)

    def load_manifest(self) -> pd.DataFrame:
        return pd.read_csv(self.rt_paths.manifest_file, keep_default_na=False)

    def save_figure(self, figure: Figure) -> None:
        logger.info(f'Writing {self.rt_paths.figure_file}.')
        figure.savefig(self.rt_paths.figure_file, dpi=figure.dpi)

    @staticmethod
    def _save_table(data: pd.DataFrame, path: Union[str, Path]) -> None:
        logger.info(f'Writing {path}.')
        data.to_csv(path, index=False)

    @staticmethod
    def _load_table(path: Union[str, Path]) -> pd.DataFrame:
        return pd.read_csv(path, parse_dates=['date'])
