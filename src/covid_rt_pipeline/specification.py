from dataclasses import dataclass, field
from typing import NamedTuple, Tuple

import pandas as pd

from covid_rt_pipeline.lib import utilities


class __PointEstimates(NamedTuple):
    mean: str = 'mean'
    median: str = 'median'


POINT_ESTIMATES = __PointEstimates()

DEFAULT_CASE_DATA_URL = 'https://covid.ourworldindata.org/data/jhu/new_cases_per_million.csv'

OECD_COMPARISON_COUNTRIES = (
    'Australia', 'Austria', 'Belgium', 'Canada', 'Chile', 'Czechia',
    'Denmark', 'Estonia', 'Finland', 'France', 'Germany', 'Greece',
    'Hungary', 'Iceland', 'Ireland', 'Italy', 'Japan', 'South Korea',
    'Latvia', 'Luxembourg', 'Mexico', 'Netherlands', 'New Zealand', 'Norway',
    'Poland', 'Portugal', 'Slovakia', 'Slovenia', 'Spain', 'Sweden',
    'Switzerland', 'Turkey', 'United Kingdom', 'United States',
)


@dataclass(frozen=True)
class RtData:
    """Specifies the inputs and outputs for a comparison run."""
    case_data_url: str = field(default=DEFAULT_CASE_DATA_URL)
    output_root: str = field(default='')


@dataclass(frozen=True)
class EstimationParameters:
    """Specifies the renewal-equation fit and the aggregation.

    The serial interval is an offset Gamma distribution described by its
    mean and standard deviation in days. The prior on R is a Gamma
    distribution with the given mean and standard deviation.

    """
    window: int = field(default=7)
    si_mean: float = field(default=4.5)
    si_sd: float = field(default=3.5)
    anchor_date: str = field(default='2020-06-01')
    prior_mean: float = field(default=5.0)
    prior_sd: float = field(default=5.0)
    point_estimate: str = field(default=POINT_ESTIMATES.mean)
    case_smoothing_days: int = field(default=7)
    quantiles: Tuple[float, float, float] = field(default=(0.25, 0.5, 0.75))

    def __post_init__(self):
        if self.window < 1:
            raise ValueError(f'Estimation window must be positive, got {self.window}.')
        if self.case_smoothing_days < 1:
            raise ValueError(f'Case smoothing must span at least one day, got {self.case_smoothing_days}.')
        if self.si_mean <= 1:
            raise ValueError(f'Serial interval mean must be greater than one day, got {self.si_mean}.')
        if self.si_sd <= 0 or self.prior_mean <= 0 or self.prior_sd <= 0:
            raise ValueError('Serial interval and prior standard deviations and the prior mean must be positive.')
        if self.point_estimate not in POINT_ESTIMATES:
            raise ValueError(f'Unknown point estimate {self.point_estimate}. '
                             f'Options are {list(POINT_ESTIMATES)}.')
        # Yaml hands us lists.
        object.__setattr__(self, 'quantiles', tuple(self.quantiles))
        lower, median, upper = self.quantiles
        if not 0 <= lower <= median <= upper <= 1:
            raise ValueError(f'Quantiles must be ordered and within [0, 1], got {self.quantiles}.')
        pd.Timestamp(self.anchor_date)  # Fail early on a bad date.

    @property
    def anchor(self) -> pd.Timestamp:
        return pd.Timestamp(self.anchor_date)


@dataclass(frozen=True)
class CountrySpecification:
    """The reference country and the countries it is compared against."""
    reference: str = field(default='Israel')
    comparison: Tuple[str, ...] = field(default=OECD_COMPARISON_COUNTRIES)

    def __post_init__(self):
        object.__setattr__(self, 'comparison', tuple(self.comparison))
        if self.reference in self.comparison:
            raise ValueError(f'Reference country {self.reference} cannot also be a comparison country.')

    @property
    def all_countries(self) -> Tuple[str, ...]:
        return (self.reference, *self.comparison)


@dataclass(frozen=True)
class PolicyEvent:
    """A dated marker drawn on the Rt chart."""
    date: str
    label: str

    @property
    def timestamp(self) -> pd.Timestamp:
        return pd.Timestamp(self.date)


DEFAULT_POLICY_EVENTS = (
    PolicyEvent('2020-09-18', 'Second lockdown'),
    PolicyEvent('2020-12-20', 'Vaccination starts'),
    PolicyEvent('2020-12-27', 'Third lockdown'),
)


@dataclass(frozen=True)
class PlotParameters:
    """Specifies the presentation of the comparison figure."""
    policy_events: Tuple[PolicyEvent, ...] = field(default=DEFAULT_POLICY_EVENTS)
    reporting_lag_days: int = field(default=7)
    figure_size: Tuple[float, float] = field(default=(16., 6.))
    dpi: int = field(default=150)

    def __post_init__(self):
        events = tuple(e if isinstance(e, PolicyEvent) else PolicyEvent(**e)
                       for e in self.policy_events)
        object.__setattr__(self, 'policy_events', events)
        object.__setattr__(self, 'figure_size', tuple(self.figure_size))
        if self.reporting_lag_days < 0:
            raise ValueError(f'Reporting lag cannot be negative, got {self.reporting_lag_days}.')


class RtSpecification(utilities.Specification):
    """Specification for an Rt comparison run."""
    sections = (
        ('data', RtData),
        ('parameters', EstimationParameters),
        ('countries', CountrySpecification),
        ('plotting', PlotParameters),
    )

    def __init__(self,
                 data: RtData,
                 parameters: EstimationParameters,
                 countries: CountrySpecification,
                 plotting: PlotParameters):
        self._data = data
        self._parameters = parameters
        self._countries = countries
        self._plotting = plotting

    @property
    def data(self) -> RtData:
        """The data specification for the run."""
        return self._data

    @property
    def parameters(self) -> EstimationParameters:
        """The parametrization of the estimator and the aggregation."""
        return self._parameters

    @property
    def countries(self) -> CountrySpecification:
        """The reference and comparison countries."""
        return self._countries

    @property
    def plotting(self) -> PlotParameters:
        """The figure parameters."""
        return self._plotting
