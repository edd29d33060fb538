"""Renewal-equation estimates of the effective reproduction number.

Incidence in a window is modelled as Poisson with mean R times the total
infectivity of the window, where infectivity is past incidence weighted by a
discretized serial interval distribution. With a Gamma prior on R the
posterior for each window is Gamma as well, so no sampling is needed.

"""
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Tuple, Union

from loguru import logger
import numpy as np
import pandas as pd
from scipy import stats

from covid_rt_pipeline.specification import EstimationParameters

POSTERIOR_LOWER = 0.025
POSTERIOR_UPPER = 0.975


class __FailureReasons(NamedTuple):
    insufficient_data: str
    missing_values: str
    negative_values: str
    no_cases: str
    missing_location: str


FAILURE_REASONS = __FailureReasons(*__FailureReasons._fields)


class EstimationError(ValueError):
    """Raised when an incidence series cannot be fit."""

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


@dataclass(frozen=True, eq=False)
class EstimationSuccess:
    location: str
    estimate: pd.DataFrame = field(repr=False)
    succeeded = True


@dataclass(frozen=True)
class EstimationFailure:
    location: str
    reason: str
    message: str
    succeeded = False


EstimationResult = Union[EstimationSuccess, EstimationFailure]


@dataclass(frozen=True, eq=False)
class RtEstimationResults:
    """Estimates for the reference country and outcomes for the comparison."""
    reference: str
    reference_estimate: pd.DataFrame = field(repr=False)
    windows: pd.DataFrame = field(repr=False)
    results: Tuple[EstimationResult, ...]

    @property
    def comparison_estimates(self) -> Dict[str, pd.DataFrame]:
        return {r.location: r.estimate for r in self.results if r.succeeded}

    @property
    def failures(self) -> List[EstimationFailure]:
        return [r for r in self.results if not r.succeeded]

    def manifest(self) -> pd.DataFrame:
        """Tabulates the outcome of every estimated location."""
        rows = [[self.reference, 'reference', '', '', len(self.reference_estimate)]]
        for result in self.results:
            if result.succeeded:
                rows.append([result.location, 'success', '', '', len(result.estimate)])
            else:
                rows.append([result.location, 'failure', result.reason, result.message, 0])
        return pd.DataFrame(rows, columns=['location', 'status', 'reason', 'message', 'windows'])


def discretize_serial_interval(n_days: int, mean: float, sd: float) -> np.ndarray:
    """Discrete serial interval distribution for delays of 0 to n_days - 1.

    The serial interval minus one day is Gamma distributed with the given
    mean (minus one) and standard deviation. The probability mass at each
    integer delay is obtained by linear interpolation of the cumulative
    distribution, so the mass at a delay of zero days is zero.

    """
    if mean <= 1:
        raise ValueError(f'Serial interval mean must be greater than one day, got {mean}.')
    k = np.arange(n_days, dtype=float)
    shape = ((mean - 1) / sd) ** 2
    scale = sd ** 2 / (mean - 1)

    def cdf(x, a):
        return stats.gamma.cdf(x, a, scale=scale)

    weights = (k * cdf(k, shape)
               + (k - 2) * cdf(k - 2, shape)
               - 2 * (k - 1) * cdf(k - 1, shape))
    weights += shape * scale * (2 * cdf(k - 1, shape + 1)
                                - cdf(k - 2, shape + 1)
                                - cdf(k, shape + 1))
    return np.clip(weights, 0., None)


def overall_infectivity(incidence: np.ndarray, serial_interval: np.ndarray) -> np.ndarray:
    """Past incidence weighted by the serial interval, Lambda[t] = sum_s w[s] I[t - s]."""
    n_days = len(incidence)
    return np.convolve(incidence, serial_interval[:n_days])[:n_days]


def make_windows(n_days: int, window: int) -> pd.DataFrame:
    """Sliding windows over a series of n_days days.

    Windows start on the second day and end on the last one, so there are
    ``n_days - window`` of them. Positions are 0-based and inclusive.

    """
    if n_days < window + 1:
        raise EstimationError(FAILURE_REASONS.insufficient_data,
                              f'Need at least {window + 1} days of incidence for a '
                              f'{window} day window, got {n_days}.')
    t_start = np.arange(1, n_days - window + 1)
    t_end = t_start + window - 1
    return pd.DataFrame({'t_start': t_start, 't_end': t_end})


def estimate_rt(incidence: pd.Series,
                windows: pd.DataFrame,
                parameters: EstimationParameters) -> pd.DataFrame:
    """Posterior summaries of Rt for each window of a daily incidence series.

    Parameters
    ----------
    incidence
        Daily incidence indexed by consecutive dates.
    windows
        Window positions as produced by :func:`make_windows`.
    parameters
        The serial interval and prior parametrization.

    Returns
    -------
    One row per window with the window positions and dates and the posterior
    mean, standard deviation, median and 95% interval.

    Raises
    ------
    EstimationError
        If the series is too short, has missing or negative values or has
        no cases at all.

    """
    location = incidence.name
    values = incidence.to_numpy(dtype=float)
    last_end = int(windows['t_end'].max())
    if len(values) <= last_end:
        raise EstimationError(FAILURE_REASONS.insufficient_data,
                              f'{location}: {len(values)} days of incidence do not cover '
                              f'windows ending at position {last_end}.')
    if np.isnan(values).any():
        raise EstimationError(FAILURE_REASONS.missing_values,
                              f'{location}: {int(np.isnan(values).sum())} days of incidence are missing.')
    if (values < 0).any():
        raise EstimationError(FAILURE_REASONS.negative_values,
                              f'{location}: {int((values < 0).sum())} days of incidence are negative.')
    if values.sum() == 0:
        raise EstimationError(FAILURE_REASONS.no_cases,
                              f'{location}: incidence is zero on every day.')

    serial_interval = discretize_serial_interval(len(values), parameters.si_mean, parameters.si_sd)
    infectivity = overall_infectivity(values, serial_interval)

    t_start = windows['t_start'].to_numpy()
    t_end = windows['t_end'].to_numpy()
    cumulative_incidence = np.concatenate([[0.], np.cumsum(values)])
    cumulative_infectivity = np.concatenate([[0.], np.cumsum(infectivity)])
    window_incidence = cumulative_incidence[t_end + 1] - cumulative_incidence[t_start]
    window_infectivity = cumulative_infectivity[t_end + 1] - cumulative_infectivity[t_start]

    prior_shape = (parameters.prior_mean / parameters.prior_sd) ** 2
    prior_scale = parameters.prior_sd ** 2 / parameters.prior_mean
    posterior = stats.gamma(prior_shape + window_incidence,
                            scale=1 / (1 / prior_scale + window_infectivity))

    dates = incidence.index.to_numpy()
    return windows.assign(
        window_start=dates[t_start],
        window_end=dates[t_end],
        mean=posterior.mean(),
        std=posterior.std(),
        median=posterior.median(),
        lower=posterior.ppf(POSTERIOR_LOWER),
        upper=posterior.ppf(POSTERIOR_UPPER),
    )


def estimate_all(incidence: pd.DataFrame,
                 reference: str,
                 parameters: EstimationParameters) -> RtEstimationResults:
    """Estimates Rt for every location column of a daily incidence table.

    The table is cut at the anchor date. Windows are computed once from the
    length of the reference series and shared by all locations, which all
    sit on the same date index; a location with a shorter history therefore
    has missing values and fails rather than being misaligned.

    A failure for the reference location is raised. Failures for any other
    location are recorded in the results and the location is skipped.

    """
    if reference not in incidence.columns:
        raise EstimationError(FAILURE_REASONS.missing_location,
                              f'Reference location {reference} is not in the incidence data.')
    # Gaps in the dates become missing values.
    incidence = incidence.loc[incidence.index >= parameters.anchor].asfreq('D')
    logger.info(f'Estimating Rt from {parameters.anchor.date()} for {incidence.shape[1]} locations.')

    windows = make_windows(len(incidence), parameters.window)
    reference_estimate = estimate_rt(incidence[reference], windows, parameters)

    results = []
    for location in incidence.columns.drop(reference):
        try:
            estimate = estimate_rt(incidence[location], windows, parameters)
        except EstimationError as e:
            logger.warning(f'Skipping {location}, Rt estimation failed ({e.reason}): {e}')
            results.append(EstimationFailure(location, e.reason, str(e)))
        else:
            logger.debug(f'Estimated Rt for {location} over {len(estimate)} windows.')
            results.append(EstimationSuccess(location, estimate))

    n_failed = sum(not r.succeeded for r in results)
    logger.info(f'Rt estimated for {len(results) - n_failed} of {len(results)} comparison locations.')
    return RtEstimationResults(
        reference=reference,
        reference_estimate=reference_estimate,
        windows=windows,
        results=tuple(results),
    )
