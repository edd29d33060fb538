"""Cross-country summaries of Rt and of smoothed daily cases."""
from typing import Tuple

from loguru import logger
import numpy as np
import pandas as pd

from covid_rt_pipeline.model.estimation import RtEstimationResults
from covid_rt_pipeline.specification import EstimationParameters

SUMMARY_COLUMNS = ['q50', 'q_up', 'q_down']


def summarize(data: pd.DataFrame, quantiles: Tuple[float, float, float] = (0.25, 0.5, 0.75)) -> pd.DataFrame:
    """Row-wise quantiles across the location columns of ``data``.

    Quantiles use linear interpolation between order statistics. Missing
    values are left out of each row's computation; a row with no values at
    all has missing quantiles.

    """
    lower, median, upper = quantiles
    if data.shape[1] == 0:
        logger.warning('No comparison locations to summarize, quantiles will be missing.')
        return pd.DataFrame(np.nan, index=data.index, columns=SUMMARY_COLUMNS)
    q50 = data.quantile(median, axis=1).rename('q50')
    q_up = data.quantile(upper, axis=1).rename('q_up')
    q_down = data.quantile(lower, axis=1).rename('q_down')
    return pd.concat([q50, q_up, q_down], axis=1)


def rt_column(reference: str) -> str:
    return f'{reference.lower()}_rep_num'


def aggregate_rt(results: RtEstimationResults, parameters: EstimationParameters) -> pd.DataFrame:
    """Reference Rt alongside the comparison median and interquartile range.

    Every location was estimated over the same windows, so estimates are
    lined up by window position. Row i is dated i days after the anchor date.

    """
    point_estimate = parameters.point_estimate
    reference = results.reference_estimate
    index = pd.DatetimeIndex(parameters.anchor + pd.to_timedelta(np.arange(len(reference)), unit='D'),
                             name='date')

    comparison = pd.DataFrame(
        {location: estimate[point_estimate].to_numpy()
         for location, estimate in results.comparison_estimates.items()},
        index=index,
    )
    logger.info(f'Summarizing Rt across {comparison.shape[1]} comparison locations.')
    summary = summarize(comparison, parameters.quantiles)

    reference_rt = pd.Series(reference[point_estimate].to_numpy(), index=index,
                             name=rt_column(results.reference))
    return pd.concat([reference_rt, summary], axis=1).reset_index()


def smooth_cases(cases: pd.DataFrame, days: int = 7) -> pd.DataFrame:
    """Trailing simple moving average of each location column.

    The first ``days - 1`` dates and any average over a missing value are
    missing.

    """
    return cases.sort_index().rolling(window=days, min_periods=days).mean()


def aggregate_cases(cases: pd.DataFrame, reference: str, parameters: EstimationParameters) -> pd.DataFrame:
    """Reference smoothed cases alongside the comparison median and interquartile range."""
    if reference not in cases.columns:
        raise ValueError(f'Reference location {reference} is not in the case data.')
    smoothed = smooth_cases(cases, parameters.case_smoothing_days)
    comparison = smoothed.drop(columns=reference)
    logger.info(f'Summarizing smoothed cases across {comparison.shape[1]} comparison locations.')
    summary = summarize(comparison, parameters.quantiles)
    summary = pd.concat([smoothed[reference], summary], axis=1)
    return summary.rename_axis('date').reset_index()
