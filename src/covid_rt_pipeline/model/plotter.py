import matplotlib

matplotlib.use('Agg')
import matplotlib.dates as mdates
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
import pandas as pd

from covid_rt_pipeline.model.aggregation import rt_column
from covid_rt_pipeline.specification import PlotParameters

REFERENCE_COLOR = 'navy'
COMPARISON_COLORS = {'light': 'sandybrown', 'dark': 'darkorange'}
COMPARISON_LABEL = 'OECD'


def plot_comparison(rt_summary: pd.DataFrame,
                    case_summary: pd.DataFrame,
                    reference: str,
                    plot_parameters: PlotParameters) -> Figure:
    """Side by side Rt and daily case charts of the reference against the comparison band."""
    fig, (ax_rt, ax_cases) = plt.subplots(
        nrows=1, ncols=2,
        figsize=plot_parameters.figure_size,
        dpi=plot_parameters.dpi,
    )

    make_band_plot(ax_rt, rt_summary, rt_column(reference), reference,
                   plot_parameters.reporting_lag_days)
    ax_rt.axhline(1, color='black', linestyle='--', linewidth=1)
    add_policy_events(ax_rt, rt_summary['date'], plot_parameters)
    ax_rt.set_title(f'Effective reproduction number, {reference} vs. {COMPARISON_LABEL}')
    ax_rt.set_ylabel('Rt')

    make_band_plot(ax_cases, case_summary, reference, reference,
                   plot_parameters.reporting_lag_days)
    ax_cases.set_title(f'Daily new cases per million, {reference} vs. {COMPARISON_LABEL}')
    ax_cases.set_ylabel('Cases per million (7 day mean)')
    ax_cases.set_ylim(bottom=0)

    fig.tight_layout()
    return fig


def make_band_plot(ax: Axes, data: pd.DataFrame, value_column: str, label: str, lag_days: int):
    dates = data['date']
    ax.fill_between(dates, data['q_down'], data['q_up'],
                    color=COMPARISON_COLORS['light'], alpha=0.4, linewidth=0,
                    label=f'{COMPARISON_LABEL} interquartile range')
    ax.plot(dates, data['q50'], color=COMPARISON_COLORS['dark'], linewidth=2,
            label=f'{COMPARISON_LABEL} median')
    ax.plot(dates, data[value_column], color=REFERENCE_COLOR, linewidth=2, label=label)

    annotate_latest(ax, dates, data[value_column], REFERENCE_COLOR)
    annotate_latest(ax, dates, data['q50'], COMPARISON_COLORS['dark'])
    shade_reporting_lag(ax, dates, lag_days)

    ax.xaxis.set_major_locator(mdates.MonthLocator())
    ax.xaxis.set_major_formatter(mdates.DateFormatter('%b %Y'))
    for tick_label in ax.get_xticklabels():
        tick_label.set_rotation(30)
        tick_label.set_ha('right')
    ax.grid(axis='y', alpha=0.3)
    ax.legend(loc='upper left')


def annotate_latest(ax: Axes, dates: pd.Series, values: pd.Series, color: str):
    """Writes the last available value next to the end of its line."""
    last = values.last_valid_index()
    if last is None:
        return
    ax.annotate(f'{values[last]:.2f}',
                xy=(dates[last], values[last]),
                xytext=(6, 0), textcoords='offset points',
                color=color, va='center', fontweight='bold')


def shade_reporting_lag(ax: Axes, dates: pd.Series, lag_days: int):
    """Shades the most recent days, where reporting is still incomplete."""
    if not lag_days or dates.empty:
        return
    end = dates.max()
    ax.axvspan(end - pd.Timedelta(days=lag_days), end,
               color='grey', alpha=0.15, linewidth=0, label='Reporting lag')


def add_policy_events(ax: Axes, dates: pd.Series, plot_parameters: PlotParameters):
    start, end = dates.min(), dates.max()
    for event in plot_parameters.policy_events:
        if not start <= event.timestamp <= end:
            continue
        ax.axvline(event.timestamp, color='dimgrey', linestyle='--', linewidth=1.5)
        ax.text(event.timestamp, 0.98, f' {event.label}',
                transform=ax.get_xaxis_transform(),
                rotation=90, va='top', ha='right', fontsize=9, color='dimgrey')
