from covid_rt_pipeline.model.countries import (
    filter_countries,
    to_iso3,
    to_location_table,
)
from covid_rt_pipeline.model.estimation import (
    FAILURE_REASONS,
    EstimationError,
    EstimationFailure,
    EstimationSuccess,
    RtEstimationResults,
    discretize_serial_interval,
    estimate_all,
    estimate_rt,
    make_windows,
    overall_infectivity,
)
from covid_rt_pipeline.model.aggregation import (
    aggregate_cases,
    aggregate_rt,
    smooth_cases,
    summarize,
)
from covid_rt_pipeline.model.plotter import (
    plot_comparison,
)
