from dataclasses import dataclass
from typing import Optional

from loguru import logger
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
import pandas as pd

from covid_rt_pipeline.data import DataSourceError, RtDataInterface
from covid_rt_pipeline.lib import cli_tools
from covid_rt_pipeline.specification import RtSpecification
from covid_rt_pipeline import model


@dataclass(frozen=True, eq=False)
class RtComparisonOutputs:
    rt_summary: pd.DataFrame
    case_summary: pd.DataFrame
    manifest: pd.DataFrame
    figure: Figure


def do_rt_comparison(specification: RtSpecification,
                     output_root: Optional[str],
                     with_debugger: bool) -> RtSpecification:
    output_root = cli_tools.get_output_root(output_root, specification.data.output_root)
    specification = specification.replace('data', output_root=str(output_root))
    data_interface = RtDataInterface.from_specification(specification)

    main = cli_tools.monitor_application(rt_comparison_main, logger, with_debugger)
    main(specification, data_interface)

    return specification


def rt_comparison_main(specification: RtSpecification,
                       data_interface: RtDataInterface) -> RtComparisonOutputs:
    logger.info(f'Starting Rt comparison with outputs in {specification.data.output_root}.')
    parameters = specification.parameters
    countries = specification.countries

    long_data = data_interface.load_case_data()
    filtered = model.filter_countries(long_data, countries.all_countries)
    reference = model.to_iso3(countries.reference)
    if reference is None or reference not in set(filtered['location']):
        raise DataSourceError(f'Reference country {countries.reference} is not in the case data.')
    cases = model.to_location_table(filtered)
    logger.info(f'Kept {cases.shape[1]} of {len(countries.all_countries)} requested countries.')

    results = model.estimate_all(cases, reference, parameters)
    manifest = results.manifest()
    rt_summary = model.aggregate_rt(results, parameters)
    case_summary = model.aggregate_cases(cases, reference, parameters)
    figure = model.plot_comparison(rt_summary, case_summary, reference, specification.plotting)

    data_interface.make_dirs()
    data_interface.save_specification(specification)
    data_interface.save_manifest(manifest)
    data_interface.save_rt_summary(rt_summary)
    data_interface.save_case_summary(case_summary)
    data_interface.save_figure(figure)
    plt.close(figure)

    logger.info(f'Rt comparison in {specification.data.output_root} complete.')
    return RtComparisonOutputs(
        rt_summary=rt_summary,
        case_summary=case_summary,
        manifest=manifest,
        figure=figure,
    )
