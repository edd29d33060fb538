import click
from loguru import logger

from covid_rt_pipeline.lib import cli_tools
from covid_rt_pipeline.main import do_rt_comparison
from covid_rt_pipeline.specification import RtSpecification


@click.group()
def covid_rt():
    """Top level entry point for the Rt comparison."""
    pass


@covid_rt.command()
@cli_tools.with_specification(RtSpecification)
@cli_tools.with_output_root
@cli_tools.add_verbose_and_with_debugger
def run(specification: RtSpecification, output_root, verbose, with_debugger):
    """Estimates Rt for the reference and comparison countries and writes
    the summary tables and the comparison figure.

    Without a SPECIFICATION file the default configuration is used.
    """
    cli_tools.configure_logging_to_terminal(verbose)

    do_rt_comparison(
        specification=specification,
        output_root=output_root,
        with_debugger=with_debugger,
    )

    logger.info('**Done**')


@covid_rt.command()
@click.argument('path', type=click.Path(dir_okay=False))
def template(path):
    """Writes the default specification to PATH as a starting point."""
    RtSpecification.from_dict({}).dump(path)
