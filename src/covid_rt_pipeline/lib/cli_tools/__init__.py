# This is just exposing the api from this namespace.
from covid_rt_pipeline.lib.cli_tools.decorators import (
    add_verbose_and_with_debugger,
    with_output_root,
    with_specification,
)
from covid_rt_pipeline.lib.cli_tools.utilities import (
    add_logging_sink,
    configure_logging_to_terminal,
    get_output_root,
    monitor_application,
)
