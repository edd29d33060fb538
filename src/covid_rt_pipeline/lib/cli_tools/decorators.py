from typing import Callable

import click

###########################
# Specification arguments #
###########################


def with_specification(specification_class):
    """Optional specification file argument, parsed into ``specification_class``.

    Without a file the specification is built from its defaults.
    """
    def _callback(ctx, param, value):
        if value is None:
            return specification_class.from_dict({})
        return specification_class.from_path(value)
    return click.argument(
        'specification',
        type=click.Path(exists=True, dir_okay=False),
        required=False,
        callback=_callback,
    )


##################
# Output options #
##################

with_output_root = click.option(
    '-o', '--output-root',
    type=click.Path(file_okay=False),
    help='Directory to write outputs to. Overrides the specification '
         'and defaults to the current directory.',
)


###################
# Logging options #
###################

def add_verbose_and_with_debugger(func: Callable) -> Callable:
    """Adds the verbosity and post-mortem debugger options to a command."""
    func = click.option(
        '-v', 'verbose',
        count=True,
        help='Configure logging verbosity.',
    )(func)
    func = click.option(
        '--pdb', 'with_debugger',
        is_flag=True,
        help='Drop into python debugger if application fails.',
    )(func)
    return func
