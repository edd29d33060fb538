__all__ = [
    "__title__", "__summary__", "__uri__", "__author__", "__email__", "__version__",
]

__title__ = "covid_rt_pipeline"
__summary__ = "Effective reproduction number of a reference country against an OECD comparison band."
__uri__ = ""

__version__ = '0.1.0'

__author__ = "Covid modeling team."
__email__ = ""
