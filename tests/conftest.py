import numpy
import pandas
import pytest

from covid_rt_pipeline.specification import RtSpecification


@pytest.fixture
def dates():
    "Sixty consecutive days starting at the default anchor date."
    return pandas.date_range('2020-06-01', periods=60, freq='D', name='date')


# Data fixtures
#
# These mimic the wide per-million case table published by the data source:
# one column per location name, including aggregates that are not countries.
@pytest.fixture
def wide_cases(dates):
    "Constant daily cases per million, with one country reporting no cases at all."
    return pandas.DataFrame({
        'Israel': 100.,
        'France': 100.,
        'Germany': 50.,
        'Italy': 200.,
        'Spain': 0.,
        'World': 80.,
    }, index=dates)


@pytest.fixture
def case_csv_text(wide_cases):
    "The wide case table as the data source serves it."
    return wide_cases.to_csv()


@pytest.fixture
def case_csv(tmp_path, case_csv_text):
    path = tmp_path / 'new_cases_per_million.csv'
    path.write_text(case_csv_text)
    return path


@pytest.fixture
def location_cases(dates):
    "Case table keyed by ISO3 code, as produced by the country filter."
    return pandas.DataFrame({
        'ISR': 100.,
        'FRA': 100.,
        'DEU': 50.,
        'ITA': 200.,
        'ESP': 0.,
    }, index=dates)


@pytest.fixture
def growing_incidence(dates):
    "Incidence doubling roughly every week."
    values = 10 * numpy.exp(numpy.log(2) / 7 * numpy.arange(len(dates)))
    return pandas.Series(values, index=dates, name='GRW')


@pytest.fixture
def specification_dict(case_csv, tmp_path):
    return {
        'data': {
            'case_data_url': str(case_csv),
            'output_root': str(tmp_path / 'outputs'),
        },
        'countries': {
            'reference': 'Israel',
            'comparison': ['France', 'Germany', 'Italy', 'Spain'],
        },
        'plotting': {
            'policy_events': [{'date': '2020-06-20', 'label': 'Schools reopen'}],
            'reporting_lag_days': 5,
            'figure_size': [8, 3],
            'dpi': 50,
        },
    }


@pytest.fixture
def specification(specification_dict):
    return RtSpecification.from_dict(specification_dict)


@pytest.fixture
def parameters(specification):
    return specification.parameters
