import numpy
import pandas
import pytest

from covid_rt_pipeline.model import estimation
from covid_rt_pipeline.specification import EstimationParameters


class TestSerialInterval:

    def test_is_a_distribution(self):
        si = estimation.discretize_serial_interval(300, 4.5, 3.5)

        assert si[0] == 0
        assert (si >= 0).all()
        assert si.sum() == pytest.approx(1, abs=1e-6)

    def test_keeps_mean(self):
        si = estimation.discretize_serial_interval(300, 4.5, 3.5)

        assert (numpy.arange(300) * si).sum() == pytest.approx(4.5, abs=1e-3)

    def test_mean_must_exceed_one_day(self):
        with pytest.raises(ValueError):
            estimation.discretize_serial_interval(10, 1.0, 1.0)


def test_overall_infectivity():
    incidence = numpy.array([1., 2., 3., 4.])
    si = numpy.array([0., 0.5, 0.3, 0.2])

    infectivity = estimation.overall_infectivity(incidence, si)

    expected = numpy.array([
        0.,
        0.5 * 1,
        0.5 * 2 + 0.3 * 1,
        0.5 * 3 + 0.3 * 2 + 0.2 * 1,
    ])
    numpy.testing.assert_allclose(infectivity, expected)


class TestMakeWindows:

    @pytest.mark.parametrize('n_days, window', [(8, 7), (60, 7), (30, 1), (100, 14)])
    def test_window_length(self, n_days, window):
        windows = estimation.make_windows(n_days, window)

        assert (windows['t_end'] - windows['t_start'] + 1 == window).all()
        assert len(windows) == n_days - window
        assert windows['t_start'].iloc[0] == 1
        assert windows['t_end'].iloc[-1] == n_days - 1

    def test_too_short(self):
        with pytest.raises(estimation.EstimationError) as e:
            estimation.make_windows(7, 7)
        assert e.value.reason == estimation.FAILURE_REASONS.insufficient_data


class TestEstimateRt:

    @pytest.fixture
    def windows(self, dates):
        return estimation.make_windows(len(dates), 7)

    def test_constant_incidence_converges_to_one(self, dates, windows):
        incidence = pandas.Series(100., index=dates, name='CST')

        estimate = estimation.estimate_rt(incidence, windows, EstimationParameters())

        assert len(estimate) == len(windows)
        assert estimate['mean'].iloc[-1] == pytest.approx(1.0, abs=0.01)
        assert estimate['median'].iloc[-1] == pytest.approx(1.0, abs=0.01)
        assert (estimate['lower'] <= estimate['median']).all()
        assert (estimate['median'] <= estimate['upper']).all()

    def test_growth_is_above_one(self, growing_incidence, windows):
        estimate = estimation.estimate_rt(growing_incidence, windows, EstimationParameters())

        assert (estimate['mean'].iloc[-20:] > 1.2).all()

    def test_window_dates(self, dates, windows):
        incidence = pandas.Series(100., index=dates, name='CST')

        estimate = estimation.estimate_rt(incidence, windows, EstimationParameters())

        assert estimate['window_start'].iloc[0] == dates[1]
        assert estimate['window_end'].iloc[0] == dates[7]
        assert estimate['window_end'].iloc[-1] == dates[-1]
        assert ((estimate['window_end'] - estimate['window_start']).dt.days == 6).all()

    def test_posterior(self, dates):
        "A single window checked against the closed form Gamma posterior."
        incidence = pandas.Series([10., 20., 30.], index=dates[:3], name='TST')
        windows = pandas.DataFrame({'t_start': [1], 't_end': [2]})
        parameters = EstimationParameters(window=2)
        si = estimation.discretize_serial_interval(3, parameters.si_mean, parameters.si_sd)

        estimate = estimation.estimate_rt(incidence, windows, parameters)

        shape = 1 + 20 + 30
        rate = 1 / 5 + si[1] * 10 + (si[1] * 20 + si[2] * 10)
        assert estimate['mean'].iloc[0] == pytest.approx(shape / rate)
        assert estimate['std'].iloc[0] == pytest.approx(numpy.sqrt(shape) / rate)

    @pytest.mark.parametrize('values, reason', [
        ([0.] * 60, estimation.FAILURE_REASONS.no_cases),
        ([10.] * 30 + [numpy.nan] + [10.] * 29, estimation.FAILURE_REASONS.missing_values),
        ([10.] * 30 + [-1.] + [10.] * 29, estimation.FAILURE_REASONS.negative_values),
    ])
    def test_degenerate_incidence_fails(self, dates, windows, values, reason):
        incidence = pandas.Series(values, index=dates, name='BAD')

        with pytest.raises(estimation.EstimationError) as e:
            estimation.estimate_rt(incidence, windows, EstimationParameters())
        assert e.value.reason == reason

    def test_short_series_fails(self, dates, windows):
        incidence = pandas.Series(10., index=dates[:30], name='SHT')

        with pytest.raises(estimation.EstimationError) as e:
            estimation.estimate_rt(incidence, windows, EstimationParameters())
        assert e.value.reason == estimation.FAILURE_REASONS.insufficient_data


class TestEstimateAll:

    def test_results(self, location_cases, dates):
        results = estimation.estimate_all(location_cases, 'ISR', EstimationParameters())

        assert results.reference == 'ISR'
        assert len(results.reference_estimate) == len(dates) - 7
        assert sorted(results.comparison_estimates) == ['DEU', 'FRA', 'ITA']
        assert [f.location for f in results.failures] == ['ESP']
        assert results.failures[0].reason == estimation.FAILURE_REASONS.no_cases

    def test_shared_windows(self, location_cases):
        results = estimation.estimate_all(location_cases, 'ISR', EstimationParameters())

        for estimate in results.comparison_estimates.values():
            pandas.testing.assert_series_equal(estimate['window_end'],
                                               results.reference_estimate['window_end'])

    def test_manifest(self, location_cases):
        results = estimation.estimate_all(location_cases, 'ISR', EstimationParameters())

        manifest = results.manifest().set_index('location')

        assert list(manifest.columns) == ['status', 'reason', 'message', 'windows']
        assert manifest.loc['ISR', 'status'] == 'reference'
        assert manifest.loc['FRA', 'status'] == 'success'
        assert manifest.loc['ESP', 'status'] == 'failure'
        assert manifest.loc['ESP', 'reason'] == 'no_cases'
        assert manifest.loc['ESP', 'windows'] == 0

    def test_cut_at_anchor(self, location_cases):
        parameters = EstimationParameters(anchor_date='2020-07-01')

        results = estimation.estimate_all(location_cases, 'ISR', parameters)

        assert results.reference_estimate['window_start'].min() == pandas.Timestamp('2020-07-02')

    def test_late_reporting_fails(self, location_cases):
        location_cases.loc[:'2020-06-10', 'FRA'] = numpy.nan

        results = estimation.estimate_all(location_cases, 'ISR', EstimationParameters())

        assert 'FRA' not in results.comparison_estimates
        failure = {f.location: f for f in results.failures}['FRA']
        assert failure.reason == estimation.FAILURE_REASONS.missing_values

    def test_reference_failure_raises(self, location_cases):
        location_cases['ISR'] = 0.

        with pytest.raises(estimation.EstimationError):
            estimation.estimate_all(location_cases, 'ISR', EstimationParameters())

    def test_missing_reference_raises(self, location_cases):
        with pytest.raises(estimation.EstimationError) as e:
            estimation.estimate_all(location_cases, 'GRC', EstimationParameters())
        assert e.value.reason == estimation.FAILURE_REASONS.missing_location
