from pathlib import Path

from models.results import PowerAnalysisResult, PowerZoneAggregate, SidePair
from visualizers.chart_generator import ChartGenerator


def test_zone_charts_are_written(tmp_path):
    result = PowerAnalysisResult(
        average_power=180,
        threshold_power=200,
        zones=(
            PowerZoneAggregate('Z2', 'Endurance', '110-150W', 12, SidePair(51, 49),
                               torque_effectiveness=SidePair(70, 72)),
            PowerZoneAggregate('Z4', 'Lactate Threshold', '180-210W', 4, SidePair(48, 52)),
        ),
    )

    charts = ChartGenerator(tmp_path / "charts").generate_zone_charts(result, prefix='ride')

    # No zone has smoothness data, so that chart is skipped
    assert set(charts) == {'zone_balance', 'zone_torque_effectiveness'}
    assert charts['zone_balance'] == str(tmp_path / "charts" / "ride_zone_balance.png")
    for path in charts.values():
        assert Path(path).stat().st_size > 0


def test_no_zones_no_charts(tmp_path):
    charts = ChartGenerator(tmp_path).generate_zone_charts(PowerAnalysisResult(average_power=150))
    assert charts == {}
    assert list(tmp_path.iterdir()) == []
