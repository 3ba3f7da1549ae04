import pytest
from delivery.delivery.tracking import AVERAGE_SPEED_KMH, estimate_arrival


@pytest.mark.parametrize(
    "km,expected",
    [
        (15.0, "30 mins"),
        (2.62, "6 mins"),
        (0.1, "1 mins"),
        (0.0, "1 mins"),
    ],
)
def test_estimate_arrival(km, expected):
    assert estimate_arrival(km) == expected


def test_average_speed():
    assert AVERAGE_SPEED_KMH == 30
