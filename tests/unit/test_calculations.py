import pytest

from learnhub.services.analytics import progress_bucket
from learnhub.services.course_progress import calculate_percentage


@pytest.mark.parametrize("completed,total,expected", [
    (0, 0, 0),
    (0, 4, 0),
    (1, 4, 25),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),
    (1, 200, 1),
    (4, 4, 100),
])
def test_calculate_percentage(completed, total, expected):
    assert calculate_percentage(completed, total) == expected


@pytest.mark.parametrize("completed,total,expected", [
    (0, 0, "0%"),
    (0, 5, "0%"),
    (1, 4, "1-25%"),
    (1, 3, "26-50%"),
    (2, 4, "26-50%"),
    (3, 4, "51-75%"),
    (99, 100, "76-99%"),
    (5, 5, "100%"),
])
def test_progress_bucket_uses_exact_ratio(completed, total, expected):
    assert progress_bucket(completed, total) == expected
