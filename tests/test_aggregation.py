from services.aggregation import best_worst, count_positive, total_amount


def test_best_worst_empty_is_zero():
    assert best_worst([]) == (0, 0)


def test_best_worst_treats_sign_normally():
    assert best_worst([5, -2, 10]) == (10, -2)
    assert best_worst([-7, -3]) == (-3, -7)


def test_best_worst_accepts_generators():
    assert best_worst(amount for amount in [1.5, 2.5]) == (2.5, 1.5)


def test_total_includes_zero_and_negative():
    assert total_amount([5, 0, -2, 10]) == 13
    assert total_amount([]) == 0


def test_count_positive_is_strict():
    assert count_positive([5, 0, -2, 10]) == 2
    assert count_positive([0, 0]) == 0
