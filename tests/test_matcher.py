import pytest

from core.recognition.matcher import MatchResult, compare_faces, euclidean_distance, find_best_match


def test_euclidean_distance():
    assert euclidean_distance([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)


def test_euclidean_distance_length_mismatch():
    with pytest.raises(ValueError):
        euclidean_distance([0.0, 0.0], [0.0, 0.0, 0.0])


def test_compare_faces_is_not_clamped():
    assert compare_faces([0.0], [0.25]) == pytest.approx(0.75)
    assert compare_faces([0.0], [3.0]) == pytest.approx(-2.0)


def test_best_of_two_candidates():
    candidates = [('s1', [0.3, 0.0]), ('s2', [0.6, 0.0])]

    match = find_best_match([0.0, 0.0], candidates, 0.5)

    assert match.id == 's1'
    assert match.confidence == pytest.approx(0.7)


def test_highest_confidence_wins_regardless_of_order():
    candidates = [('far', [0.4]), ('near', [0.1]), ('mid', [0.2])]

    match = find_best_match([0.0], candidates, 0.0)

    assert match.id == 'near'


def test_empty_candidates():
    assert find_best_match([0.0, 0.0], [], 0.5) is None


def test_all_below_threshold():
    candidates = [('s1', [0.8]), ('s2', [0.9])]
    assert find_best_match([0.0], candidates, 0.5) is None


def test_threshold_is_exclusive():
    # distance 0.5 -> confidence 0.5, not strictly greater than 0.5
    assert find_best_match([0.5], [('s1', [0.0])], 0.5) is None
    assert find_best_match([0.5], [('s1', [0.0])], 0.49) == MatchResult('s1', 0.5)


@pytest.mark.parametrize('distance,threshold,accepted', [
    (0.1, 0.5, True),
    (0.49, 0.5, True),
    (0.51, 0.5, False),
    (0.3, 0.8, False),
    (0.0, 0.99, True),
    (1.5, -1.0, True),
])
def test_accepted_iff_confidence_above_threshold(distance, threshold, accepted):
    match = find_best_match([0.0], [('s1', [distance])], threshold)
    assert (match is not None) is accepted


def test_ties_resolve_to_lowest_id():
    candidates = [('b', [0.2, 0.0]), ('a', [0.0, 0.2]), ('c', [0.2, 0.0])]

    match = find_best_match([0.0, 0.0], candidates, 0.5)

    assert match.id == 'a'


def test_mismatched_candidate_is_skipped(caplog):
    candidates = [('broken', [0.0, 0.0, 0.0]), ('ok', [0.1, 0.0])]

    match = find_best_match([0.0, 0.0], candidates, 0.5)

    assert match.id == 'ok'
    assert 'broken' in caplog.text
