import pytest

from fraud_detection.shared.Scorer import BestScoreTracker, Scorer, best_score_state, f_beta, precision_recall
from fraud_detection.shared.errors import InvalidConfiguration


def test_f_beta_perfect_score():
    assert f_beta(1.0, 1.0, beta=1) == 1.0


def test_f_beta_zero_denominator_is_zero():
    assert f_beta(0, 0, beta=1) == 0


def test_f_beta_weights_recall():
    # (1 + 4) * 0.5 * 1.0 / (4 * 0.5 + 1.0)
    assert f_beta(0.5, 1.0, beta=2) == pytest.approx(2.5 / 3)
    assert f_beta(0.5, 1.0) == pytest.approx(2 / 3)


@pytest.mark.parametrize("beta", [0, -1])
def test_non_positive_beta_raises(beta):
    with pytest.raises(InvalidConfiguration):
        f_beta(0.5, 0.5, beta=beta)


def test_precision_recall_of_positive_class():
    actual = ["fraud", "fraud", "fraud", "legitimate", "legitimate"]
    predicted = ["fraud", "legitimate", "fraud", "fraud", "legitimate"]

    precision, recall = precision_recall(actual, predicted, "fraud")

    assert precision == pytest.approx(2 / 3)
    assert recall == pytest.approx(2 / 3)


def test_no_positive_predictions_give_zero_precision():
    actual = ["fraud", "legitimate", "legitimate"]
    predicted = ["legitimate", "legitimate", "legitimate"]

    assert precision_recall(actual, predicted, "fraud", ["legitimate", "fraud"]) == (0.0, 0.0)


def test_no_positive_records_give_zero_recall():
    precision, recall = precision_recall(["legitimate", "legitimate"], ["fraud", "legitimate"], "fraud")

    assert precision == 0.0
    assert recall == 0.0


def test_precision_recall_rejects_invalid_input():
    with pytest.raises(InvalidConfiguration):
        precision_recall([], [], "fraud")
    with pytest.raises(InvalidConfiguration):
        precision_recall(["fraud"], ["fraud", "legitimate"], "fraud")


def test_best_flags_need_strict_improvement():
    tracker = BestScoreTracker()

    flags = [tracker.update(score) for score in [0.5, 0.3, 0.7, 0.7]]

    assert flags == [True, False, True, False]
    assert tracker.best_score == 0.7


def test_first_round_is_best_even_with_zero_score():
    tracker = BestScoreTracker()

    assert tracker.best_score == 0
    assert tracker.update(0.0)
    assert not tracker.update(0.0)


def test_evaluate_round_saves_only_best_rounds():
    scorer = Scorer("fraud", class_names=["legitimate", "fraud"], tracker=BestScoreTracker())
    saved_epochs = []
    predictions = [
        ["fraud", "legitimate", "legitimate", "legitimate"],
        ["legitimate", "legitimate", "legitimate", "legitimate"],
        ["fraud", "fraud", "legitimate", "legitimate"],
        ["fraud", "fraud", "legitimate", "legitimate"],
    ]
    actual = ["fraud", "fraud", "legitimate", "legitimate"]

    rounds = [scorer.evaluate_round(epoch, actual, predicted, on_best=lambda e=epoch: saved_epochs.append(e))
              for epoch, predicted in enumerate(predictions, start=1)]

    assert [r.is_best for r in rounds] == [True, False, True, False]
    assert saved_epochs == [1, 3]
    assert rounds[0].precision == 1.0
    assert rounds[0].recall == 0.5
    assert rounds[2].f_beta == 1.0


def test_scorer_defaults_to_process_wide_state():
    scorer = Scorer("fraud")

    scorer.evaluate_round(1, ["fraud", "legitimate"], ["fraud", "legitimate"])

    assert scorer.tracker is best_score_state
    assert best_score_state.best_score == 1.0


def test_scorer_rejects_non_positive_beta():
    with pytest.raises(InvalidConfiguration):
        Scorer("fraud", beta=0)
