import numpy as np

from fraud_detection.shared.Scorer import BestScoreTracker, Scorer
from fraud_detection.shared.structs import ClassThreshold, Dataset, TrainingConfiguration
from fraud_detection.shared.train import draw_class_balanced_dataset, draw_epoch_dataset, evaluate_model, train_model
from tests.conftest import make_dataset


class FakeModel:
    """Predicts from the first feature (the true class) according to a per-epoch mode."""

    def __init__(self, modes):
        self.modes = modes
        self.fit_calls = []

    def fit(self, x, y, batch_size, epochs, verbose):
        self.fit_calls.append((len(x), batch_size, epochs))

    def predict(self, x, batch_size, verbose):
        mode = self.modes[len(self.fit_calls) - 1]
        is_fraud = x[:, 0] == 1
        probabilities = np.tile([0.9, 0.1], (len(x), 1))
        if mode == "perfect":
            probabilities[is_fraud] = [0.05, 0.95]
        elif mode == "unsure":
            probabilities[is_fraud] = [0.6, 0.4]
        return probabilities


class ListLog:
    def __init__(self):
        self.entries = []

    def append(self, text):
        self.entries.append(text)


def _dataset(class_indices):
    class_indices = np.asarray(class_indices)
    features = np.column_stack([class_indices, np.arange(len(class_indices))])
    return Dataset.from_class_indices(features, class_indices)


def _config(**overrides):
    values = dict(batch_size=8, epochs=4, epoch_size=30, class_names=["legitimate", "fraud"],
                  positive_class="fraud", model_file="best.keras")
    values.update(overrides)
    return TrainingConfiguration(**values)


def test_draw_epoch_dataset_limits_size():
    train_set = make_dataset(num_minority=10, num_majority=40)

    assert len(draw_epoch_dataset(train_set, 20)) == 20
    assert len(draw_epoch_dataset(train_set, 500)) == 50


def test_class_balanced_draw_is_even_for_imbalanced_train_set():
    train_set = make_dataset(num_minority=7, num_majority=93)

    epoch_set = draw_class_balanced_dataset(train_set, 40)

    assert len(epoch_set) == 40
    np.testing.assert_array_equal(np.bincount(epoch_set.class_indices), [20, 20])


def test_class_balanced_draw_cycles_short_class_evenly():
    train_set = make_dataset(num_minority=7, num_majority=93)

    epoch_set = draw_class_balanced_dataset(train_set, 40)

    # first feature is the record id, minority records have ids 0..6
    minority_ids = epoch_set.features[epoch_set.class_indices == 1, 0]
    counts = np.bincount(minority_ids.astype(int), minlength=7)
    assert counts.min() == 2 and counts.max() == 3


def test_class_balanced_draw_gives_odd_remainder_to_first_class():
    train_set = make_dataset(num_minority=30, num_majority=30)

    epoch_set = draw_class_balanced_dataset(train_set, 11)

    np.testing.assert_array_equal(np.bincount(epoch_set.class_indices), [6, 5])


def test_train_model_uses_balanced_draw_when_configured():
    train_set = _dataset([0] * 70 + [1] * 10)
    test_set = _dataset([0, 0, 1])
    model = FakeModel(["perfect"] * 4)
    fitted_labels = []
    original_fit = model.fit

    def fit(x, y, batch_size, epochs, verbose):
        fitted_labels.append(np.asarray(y).argmax(axis=1))
        original_fit(x, y, batch_size, epochs, verbose)

    model.fit = fit
    scorer = Scorer("fraud", class_names=["legitimate", "fraud"], tracker=BestScoreTracker())

    train_model(model, train_set, test_set, _config(balanced=True, epoch_size=40), scorer, ListLog(),
                save_fn=lambda m, path: None)

    assert len(fitted_labels) == 4
    for labels in fitted_labels:
        np.testing.assert_array_equal(np.bincount(labels), [20, 20])


def test_train_model_saves_best_models_and_logs_every_epoch():
    train_set = _dataset([0] * 40 + [1] * 40)
    test_set = _dataset([0, 0, 0, 1, 1])
    model = FakeModel(["legit", "perfect", "perfect", "legit"])
    scorer = Scorer("fraud", class_names=["legitimate", "fraud"], tracker=BestScoreTracker())
    training_log = ListLog()
    saved = []
    callback_rounds = []

    rounds = train_model(model, train_set, test_set, _config(), scorer, training_log,
                         save_fn=lambda m, path: saved.append((m, path)),
                         round_callback=callback_rounds.append)

    assert [r.epoch for r in rounds] == [1, 2, 3, 4]
    assert [r.is_best for r in rounds] == [True, True, False, False]
    assert [r.f_beta for r in rounds] == [0.0, 1.0, 1.0, 0.0]
    assert saved == [(model, "best.keras"), (model, "best.keras")]
    assert callback_rounds == rounds
    assert model.fit_calls == [(30, 8, 1)] * 4
    assert len(training_log.entries) == 5
    assert training_log.entries[1].startswith("Epoch: 2")
    assert training_log.entries[-1] == "Best score: 1.0"


def test_evaluate_model_applies_decision_threshold():
    test_set = _dataset([0, 0, 1, 1])
    model = FakeModel(["unsure"])
    model.fit_calls.append(None)

    plain = evaluate_model(model, test_set, _config(), Scorer("fraud", tracker=BestScoreTracker()), 1)
    with_threshold = evaluate_model(model, test_set, _config(decision_threshold=ClassThreshold("legitimate", 0.7)),
                                    Scorer("fraud", tracker=BestScoreTracker()), 1)

    assert plain.recall == 0.0
    assert with_threshold.recall == 1.0
    assert with_threshold.precision == 1.0
