import numpy as np
import pytest

from fraud_detection.shared.Splitter import get_train_test_dataset, stratified_split
from fraud_detection.shared.errors import InvalidConfiguration
from tests.conftest import make_dataset


def _record_ids(dataset):
    return sorted(dataset.features[:, 0].astype(int).tolist())


def test_split_sizes_and_union():
    dataset = make_dataset(num_minority=20, num_majority=980)

    train_set, test_set = stratified_split(dataset, 100)

    assert len(test_set) == 100
    assert len(train_set) == 900
    assert sorted(_record_ids(train_set) + _record_ids(test_set)) == list(range(1000))
    assert not set(_record_ids(train_set)) & set(_record_ids(test_set))


def test_minority_share_is_rounded_down():
    dataset = make_dataset(num_minority=20, num_majority=980)

    _, test_set = stratified_split(dataset, 120)

    # 120 * 20 / 1000 = 2.4
    assert test_set.class_indices.sum() == 2
    assert len(test_set) == 120


@pytest.mark.parametrize("num_minority,num_majority,test_size", [
    (3, 97, 10), (17, 483, 77), (50, 50, 33), (1, 999, 500), (9, 91, 100),
])
def test_minority_fraction_is_preserved(num_minority, num_majority, test_size):
    dataset = make_dataset(num_minority, num_majority)

    train_set, test_set = stratified_split(dataset, test_size)

    expected = test_size * num_minority / len(dataset)
    assert abs(test_set.class_indices.sum() - expected) <= 1
    assert len(test_set) == test_size
    assert len(train_set) + len(test_set) == len(dataset)


def test_split_is_randomized_per_call():
    dataset = make_dataset(num_minority=20, num_majority=980)

    _, first = stratified_split(dataset, 100)
    _, second = stratified_split(dataset, 100)

    assert _record_ids(first) != _record_ids(second)


def test_whole_dataset_as_test_set():
    dataset = make_dataset(num_minority=5, num_majority=45)

    train_set, test_set = stratified_split(dataset, 50)

    assert len(train_set) == 0
    assert _record_ids(test_set) == list(range(50))


@pytest.mark.parametrize("test_size", [51, -1])
def test_invalid_test_size_raises(test_size):
    dataset = make_dataset(num_minority=5, num_majority=45)

    with pytest.raises(InvalidConfiguration):
        stratified_split(dataset, test_size)


def test_cached_split_is_stable():
    dataset = make_dataset(num_minority=20, num_majority=180)

    first = get_train_test_dataset(dataset, 40)
    second = get_train_test_dataset(dataset, 40)

    assert first is second
    np.testing.assert_array_equal(first[1].features, second[1].features)
