import asyncio
import logging

import pytest
import torch
import torch.nn as nn

from sales_forecast.exceptions import InsufficientDataError
from sales_forecast.feature_engineering import preprocess_sales_records
from sales_forecast.models import SalesRegressor, create_regressor, predict_with_regressor, train_regressor
from sales_forecast.training import TrainedModel, build_training_pairs, fit_sales_model, train_sales_model

from conftest import make_records


def test_training_pairs_are_lag_one(scenario_records):
    encoded = preprocess_sales_records(scenario_records)

    xs, ys = build_training_pairs(encoded)

    assert xs.shape == (2, 2)
    assert xs.tolist() == [[5.0, 0.0], [6.0, 0.0]]
    assert ys.tolist() == pytest.approx([0.5, 1.0])


def test_training_pairs_need_two_samples():
    records = make_records([{"id": "1", "short_desc": "A", "created": "01/05", "total_sold": "10"}])
    encoded = preprocess_sales_records(records)

    with pytest.raises(InsufficientDataError):
        build_training_pairs(encoded)
    with pytest.raises(InsufficientDataError):
        fit_sales_model(encoded, epochs=1)


def test_regressor_architecture():
    model = create_regressor()

    linear_layers = [layer for layer in model.network if isinstance(layer, nn.Linear)]
    activations = [layer for layer in model.network if isinstance(layer, nn.ReLU)]

    assert [(layer.in_features, layer.out_features) for layer in linear_layers] == [(2, 64), (64, 32), (32, 1)]
    assert len(activations) == 2
    # output layer is linear, no activation after it
    assert isinstance(model.network[-1], nn.Linear)
    assert model(torch.zeros(5, 2)).shape == (5, 1)


def test_train_regressor_runs_every_epoch_and_logs_loss(caplog):
    torch.manual_seed(0)
    model = SalesRegressor(hidden_sizes=(8, 4))
    features = torch.tensor([[1.0, 0.0], [2.0, 0.0], [3.0, 0.0], [4.0, 0.0]])
    targets = torch.tensor([0.0, 0.3, 0.6, 1.0])
    seen = []

    with caplog.at_level(logging.INFO, logger="sales_forecast.models.regressor"):
        history = train_regressor(
            model, features, targets, epochs=25, batch_size=2,
            epoch_callback=lambda epoch, loss: seen.append(epoch),
        )

    assert len(history["loss"]) == 25
    assert seen == list(range(1, 26))
    assert "Epoch 25/25, Loss:" in caplog.text
    assert history["loss"][-1] < history["loss"][0]


def test_default_mini_batches_are_reshuffled_every_epoch():
    torch.manual_seed(0)
    model = SalesRegressor(hidden_sizes=(4,))
    features = torch.stack([torch.arange(40, dtype=torch.float32), torch.zeros(40)], dim=1)
    targets = torch.linspace(0.0, 1.0, 40)
    batches = []
    model.register_forward_hook(lambda module, inputs, output: batches.append(inputs[0][:, 0].tolist()))

    train_regressor(model, features, targets, epochs=2)

    assert [len(batch) for batch in batches] == [32, 8, 32, 8]
    first_epoch = batches[0] + batches[1]
    second_epoch = batches[2] + batches[3]
    assert sorted(first_epoch) == sorted(second_epoch) == list(range(40))
    assert first_epoch != second_epoch


def test_predict_with_regressor_returns_flat_array():
    model = create_regressor()
    predictions = predict_with_regressor(model, [[1.0, 0.0], [2.0, 0.0], [3.0, 1.0]])

    assert predictions.shape == (3,)
    assert not model.training


def test_fit_sales_model_keeps_normalization(scenario_records):
    encoded = preprocess_sales_records(scenario_records)

    trained = fit_sales_model(encoded, epochs=5, random_seed=1)

    assert isinstance(trained, TrainedModel)
    assert trained.params == encoded.params
    assert len(trained.history["loss"]) == 5
    assert trained.final_loss == trained.history["loss"][-1]


def test_fit_sales_model_builds_a_fresh_model_each_call(scenario_records):
    encoded = preprocess_sales_records(scenario_records)

    first = fit_sales_model(encoded, epochs=2)
    second = fit_sales_model(encoded, epochs=2)

    assert first.model is not second.model


def test_seeded_fits_are_reproducible(scenario_records):
    encoded = preprocess_sales_records(scenario_records)

    first = fit_sales_model(encoded, epochs=10, random_seed=7)
    second = fit_sales_model(encoded, epochs=10, random_seed=7)

    assert first.history["loss"] == pytest.approx(second.history["loss"])


def test_async_training(scenario_records):
    encoded = preprocess_sales_records(scenario_records)

    trained = asyncio.run(train_sales_model(encoded, epochs=3))

    assert len(trained.history["loss"]) == 3


def test_async_training_rejects_small_datasets_before_fitting(monkeypatch):
    records = make_records([{"id": "1", "short_desc": "A", "created": "01/05", "total_sold": "10"}])
    encoded = preprocess_sales_records(records)

    def fail_fit(*args, **kwargs):
        raise AssertionError("training should not start")

    monkeypatch.setattr("sales_forecast.training.trainer.fit_sales_model", fail_fit)

    with pytest.raises(InsufficientDataError):
        asyncio.run(train_sales_model(encoded, epochs=3))
