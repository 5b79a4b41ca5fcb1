# -*- coding: utf-8 -*-
import logging
from dataclasses import asdict

import wandb

from fraud_detection.shared.NNModel import SimpleMLP, compile_model, describe_model, save_model
from fraud_detection.shared.Scorer import Scorer
from fraud_detection.shared.Splitter import get_train_test_dataset
from fraud_detection.shared.VarianceAugmenter import augment_train_dataset
from fraud_detection.shared.helper import load_data_from_file, min_class_distance
from fraud_detection.shared.logger_config import setup_logger, TqdmLogger, TrainingLog
from fraud_detection.shared.train import train_model
from .utils import parse_arguments, setup_seed

logger = logging.getLogger()


def run(argv=None):
    # Parse command line arguments
    config = parse_arguments(argv)

    # Set up logging
    setup_logger(is_verbose=config.verbose)
    tqdm_logger = TqdmLogger(logger)
    training_log = TrainingLog(config.log_file)

    # Set random seed for reproducibility
    setup_seed(config.seed)

    # Load, split and augment the dataset before anything is trained
    dataset = load_data_from_file(config.filepath, config.delimiter)
    if config.min_distance:
        logger.info(f"Minimal distance between fraud and legitimate samples: {min_class_distance(dataset)}")

    train_orig, test_set = get_train_test_dataset(dataset, config.test_set_size)
    train_set = augment_train_dataset(train_orig, config.variance_magnitude)

    # Initialize W&B logging if enabled
    wandb_config = config.get_wandb_config()
    if wandb_config["wandb_logging"]:
        wandb.init(project=wandb_config["wandb_project"], name=wandb_config["wandb_name"],
                   config=config.get_params(), mode=wandb_config["wandb_mode"])

    model = SimpleMLP.build(dataset.num_features, num_classes=dataset.num_classes)
    compile_model(model, optimizer=config.optimizer, learning_rate=config.learning_rate)

    training_log.append("________________________________________________________")
    training_log.append(str(config.get_params()))
    training_log.append(describe_model(model))

    training_config = config.get_training_config()
    scorer = Scorer(training_config.positive_class, beta=training_config.beta,
                    class_names=training_config.class_names)

    train_model(model, train_set, test_set, training_config, scorer, training_log, save_model,
                round_callback=_log_round if config.wandb_logging else None, tqdm_file=tqdm_logger)

    if config.wandb_logging:
        wandb.log({"best_f_beta": scorer.tracker.best_score})
        wandb.finish()

    return scorer.tracker.best_score


def _log_round(evaluation_round):
    wandb.log(asdict(evaluation_round))


if __name__ == '__main__':
    run()
