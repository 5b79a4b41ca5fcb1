"""
Module for downloading and extracting datasets based on configuration.

This module handles the download of dataset files from specified URLs and the extraction of ZIP files.
It loads dataset configurations from a JSON file and stores the datasets in the `resources` directory,
where the pipeline expects `creditcard.csv` by default.
"""

import json
import logging
import os
from zipfile import ZipFile

import requests

from fraud_detection.shared.logger_config import setup_logger

logger = logging.getLogger()


def get_base_dir():
    """
    Returns the base directory of the repository.

    Returns:
        str: The absolute path to the base directory.
    """
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def get_path(*path_segments):
    """
    Constructs a path relative to the base directory.

    Args:
        path_segments (str): Components of the relative path.

    Returns:
        str: The absolute path.
    """
    return os.path.join(get_base_dir(), *path_segments)


def download_file(url, save_path):
    """
    Downloads a file from the specified URL and saves it to the given path.

    A partially written file is removed if the download fails.

    Args:
        url (str): The URL of the file to download.
        save_path (str): The local path where the file will be saved.

    Raises:
        requests.RequestException: If the download fails.
    """
    try:
        with requests.get(url, stream=True, timeout=60) as response:
            response.raise_for_status()
            with open(save_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
    except requests.RequestException:
        if os.path.exists(save_path):
            os.remove(save_path)
        raise
    logger.info(f"Downloaded: {save_path}")


def extract_zip(file_path, extract_to):
    """
    Extracts a ZIP file into the given directory.

    Args:
        file_path (str): The path to the ZIP file to extract.
        extract_to (str): The directory to extract the contents to.
    """
    with ZipFile(file_path, 'r') as zip_ref:
        zip_ref.extractall(extract_to)
    logger.info(f"Extracted: {file_path} to {extract_to}")


def load_config(config_path):
    """
    Loads the dataset configuration from a JSON file.

    Args:
        config_path (str): Path to the JSON configuration file.

    Returns:
        list: Dataset configurations, each a dictionary with the `url` and `target_name` of a dataset.
    """
    with open(config_path, 'r') as f:
        return json.load(f)


def download_datasets(datasets, dataset_dir):
    """
    Downloads every configured dataset that is not present in ``dataset_dir`` yet.

    Args:
        datasets (list): Dataset configurations as returned by :func:`load_config`.
        dataset_dir (str): Directory the datasets are stored in.
    """
    os.makedirs(dataset_dir, exist_ok=True)

    for dataset in datasets:
        target_path = os.path.join(dataset_dir, dataset["target_name"])

        if os.path.exists(target_path):
            logger.info(f"File already exists: {target_path}")
            continue

        download_file(dataset["url"], target_path)

        if target_path.endswith(".zip"):
            extract_zip(target_path, dataset_dir)
            os.remove(target_path)
            logger.info(f"Removed ZIP file: {target_path}")


def main():
    """Downloads and extracts the datasets of `config/datasets_config.json` into `resources`."""
    setup_logger(is_verbose=False)
    download_datasets(load_config(get_path("config", "datasets_config.json")), get_path("resources"))


if __name__ == "__main__":
    main()
