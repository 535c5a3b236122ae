import json
import logging
import os
import sys
from pathlib import Path

import yaml
from box import ConfigBox
from box.exceptions import BoxValueError

from pafparse import logger, logging_str


def setup_logging(log_dir=None, level=logging.INFO):
    """attach console (and optionally file) handlers to the package logger

    Args:
        log_dir (str, optional): directory for `running_logs.log`. Defaults to None (console only).
        level (int, optional): logging level. Defaults to logging.INFO.
    """
    formatter = logging.Formatter(logging_str)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, "running_logs.log")))

    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def read_yaml(path_to_yaml: Path) -> ConfigBox:
    """reads yaml file and returns

    Args:
        path_to_yaml (str): path like input

    Raises:
        ValueError: if yaml file is empty

    Returns:
        ConfigBox: ConfigBox type
    """
    with open(path_to_yaml) as yaml_file:
        content = yaml.safe_load(yaml_file)
    if not content:
        raise ValueError(f"yaml file is empty: {path_to_yaml}")
    try:
        config = ConfigBox(content)
    except BoxValueError:
        raise ValueError(f"yaml file is empty: {path_to_yaml}")
    logger.info(f"yaml file: {path_to_yaml} loaded successfully")
    return config


def save_json(path: Path, data):
    """save json data

    Args:
        path (Path): path to json file
        data: data to be saved in json file
    """
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=4)

    logger.info(f"json file saved at: {path}")
