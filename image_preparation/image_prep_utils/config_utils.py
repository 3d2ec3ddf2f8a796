"""
Utility functions for handling configuration files.
"""
import importlib.util
import logging
import os

from image_preparation.image_prep_utils.image_utils import COMPRESSION_MODES



def load_config(path: str) -> dict:
    """
    Load a Python config file that defines GLOBAL_PARAM.

    Parameters
    ----------
    path : str
        Path to the config file (e.g. configs/example_config_nnbar.py).

    Returns
    -------
    dict
        The GLOBAL_PARAM dictionary from the config file.

    Raises
    ------
    FileNotFoundError
        If the config file does not exist.
    AttributeError
        If the config file does not define GLOBAL_PARAM.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file {path} does not exist.")

    spec = importlib.util.spec_from_file_location("config", path)
    config = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(config)

    if not hasattr(config, "GLOBAL_PARAM"):
        raise AttributeError("Config file must define GLOBAL_PARAM")

    return config.GLOBAL_PARAM



def check_config(config_file: dict, logger: logging.Logger) -> bool:
    """
    Check the config file for the most important errors.

    Parameters
    ----------
    config_file: dict
        The configuration file to check
    logger: logging.Logger
        Logging info, warnings and errors.

    Returns
    -------
    config_validated
        Boolean value whether or not the config file is valid.
    """
    config_validated = True

    # Validation 1: Are the core parameters present? -> critical
    for key in ("wire_module_label", "max_tick", "adc_cut", "event_type"):
        if key not in config_file:
            logger.error(f"Missing parameter '{key}' in config file.")
            config_validated = False
    if not config_validated:
        return False

    # Validation 2: Sensible tick range and tag -> critical
    if not isinstance(config_file['max_tick'], int) or config_file['max_tick'] <= 0:
        logger.error('max_tick must be a positive integer.')
        config_validated = False
    if not isinstance(config_file['event_type'], int):
        logger.error('event_type must be an integer.')
        config_validated = False
    if not isinstance(config_file['adc_cut'], (int, float)):
        logger.error('adc_cut must be a number.')
        config_validated = False

    # Validation 3: Known compression mode -> critical
    mode = config_file.get('compression_mode', 'sum')
    if mode not in COMPRESSION_MODES:
        logger.error(f"Unknown compression_mode '{mode}'. Use one of {COMPRESSION_MODES}.")
        config_validated = False

    # Validation 4: Do the input files exist? -> critical
    input_files = config_file.get('DIRS', {}).get('input_files', [])
    if not input_files:
        logger.error('No input files given in DIRS/input_files.')
        config_validated = False
    for file in input_files:
        if not os.path.exists(file):
            logger.error(f"Input file {file} does not exist.")
            config_validated = False

    # Validation 5: Will files be replaced?
    if config_file.get('SAVE', {}).get('replace_files', False) == False:
        logger.warning('Existing output files will not be replaced. Records are appended.')

    # Validation 6: Make sure output directory exists (or create it) -> critical
    output_dir = config_file.get('DIRS', {}).get('output_dir')
    if not output_dir:
        logger.error('No output directory given in DIRS/output_dir.')
        config_validated = False
    else:
        os.makedirs(output_dir, exist_ok=True)

    return config_validated
