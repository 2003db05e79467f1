"""Configuration file parser for radialProfiles runs."""

import yaml
from pathlib import Path
from typing import Union

from .schema import ProfileConfig


def load_config(config_path: Union[str, Path]) -> ProfileConfig:
    """Load and validate a profile configuration from a YAML file.

    Parameters
    ----------
    config_path : str or Path
        Path to YAML configuration file

    Returns
    -------
    ProfileConfig
        Validated configuration object

    Raises
    ------
    FileNotFoundError
        If config file does not exist
    yaml.YAMLError
        If YAML parsing fails
    ValueError
        If the file is empty or validation fails

    Examples
    --------
    >>> config = load_config("polytrope.yaml")
    >>> print(config.profile.type)
    'polytrope'
    """
    config_path = Path(config_path).resolve()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        try:
            config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(
                f"Error parsing YAML configuration file {config_path}: {e}"
            ) from e

    if config_dict is None:
        raise ValueError(f"Configuration file is empty: {config_path}")

    # Relative output paths are relative to the config file, not CWD
    for key in ("output", "log_file"):
        if config_dict.get(key) is not None:
            path = Path(config_dict[key])
            if not path.is_absolute():
                config_dict[key] = str((config_path.parent / path).resolve())

    try:
        return ProfileConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Error validating configuration from {config_path}: {e}"
        ) from e
