"""YAML loading for mockstr configuration and seed files.

Provides safe YAML file loading using ``yaml.safe_load`` to prevent
arbitrary code execution from untrusted YAML content. Used by
[MockstrConfig.from_yaml()][mockstr.core.config.MockstrConfig.from_yaml],
[RelaySimulator.from_yaml()][mockstr.relay.simulator.RelaySimulator.from_yaml],
and the CLI seed-file loader. JSON documents are valid YAML and load too.

Examples:
    ```python
    from mockstr.core.yaml import load_yaml

    config = load_yaml("config/mockstr.yaml")
    events = load_yaml("fixtures/seed.json")
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(config_path: str | Path) -> Any:
    """Load and parse a YAML (or JSON) file.

    Args:
        config_path: Path to the file (absolute or relative).

    Returns:
        The parsed document: usually a dict for configuration files and a
        list for seed files. Returns an empty dict if the file is empty.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file contains invalid YAML syntax.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return {} if data is None else data
