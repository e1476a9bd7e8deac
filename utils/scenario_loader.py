"""
Scenario Loader for the Banker's Algorithm Allocator.

Loads and validates JSON scenario files describing an initial allocation state:

    {
        "description": "...",
        "processes": 5,
        "resources": 3,
        "available": [3, 3, 2],
        "maximum": [[7, 5, 3], ...],
        "allocation": [[0, 1, 0], ...]
    }

"processes" and "resources" are optional; when present they must agree
with the matrices.
"""

import json
from typing import Dict, Any

from models.allocation_state import ConstructionError
from algorithms.engine import AllocatorEngine


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is invalid."""
    pass


def load_scenario(file_path: str) -> AllocatorEngine:
    """
    Load scenario from JSON file.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        AllocatorEngine initialized with the scenario's state

    Raises:
        ScenarioLoadError: If file cannot be loaded or is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")
    except UnicodeDecodeError as e:
        raise ScenarioLoadError(f"Scenario file is not valid UTF-8: {e}")
    except OSError as e:
        raise ScenarioLoadError(f"Cannot read scenario file {file_path}: {e}")

    return build_engine(data)


def build_engine(data: Dict[str, Any]) -> AllocatorEngine:
    """
    Build an engine from already-parsed scenario data.

    Args:
        data: Scenario dictionary

    Returns:
        AllocatorEngine initialized with the scenario's state

    Raises:
        ScenarioLoadError: If required fields are missing or the state is invalid
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")

    # Validate required fields
    for field in ['available', 'maximum', 'allocation']:
        if field not in data:
            raise ScenarioLoadError(f"Scenario missing '{field}' field")

    maximum = data['maximum']
    available = data['available']
    if not isinstance(maximum, list) or not maximum:
        raise ScenarioLoadError("'maximum' must be a non-empty list of rows")
    if not isinstance(available, list):
        raise ScenarioLoadError("'available' must be a list")

    num_processes = data.get('processes', len(maximum))
    num_resources = data.get('resources', len(available))

    try:
        return AllocatorEngine(
            num_processes,
            num_resources,
            available,
            maximum,
            data['allocation']
        )
    except ConstructionError as e:
        raise ScenarioLoadError(f"Invalid scenario: {e}")


def get_scenario_description(file_path: str) -> str:
    """
    Get description from scenario file without full loading.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Description string, or empty string if not present
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return ''
    if not isinstance(data, dict):
        return ''
    return data.get('description', '')
