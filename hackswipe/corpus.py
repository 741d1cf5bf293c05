"""
Corpus loading.

Reads the converted projects JSON (a list of records in the camelCase
shape written by the converter) into ProjectRecord instances.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from hackswipe.config import PROJECTS_PATH
from hackswipe.models.project import ProjectRecord

logger = logging.getLogger(__name__)


def parse_corpus(data: list) -> List[ProjectRecord]:
    """
    Convert decoded JSON into records, skipping invalid entries.
    
    Args:
        data: List of record dicts.
        
    Returns:
        Valid records in file order.
        
    Raises:
        ValueError: If data is not a list.
    """
    if not isinstance(data, list):
        raise ValueError(f"Corpus must be a JSON array, got {type(data).__name__}")
    
    records = []
    for position, raw in enumerate(data):
        if not isinstance(raw, dict):
            logger.warning("Skipping corpus entry %d: not an object", position)
            continue
        try:
            records.append(ProjectRecord.from_dict(raw))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping corpus entry %d: %s", position, e)
    return records


def load_corpus(path: Union[str, Path] = None) -> List[ProjectRecord]:
    """
    Load the project corpus from disk.
    
    Args:
        path: JSON file path. Defaults to config.PROJECTS_PATH.
        
    Returns:
        List of ProjectRecord (empty if the file does not exist).
        
    Raises:
        ValueError: If the file is not valid JSON or not an array.
    """
    path = Path(path if path is not None else PROJECTS_PATH)
    
    if not path.exists():
        logger.warning("Corpus file not found: %s", path)
        return []
    
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Corpus file {path} is not valid JSON: {e}") from e
    
    records = parse_corpus(data)
    logger.info("Loaded %d projects from %s", len(records), path)
    return records
