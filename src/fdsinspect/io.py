"""
Input/Output Manager (JSON)
Loads the object graphs produced by the upstream FDS and Smokeview parsers.
"""
import json
import logging
import os

from fdsinspect.model.fds import FdsData
from fdsinspect.output.smv import SmvData

logger = logging.getLogger(__name__)


def load_fds_data(filepath: str) -> FdsData:
    """Load a parsed FDS input file (JSON) into an FdsData."""
    logger.info(f"Loading model from: {filepath}")
    try:
        with open(filepath, mode='r', encoding='utf-8') as f:
            data = json.load(f)
        return FdsData.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error(f"Model import failed: {e}")
        raise IOError(f"Failed to read model '{filepath}': {e}")


def load_smv_data(filepath: str) -> SmvData:
    """
    Load a parsed Smokeview index (JSON) into an SmvData. The csv files it
    lists are resolved relative to the directory of the index.
    """
    logger.info(f"Loading output index from: {filepath}")
    try:
        with open(filepath, mode='r', encoding='utf-8') as f:
            data = json.load(f)
        return SmvData.from_dict(os.path.dirname(os.path.abspath(filepath)), data)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error(f"Output index import failed: {e}")
        raise IOError(f"Failed to read output index '{filepath}': {e}")
