# Static brand dictionary for the word chain game.
# Entries in brands.yaml are either a bare name or a mapping with a `name`
# field; order is significant (first entry wins ties during lookup).

from pathlib import Path
from typing import List, Optional

import yaml

from ..matching import normalize_brands
from ..models import Brand


def load_brands(path: Optional[Path] = None) -> List[Brand]:
    '''
    Load and normalize a brand dictionary from a YAML list.
    Defaults to the bundled brands.yaml.
    '''
    path = Path(path) if path is not None else _DATA_FILE
    if not path.exists():
        raise FileNotFoundError(f"Brand dictionary not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, list):
        raise ValueError(f"Brand dictionary must be a list of entries: {path}")

    return normalize_brands(data)


def get_brands() -> List[Brand]:
    '''
    Returns the bundled brand dictionary, loading it on first use.
    '''
    global _BRANDS
    if _BRANDS is None:
        _BRANDS = load_brands()
    return _BRANDS


_DATA_FILE = Path(__file__).parent / "brands.yaml"
_BRANDS: Optional[List[Brand]] = None
