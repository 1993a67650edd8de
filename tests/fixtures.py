"""
Shared helpers for building hierarchy test files.
"""

import json
import random
from pathlib import Path
from typing import Dict, List, Optional


def address_payload(address: Dict[str, str], name: Optional[str] = None) -> str:
    """JSON payload in the geocoder hierarchy layout."""
    default = {'address': address}
    if name is not None:
        default['name'] = name
    return json.dumps({'properties': {'locales': {'default': default}}}, sort_keys=True)


def write_lines(directory: str, lines: List[str], filename: str = 'hierarchy.jsonl') -> str:
    path = Path(directory) / filename
    with open(path, 'w', encoding='utf-8') as f:
        for line in lines:
            f.write(line + '\n')
    return str(path)


def generate_lines(count: int, seed: int = 7) -> List[str]:
    """
    Build a mixed dataset: valid records over the whole signed id range,
    sentinel records, malformed lines, blank lines and a few repeated lines.
    """
    rng = random.Random(seed)
    ids = []
    seen = set()
    while len(ids) < count:
        osm_id = rng.randint(-(1 << 63), (1 << 63) - 1)
        if osm_id not in seen:
            seen.add(osm_id)
            ids.append(osm_id)
    levels = ['country', 'region', 'locality', 'street', 'building']

    lines = []
    for n, osm_id in enumerate(ids):
        if n % 41 == 0:
            lines.append('')
        if n % 37 == 0:
            lines.append(f'bad{n} {{}}')
            continue
        if n % 43 == 0:
            lines.append(f'{osm_id} {{"properties": ')
            continue
        if n % 53 == 0:
            lines.append(f'{osm_id} {{"type": "count"}}')
            continue

        depth = rng.randint(1, len(levels))
        address = {level: f'{level}-{rng.randint(0, 50)}' for level in levels[:depth]}
        name = address[levels[depth - 1]] if n % 5 else f'other-{n}'
        line = f'{osm_id} {address_payload(address, name)}'
        lines.append(line)
        if n % 97 == 0:
            lines.append(line)

    return lines
