"""Instance loaders: TSPLIB ``.tsp``/``.atsp`` text and AMPL ``.dat`` matrices.

Both return a validated :class:`CostMatrix`; anything unreadable raises
:class:`MalformedInputError`.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .distances import EdgeWeightType, build_matrix
from .errors import MalformedInputError
from .matrix import CostMatrix

EDGE_WEIGHT_FORMATS = ('FULL_MATRIX', 'UPPER_ROW', 'UPPER_DIAG_ROW', 'LOWER_DIAG_ROW')

_DIMENSION_RE = re.compile(r'^\s*DIMENSION\s*:\s*(\d+)\s*$', re.MULTILINE)
_NAME_RE = re.compile(r'^\s*NAME\s*:\s*(.+?)\s*$', re.MULTILINE)
_TYPE_RE = re.compile(r'^\s*TYPE\s*:\s*(\S+)\s*$', re.MULTILINE)
_EWT_RE = re.compile(r'^\s*EDGE_WEIGHT_TYPE\s*:\s*(\S+)\s*$', re.MULTILINE)
_EWF_RE = re.compile(r'^\s*EDGE_WEIGHT_FORMAT\s*:\s*(\S+)\s*$', re.MULTILINE)


@dataclass
class TSPLIBProblem:
    name: str
    dimension: int
    edge_weight_type: EdgeWeightType
    matrix: CostMatrix
    problem_type: str = 'TSP'
    coords: Optional[np.ndarray] = None

    def route(self, tour: Sequence[int]) -> Optional[List[List[float]]]:
        """Coordinates along ``tour``; ``None`` for explicit matrices."""
        if self.coords is None:
            return None
        return [[float(x), float(y)] for x, y in self.coords[list(tour)]]


def _section_numbers(text: str, keyword: str, count: int) -> List[float]:
    pos = text.find(keyword)
    if pos < 0:
        raise MalformedInputError(f"missing {keyword}")
    numbers: List[float] = []
    for token in text[pos + len(keyword):].split():
        if len(numbers) == count:
            break
        try:
            numbers.append(float(token))
        except ValueError:
            break
    if len(numbers) < count:
        raise MalformedInputError(f"{keyword} holds {len(numbers)} values, expected {count}")
    return numbers


def _explicit_matrix(values: np.ndarray, n: int, fmt: str) -> np.ndarray:
    if fmt == 'FULL_MATRIX':
        m = values.reshape(n, n).copy()
    else:
        m = np.zeros((n, n), dtype=values.dtype)
        if fmt == 'UPPER_ROW':
            rows, cols = np.triu_indices(n, 1)
        elif fmt == 'UPPER_DIAG_ROW':
            rows, cols = np.triu_indices(n, 0)
        else:  # LOWER_DIAG_ROW
            rows, cols = np.tril_indices(n, 0)
        m[rows, cols] = values
        m[cols, rows] = values
    np.fill_diagonal(m, 0)
    return m


def _expected_count(n: int, fmt: str) -> int:
    return {
        'FULL_MATRIX': n * n,
        'UPPER_ROW': n * (n - 1) // 2,
        'UPPER_DIAG_ROW': n * (n + 1) // 2,
        'LOWER_DIAG_ROW': n * (n + 1) // 2,
    }[fmt]


def parse_tsplib(text: str) -> TSPLIBProblem:
    dim_match = _DIMENSION_RE.search(text)
    if not dim_match:
        raise MalformedInputError('incorrect "DIMENSION" key')
    n = int(dim_match.group(1))
    if n == 0:
        raise MalformedInputError('"DIMENSION" must be positive')

    ewt_match = _EWT_RE.search(text)
    if not ewt_match:
        raise MalformedInputError('incorrect "EDGE_WEIGHT_TYPE"')
    try:
        ewt = EdgeWeightType(ewt_match.group(1))
    except ValueError:
        raise MalformedInputError(f'unsupported "EDGE_WEIGHT_TYPE" value: {ewt_match.group(1)}') from None

    name_match = _NAME_RE.search(text)
    type_match = _TYPE_RE.search(text)
    name = name_match.group(1) if name_match else 'unnamed'
    problem_type = type_match.group(1) if type_match else 'TSP'

    if ewt is EdgeWeightType.EXPLICIT:
        ewf_match = _EWF_RE.search(text)
        if not ewf_match:
            raise MalformedInputError('incorrect "EDGE_WEIGHT_FORMAT"')
        fmt = ewf_match.group(1)
        if fmt not in EDGE_WEIGHT_FORMATS:
            raise MalformedInputError(f'unsupported "EDGE_WEIGHT_FORMAT" value: {fmt}')
        raw = np.array(_section_numbers(text, 'EDGE_WEIGHT_SECTION', _expected_count(n, fmt)))
        matrix = CostMatrix(_explicit_matrix(raw, n, fmt))
        return TSPLIBProblem(name, n, ewt, matrix, problem_type)

    raw = np.array(_section_numbers(text, 'NODE_COORD_SECTION', 3 * n)).reshape(n, 3)
    coords = raw[:, 1:]
    return TSPLIBProblem(name, n, ewt, build_matrix(coords, ewt), problem_type, coords)


def load_tsplib(path: str) -> TSPLIBProblem:
    with open(path, 'r') as f:
        problem = parse_tsplib(f.read())
    if problem.name == 'unnamed':
        problem.name = os.path.splitext(os.path.basename(path))[0]
    return problem


def parse_tsp_dat(path: str) -> CostMatrix:
    """Parse AMPL .dat with 'set NODES' and 'param dist :' matrix."""
    with open(path, 'r') as f:
        content = f.read().splitlines()
    rows: List[List[int]] = []
    in_matrix = False
    header_consumed = False
    for line in content:
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        if line.startswith('param dist'):
            in_matrix = True
            continue
        if not in_matrix:
            continue
        if line.startswith(';'):
            break
        parts = line.split()
        # first line after 'param dist :' is the column header
        if not header_consumed:
            header_consumed = True
            continue
        if parts[0].isdigit():
            numeric_tokens = []
            for tok in parts[1:]:
                if tok.startswith('#') or tok == ';':
                    break
                numeric_tokens.append(tok)
            try:
                rows.append([int(x) for x in numeric_tokens])
            except ValueError as e:
                raise MalformedInputError(f"bad distance row in {path}: {e}") from e
    if not rows:
        raise MalformedInputError(f"no 'param dist' matrix in {path}")
    return CostMatrix(rows)


def load_instance(path: str):
    """Dispatch on extension: ``.dat`` -> (name, matrix, None), TSPLIB -> (name, matrix, problem)."""
    name = os.path.splitext(os.path.basename(path))[0]
    if path.endswith('.dat'):
        return name, parse_tsp_dat(path), None
    problem = load_tsplib(path)
    return problem.name, problem.matrix, problem
