import json

import pytest

from tsp_heuristic.cli import build_parser, config_from_args, main, solution_to_dict
from tsp_heuristic.matching import MatchingStrategy
from tsp_heuristic.solver import TSPSolution

SQUARE_TSP = """NAME : square4
TYPE : TSP
DIMENSION : 4
EDGE_WEIGHT_TYPE : EUC_2D
NODE_COORD_SECTION
1 0 0
2 10 0
3 10 10
4 0 10
EOF
"""


@pytest.fixture
def square_file(tmp_path):
    path = tmp_path / 'square4.tsp'
    path.write_text(SQUARE_TSP)
    return str(path)


def test_json_output(square_file, capsys):
    assert main([square_file, '--json']) == 0
    records = json.loads(capsys.readouterr().out)
    assert len(records) == 1
    rec = records[0]
    assert rec['instance'] == 'square4'
    assert rec['cost'] == 40
    assert sorted(rec['tour']) == [1, 2, 3, 4]
    assert rec['tour'][0] == 1
    assert len(rec['route']) == 4


def test_text_output_and_failure_status(square_file, tmp_path, capsys):
    broken = tmp_path / 'broken.tsp'
    broken.write_text('NAME : broken\n')
    assert main([square_file, str(broken)]) == 1
    out = capsys.readouterr().out
    assert 'square4' in out
    assert 'cost=' in out
    assert 'ERROR' in out


def test_missing_file_is_reported(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.tsp')]) == 1
    assert 'ERROR' in capsys.readouterr().out


@pytest.mark.parametrize('argv, expected', [
    (['x.tsp'], (True, True, True, None)),
    (['x.tsp', '--ls', 'none'], (False, False, False, None)),
    (['x.tsp', '--ls', '2opt', '--method', 'nearest'], (True, False, True, False)),
    (['x.tsp', '--ls', 'oropt', '--method', 'christofides'], (False, True, True, True)),
])
def test_config_from_args(argv, expected):
    config = config_from_args(build_parser().parse_args(argv))
    assert (config.enable_two_opt, config.enable_or_opt, config.local_search, config.symmetric) == expected


def test_matching_and_limit_flags():
    config = config_from_args(build_parser().parse_args(['x.tsp', '--matching', 'greedy', '--limit', '2.5']))
    assert config.matching_strategy is MatchingStrategy.GREEDY
    assert config.deadline == 2.5


def test_solution_to_dict_uses_one_based_ranks():
    sol = TSPSolution(tour=[0, 2, 1], cost=9, runtime=0.1, method='christofides', improvements=2)
    out = solution_to_dict('tri', sol)
    assert out['tour'] == [1, 3, 2]
    assert 'route' not in out
    assert out['improvements'] == 2
