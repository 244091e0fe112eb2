from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'rooms': 0,
        'spanning_edges': 0,
        'extra_edges': 0,
        'max_extra_edges': 0,
        'candidates_already_present': 0,
        'candidates_degree_capped': 0,
        'doorways': 0,
        'runtime_ms': 0.0,
    }
