"""A fixed set of layouts generated up front, one active at a time.

Seeding: the root seed feeds ``random.Random(root_seed)``, which draws one
sub-seed per layout in index order. Each layout then generates from its own
``random.Random(sub_seed)``, so layout *i* is reproducible from the root seed
alone and does not depend on how much randomness earlier layouts consumed.
"""
from __future__ import annotations

import random
from typing import Any, Dict, Iterator, List, Optional, Sequence

from roomgrid.logging_utils import get_logger

from .config import LayoutConfig
from .errors import ConfigurationError, InvariantViolation
from .pipeline import Layout, build_layout

_log = get_logger("layout_set")


def derive_seeds(root_seed: int, count: int) -> List[int]:
    rng = random.Random(root_seed)
    return [rng.randrange(2**31) for _ in range(count)]


class LayoutSet:
    def __init__(self, layouts: Sequence[Layout], root_seed: Optional[int] = None):
        if not layouts:
            raise ConfigurationError("layout_count", "must be >= 1")
        self._layouts: List[Layout] = list(layouts)
        self.root_seed = root_seed
        for layout in self._layouts:
            layout.active = False
        self._index = 0
        self._layouts[0].active = True

    @classmethod
    def create(
        cls,
        count: int,
        rows: int,
        columns: int,
        spacing: float = 20.0,
        density: float = 0.05,
        seed: Optional[int] = None,
        origin=(0.0, 0.0, 0.0),
    ) -> "LayoutSet":
        cfg = LayoutConfig(rows=rows, columns=columns, spacing=spacing, density=density,
                           layout_count=count, seed=seed, origin=tuple(origin))
        return cls.from_config(cfg)

    @classmethod
    def from_config(cls, config: LayoutConfig) -> "LayoutSet":
        config.validate()
        root_seed = config.seed if config.seed is not None else random.randint(0, 2**31 - 1)
        layouts = [
            build_layout(i, config.rows, config.columns, config.spacing, config.density, sub_seed, config.origin)
            for i, sub_seed in enumerate(derive_seeds(root_seed, config.layout_count))
        ]
        _log.info(
            event="layout_set_created",
            count=len(layouts),
            rows=config.rows,
            columns=config.columns,
            density=config.density,
            root_seed=root_seed,
        )
        return cls(layouts, root_seed=root_seed)

    def __len__(self):
        return len(self._layouts)

    def __iter__(self) -> Iterator[Layout]:
        return iter(self._layouts)

    def __getitem__(self, index: int) -> Layout:
        return self._layouts[index]

    @property
    def active_index(self) -> int:
        return self._index

    @property
    def active(self) -> Layout:
        return self._layouts[self._index]

    def advance(self) -> Layout:
        """Deactivate the current layout and activate the next one (wrapping)."""
        previous = self._index
        return self._switch((previous + 1) % len(self._layouts))

    def select(self, index: int) -> Layout:
        if isinstance(index, bool) or not isinstance(index, int):
            raise ConfigurationError("index", "must be an integer")
        if not 0 <= index < len(self._layouts):
            raise IndexError(f"layout index {index} out of range (0..{len(self._layouts) - 1})")
        return self._switch(index)

    def _switch(self, index: int) -> Layout:
        previous = self._index
        self._layouts[previous].active = False
        self._index = index
        self._layouts[index].active = True
        active_count = sum(1 for layout in self._layouts if layout.active)
        if active_count != 1:
            raise InvariantViolation(f"{active_count} layouts active after switch")
        _log.info(event="layout_switch", previous=previous, current=index, count=len(self._layouts))
        return self._layouts[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root_seed": self.root_seed,
            "count": len(self._layouts),
            "active_index": self._index,
            "layouts": [
                {
                    "index": layout.index,
                    "seed": layout.seed,
                    "active": layout.active,
                    "rooms": layout.topology.room_count,
                    "edges": len(layout.connections),
                }
                for layout in self._layouts
            ],
        }


__all__ = ["LayoutSet", "derive_seeds"]
