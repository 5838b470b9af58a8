"""
Comparison Engine

Keeps an ordered set of model snapshots and computes their step responses on
a shared time grid so they can be overlaid.

The comparison simulation is narrower than
``TimeDomainSimulator``: only the underdamped second-order closed form and
the first-order closed form are evaluated. Second-order entries with
|zeta| >= 1 and pid entries yield 0 at every sample.
"""

import copy
import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..system_model import ModelKind, SystemModel
from .time_domain_simulator import SimulationConfig, first_order_step

logger = logging.getLogger(__name__)

COLOR_PALETTE: Tuple[str, ...] = ('#2563eb', '#dc2626', '#16a34a', '#f59e0b', '#8b5cf6')


@dataclass(frozen=True)
class ComparisonEntry:
    """
    Snapshot of a model saved for comparison.

    Attributes
    ----------
    id : int
        Unique, increasing identifier
    label : str
        Display name ("System N")
    model : SystemModel
        Independent copy of the model at snapshot time
    color_index : int
        Index into ``COLOR_PALETTE``
    """
    id: int
    label: str
    model: SystemModel
    color_index: int

    @property
    def key(self) -> str:
        """Column name of this entry in the comparison series."""
        return f"system_{self.id}"

    @property
    def color(self) -> str:
        return COLOR_PALETTE[self.color_index % len(COLOR_PALETTE)]


def add_comparison_entry(entries: Sequence[ComparisonEntry], model: SystemModel,
                         entry_id: Optional[int] = None) -> List[ComparisonEntry]:
    """
    Return a new entry list with a snapshot of ``model`` appended.

    ``entry_id`` defaults to one past the largest id in ``entries``.
    """
    if entry_id is None:
        entry_id = max((e.id for e in entries), default=0) + 1
    elif any(e.id == entry_id for e in entries):
        raise ValueError(f"Comparison entry id {entry_id} already in use")

    position = len(entries)
    entry = ComparisonEntry(
        id=entry_id,
        label=f"System {position + 1}",
        model=copy.deepcopy(model),
        color_index=position % len(COLOR_PALETTE),
    )
    return list(entries) + [entry]


def remove_comparison_entry(entries: Sequence[ComparisonEntry], entry_id: int) -> List[ComparisonEntry]:
    """Return a new entry list without the entry ``entry_id`` (no-op if absent)."""
    return [e for e in entries if e.id != entry_id]


def comparison_output(model: SystemModel, t: np.ndarray) -> np.ndarray:
    """Output of one comparison entry over ``t``."""
    p = model.params
    if model.kind is ModelKind.SECOND_ORDER and abs(p.zeta) < 1:
        root = np.sqrt(1 - p.zeta ** 2)
        wd = p.wn * root
        return 1 - (np.exp(-p.zeta * p.wn * t) / root) * np.cos(wd * t - np.arctan(p.zeta / root))
    if model.kind is ModelKind.FIRST_ORDER:
        return first_order_step(t, p.k, p.tau)
    return np.zeros_like(t)


def compute_comparison_series(entries: Sequence[ComparisonEntry],
                              config: Optional[SimulationConfig] = None) -> List[Dict[str, float]]:
    """
    Merge the responses of all entries into per-time records.

    Returns
    -------
    List[Dict[str, float]]
        One record per time sample: ``{'time': t, 'system_<id>': y, ...}``
    """
    config = config if config is not None else SimulationConfig()
    t = config.time_vector()

    with np.errstate(over='ignore', invalid='ignore'):
        columns = {entry.key: comparison_output(entry.model, t) for entry in entries}

    records = []
    for i, ti in enumerate(t):
        record = {'time': float(ti)}
        for key, values in columns.items():
            record[key] = float(values[i])
        records.append(record)
    return records


class ComparisonEngine:
    """
    Ordered comparison set with automatic recomputation.

    Mutations (add/remove) and the recomputation that follows them run under
    one lock, so the cached series always matches the entry list.

    Usage:
    ------
    >>> engine = ComparisonEngine()
    >>> first = engine.add_entry(SystemModel.create('second_order', {'zeta': 0.3}))
    >>> second = engine.add_entry(SystemModel.create('second_order', {'zeta': 0.7}))
    >>> engine.series[0].keys()
    dict_keys(['time', 'system_1', 'system_2'])
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config if config is not None else SimulationConfig()
        self._entries: List[ComparisonEntry] = []
        self._series: List[Dict[str, float]] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def entries(self) -> Tuple[ComparisonEntry, ...]:
        return tuple(self._entries)

    @property
    def series(self) -> List[Dict[str, float]]:
        return [dict(record) for record in self._series]

    def add_entry(self, model: SystemModel) -> ComparisonEntry:
        """Snapshot ``model`` into the comparison set and recompute."""
        with self._lock:
            self._entries = add_comparison_entry(self._entries, model, entry_id=next(self._ids))
            self._recompute()
            entry = self._entries[-1]
        logger.info("Added %s (%s) to comparison", entry.label, entry.model.kind.value)
        return entry

    def remove_entry(self, entry_id: int) -> bool:
        """Remove an entry by id and recompute. Returns False if no such entry."""
        with self._lock:
            remaining = remove_comparison_entry(self._entries, entry_id)
            removed = len(remaining) != len(self._entries)
            self._entries = remaining
            self._recompute()
        if removed:
            logger.info("Removed comparison entry %d", entry_id)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries = []
            self._recompute()

    def _recompute(self) -> None:
        self._series = compute_comparison_series(self._entries, self.config)

    def to_dataframe(self) -> pd.DataFrame:
        """Comparison series as a DataFrame with one column per entry key."""
        with self._lock:
            columns = ['time'] + [e.key for e in self._entries]
            return pd.DataFrame(self._series, columns=columns)
