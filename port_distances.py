"""
Port-to-port distance lookup with provenance.

A missing table entry is not an error: the leg falls back to
DEFAULT_DISTANCE_NM and the lookup reports is_exact_match=False so the
report can flag it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import pandas as pd

from config import DEFAULT_DISTANCE_NM

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistanceLookup:
    distance_nm: float
    is_exact_match: bool


class DistanceTable:
    def __init__(
        self,
        distances_df: pd.DataFrame,
        default_nm: float = DEFAULT_DISTANCE_NM,
        allow_reverse: bool = True,
    ):
        """
        Args:
            distances_df: DataFrame with PORT_NAME_FROM, PORT_NAME_TO, DISTANCE
            default_nm: distance used when the table has no entry for a leg
            allow_reverse: also try (to, from) when (from, to) is absent
        """
        self.distances = distances_df.copy()
        self.default_nm = float(default_nm)
        self.allow_reverse = allow_reverse

        self._create_distance_lookup()

    @classmethod
    def from_csv(cls, path: str, **kwargs) -> "DistanceTable":
        return cls(pd.read_csv(path), **kwargs)

    def _create_distance_lookup(self):
        """Directed lookup stored exactly as the table provides it, plus the set of known ports."""
        required = {"PORT_NAME_FROM", "PORT_NAME_TO", "DISTANCE"}
        missing = required - set(self.distances.columns)
        if missing:
            raise ValueError(f"distances_df missing columns: {sorted(missing)}")

        self.distance_dict: Dict[Tuple[str, str], float] = {}

        df = self.distances[["PORT_NAME_FROM", "PORT_NAME_TO", "DISTANCE"]].copy()
        df["A"] = df["PORT_NAME_FROM"].astype(str).str.upper().str.strip()
        df["B"] = df["PORT_NAME_TO"].astype(str).str.upper().str.strip()
        df["D"] = pd.to_numeric(df["DISTANCE"], errors="coerce")

        df = df.dropna(subset=["A", "B", "D"])
        df = df[df["D"] > 0]
        df = df.drop_duplicates(subset=["A", "B"], keep="first")

        for a, b, d in df[["A", "B", "D"]].itertuples(index=False):
            self.distance_dict[(a, b)] = float(d)

        self._known_ports = sorted(set(df["A"]).union(set(df["B"])))
        self._known_port_set = set(self._known_ports)
        logger.debug("Distance table: %d legs, %d ports", len(self.distance_dict), len(self._known_ports))

    @property
    def ports(self) -> List[str]:
        return list(self._known_ports)

    def _resolve_port_name(self, port: str) -> str:
        """
        Resolve a port string to a known port in the table.
        - Exact match wins.
        - Otherwise a unique substring match (e.g. "QINGDAO" -> "QINGDAO, CHINA").
        - Otherwise the cleaned original, so the lookup falls back.
        """
        p = str(port).upper().strip()
        if not p or p in self._known_port_set:
            return p

        matches = [x for x in self._known_ports if p in x]
        if len(matches) == 1:
            return matches[0]
        return p

    def lookup(self, from_port: str, to_port: str) -> DistanceLookup:
        a = self._resolve_port_name(from_port)
        b = self._resolve_port_name(to_port)
        if a and a == b:
            return DistanceLookup(0.0, True)

        d = self.distance_dict.get((a, b))
        if d is None and self.allow_reverse:
            d = self.distance_dict.get((b, a))
        if d is None:
            logger.debug("No distance for %s -> %s; using fallback %.0f nm", a, b, self.default_nm)
            return DistanceLookup(self.default_nm, False)
        return DistanceLookup(d, True)

    __call__ = lookup
