from dataclasses import dataclass
import numpy as np


SPLIT_METHODS = ("median", "mean")


@dataclass
class BVHConfig:
    leaf_size: int = 1
    split_method: str = "median"
    # relative padding applied to every bounding box half extent
    margin: float = 1e-9

    def validate(self) -> None:
        if int(self.leaf_size) < 1:
            raise ValueError("leaf_size must be >= 1")
        if self.split_method not in SPLIT_METHODS:
            raise ValueError(f"split_method must be one of {SPLIT_METHODS}")
        if not np.isfinite(self.margin) or self.margin < 0.0:
            raise ValueError("margin must be non-negative and finite")


@dataclass
class DistanceOptions:
    relative_error: float = 0.0
    absolute_error: float = 0.0
    enable_nearest_points: bool = True

    def validate(self) -> None:
        if not np.isfinite(self.relative_error) or self.relative_error < 0.0:
            raise ValueError("relative_error must be non-negative and finite")
        if not np.isfinite(self.absolute_error) or self.absolute_error < 0.0:
            raise ValueError("absolute_error must be non-negative and finite")

    def tolerance(self, best: float) -> float:
        if not np.isfinite(best):
            return self.absolute_error
        return max(self.relative_error * best, self.absolute_error)


@dataclass
class CollisionRequest:
    max_contacts: int = 1

    def validate(self) -> None:
        if int(self.max_contacts) < 1:
            raise ValueError("max_contacts must be >= 1")
