# Result types passed between training, interpretability and plotting

from typing import Dict, List, Tuple, Union

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field


class ModelResult(BaseModel):
    """Held-out metrics and per-feature importance for one trained model."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    name: str
    rmse: float = Field(ge=0)
    r2: float = Field(ge=0, le=1)
    mae: float = Field(ge=0)
    n_train: int
    n_test: int
    feature_importance: Dict[str, float]


class ShapExplanation(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, protected_namespaces=())

    method: str = "shap"
    model_name: str
    values: np.ndarray
    data: pd.DataFrame
    base_value: float

    @property
    def available(self) -> bool:
        return True

    def mean_abs(self) -> Dict[str, float]:
        """Global importance: mean |SHAP value| per feature."""
        means = np.abs(self.values).mean(axis=0)
        return {col: float(v) for col, v in zip(self.data.columns, means)}


class LimeExplanation(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    method: str = "lime"
    model_name: str
    row_index: int
    prediction: float
    intercept: float
    weights: List[Tuple[str, float]]

    @property
    def available(self) -> bool:
        return True


class ExplanationUnavailable(BaseModel):
    """Stands in for an explanation whose computation failed."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    method: str
    model_name: str
    reason: str

    @property
    def available(self) -> bool:
        return False


Explanation = Union[ShapExplanation, LimeExplanation, ExplanationUnavailable]


__all__ = [
    "ModelResult",
    "ShapExplanation",
    "LimeExplanation",
    "ExplanationUnavailable",
    "Explanation",
]
