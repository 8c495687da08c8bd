import numpy as np
import pandas as pd

from quakewatch.ml.dataset import feature_frame


def normalize(dataset: pd.DataFrame) -> np.ndarray:
    """Standardize the five sensor columns using batch statistics.

    Sample mean and sample standard deviation (ddof=1) are taken over the
    defined cells of each column. Constant columns, columns with fewer than two
    usable values and malformed cells all come out as 0.0.
    """
    features = feature_frame(dataset)
    spread = features.std(ddof=1)
    # Rounding in the mean leaves a tiny non-zero spread on constant columns.
    spread = spread.where(features.nunique(dropna=True) > 1)
    standardized = (features - features.mean()) / spread
    matrix = standardized.to_numpy(dtype=np.float64)
    return np.nan_to_num(matrix, nan=0.0, posinf=0.0, neginf=0.0)
