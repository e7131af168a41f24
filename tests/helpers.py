import numpy as np


def alpha_plane(image) -> np.ndarray:
    return np.asarray(image, dtype=np.float32)[..., 3] / 255.0


def ink_rows(image) -> np.ndarray:
    return np.nonzero(alpha_plane(image).max(axis=1) > 0)[0]


def ink_columns(image) -> np.ndarray:
    return np.nonzero(alpha_plane(image).max(axis=0) > 0)[0]
