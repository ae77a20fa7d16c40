from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# typing only
type FloatArray = NDArray[np.floating]
type BoolArray = NDArray[np.bool_]
type PathCodes = NDArray[np.int64]  # one bit pattern per path, MSB = first move

# Runtime types
FloatDType = np.float64  # runtime dtype only
CodeDType = np.int64
