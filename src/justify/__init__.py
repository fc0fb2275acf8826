"""Column-aligned printf-style output."""

from justify.lib.batch import (
    Justifier,
    default_justifier,
    flush,
    fprintf,
    printf,
    vfprintf,
    vprintf,
)
from justify.lib.config import JustifyConfig
from justify.lib.errors import JustifyError

__version__ = "0.3.0"

__all__ = [
    "JustifyConfig",
    "JustifyError",
    "Justifier",
    "__version__",
    "default_justifier",
    "flush",
    "fprintf",
    "printf",
    "vfprintf",
    "vprintf",
]
