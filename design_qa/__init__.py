"""Design QA: compare a design frame against a rendered website."""

__version__ = "0.1.0"

from .comparator import DesignComparator, compare, compare_sync  # noqa: E402
from .config import DesignQAConfig, load_config  # noqa: E402
from .errors import DesignQAError, ErrorCategory, InvalidElementError  # noqa: E402
from .models import (  # noqa: E402
    BoundingBox,
    ComparisonResult,
    DesignElement,
    Difference,
    DifferenceKind,
    ElementPair,
    ElementRole,
    Readiness,
    RenderedElement,
    Severity,
    StyleAttributes,
)

__all__ = [
    "__version__",
    "DesignComparator",
    "compare",
    "compare_sync",
    "DesignQAConfig",
    "load_config",
    "DesignQAError",
    "ErrorCategory",
    "InvalidElementError",
    "BoundingBox",
    "ComparisonResult",
    "DesignElement",
    "Difference",
    "DifferenceKind",
    "ElementPair",
    "ElementRole",
    "Readiness",
    "RenderedElement",
    "Severity",
    "StyleAttributes",
]
