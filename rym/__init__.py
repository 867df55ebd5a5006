__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'rym'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .app import *
from .binder import *
from .config import *
from .dispatcher import *
from .faults import *
from .index import *
from .loader import *
from .options import *
from .tasks import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the task base class
__all__ += app.__all__  # type: ignore[attr-defined]
# Load the exposed API of the binder
__all__ += binder.__all__  # type: ignore[attr-defined]
# Load the exposed API of the configuration
__all__ += config.__all__  # type: ignore[attr-defined]
# Load the exposed API of the dispatcher
__all__ += dispatcher.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the task index
__all__ += index.__all__  # type: ignore[attr-defined]
# Load the exposed API of the loader
__all__ += loader.__all__  # type: ignore[attr-defined]
# Load the exposed API of the option schemas
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the task descriptors
__all__ += tasks.__all__  # type: ignore[attr-defined]
