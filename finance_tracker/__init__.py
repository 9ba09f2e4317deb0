"""Top-level package for the finance tracker.

The package holds the pure computation layer behind the tracking
dashboard.  The primary modules are:

* ``money`` – currency masking, parsing and formatting
* ``dates`` – due-date arithmetic and month classification
* ``records`` – record types and the formulas deriving their totals
* ``filters`` – search/period filtering and aggregation of record lists
* ``summaries`` – summary cards, chart series and due-date reminders

None of these modules perform I/O; callers fetch and persist records and
hand plain lists to these functions.  A command-line summary of an
exported snapshot is available via ``scripts/summarize_records.py``.
"""

from . import config  # noqa: F401  # re-exported for convenience
from . import dates  # noqa: F401
from . import filters  # noqa: F401
from . import money  # noqa: F401
from . import records  # noqa: F401
from . import summaries  # noqa: F401

__all__ = ["config", "dates", "filters", "money", "records", "summaries"]
