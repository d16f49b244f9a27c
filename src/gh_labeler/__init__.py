"""gh-labeler.

Reconciles a repository's GitHub labels with a declared label configuration:
- exact-name, alias and similar-name matching (renames instead of delete + create)
- dry-run previews
- best-effort execution that records per-label failures instead of aborting
"""

__version__ = "0.1.0"

from gh_labeler.labels import DesiredLabel
from gh_labeler.sync import LabelSyncer, ReconciliationOptions, SyncResult

__all__ = ["__version__", "DesiredLabel", "LabelSyncer", "ReconciliationOptions", "SyncResult"]
