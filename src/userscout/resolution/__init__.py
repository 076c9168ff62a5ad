"""Signal clustering and merging.

Groups raw signals by merge key and folds each cluster into a single
candidate person record.
"""

from userscout.resolution.merge_key import (
    MergeRule,
    cluster_signals,
    get_merge_key,
    normalize,
    normalize_linkedin,
)
from userscout.resolution.merger import (
    ResolutionInvariantError,
    SignalMerger,
    user_id_for,
)

__all__ = [
    # Merge key exports
    "MergeRule",
    "cluster_signals",
    "get_merge_key",
    "normalize",
    "normalize_linkedin",
    # Merger exports
    "ResolutionInvariantError",
    "SignalMerger",
    "user_id_for",
]
