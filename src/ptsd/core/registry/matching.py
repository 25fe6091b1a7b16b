"""
Feature id inference from file names.
"""

from collections.abc import Iterable


def match_feature_id(name: str, feature_ids: Iterable[str]) -> str:
    """
    Find the feature a bare file name belongs to.

    Prefers an exact match, then the longest feature id contained in the
    name, so a file for "authorization" is never attributed to "auth".

    Args:
        name: File name with test/extension conventions already stripped
        feature_ids: Registered feature ids

    Returns:
        Matching feature id, or "" if none matches

    Example:
        >>> match_feature_id("authorization", ["auth", "authorization"])
        'authorization'
        >>> match_feature_id("auth_handlers", ["auth", "billing"])
        'auth'
    """
    ids = [fid for fid in feature_ids if fid]
    if name in ids:
        return name

    best = ""
    for fid in ids:
        if fid in name and len(fid) > len(best):
            best = fid
    return best
