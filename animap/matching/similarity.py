"""String similarity metrics for title matching.

similarity() returns the maximum of three independent metrics, each tuned to
a different kind of title distortion:
- normalized Levenshtein distance (character edits, prefix corruption)
- Jaro-Winkler (transpositions, shared prefixes)
- recursive common-substring percentage (reordered substrings)

All functions are pure and operate on the strings exactly as given;
similarity() lower-cases its inputs first.
"""

from typing import Tuple

from rapidfuzz.distance import Levenshtein

WINKLER_PREFIX_SCALE = 0.1
WINKLER_PREFIX_CAP = 4


def levenshtein_distance(s1: str, s2: str) -> int:
    """Single-character insert/delete/substitute edit distance."""
    return Levenshtein.distance(s1, s2)


def levenshtein_similarity(s1: str, s2: str) -> float:
    """Edit distance normalized by the longer length: 1 - d / max(len).

    Two empty strings are identical (1.0).
    """
    return Levenshtein.normalized_similarity(s1, s2)


def jaro_winkler(s1: str, s2: str, prefix_scale: float = WINKLER_PREFIX_SCALE) -> float:
    """Jaro-Winkler similarity.

    Characters match when equal and no further apart than
    max(0, floor(max(len)/2) - 1). The Jaro score
    (m/len1 + m/len2 + (m - t/2)/m) / 3 is then boosted by
    prefix_scale * L * (1 - jaro), where L is the common prefix length
    capped at 4. The prefix boost applies at every Jaro score; rapidfuzz's
    JaroWinkler only applies it above 0.7, so it is not used here.

    Args:
        s1: First string
        s2: Second string
        prefix_scale: Winkler prefix weight (default 0.1)

    Returns:
        Similarity in [0, 1]; 1.0 for two empty strings, 0.0 if only one is empty
    """
    len1, len2 = len(s1), len(s2)
    if len1 == 0:
        return 1.0 if len2 == 0 else 0.0
    if len2 == 0:
        return 0.0

    match_window = max(0, max(len1, len2) // 2 - 1)

    s1_matches = [False] * len1
    s2_matches = [False] * len2
    matches = 0

    for i in range(len1):
        start = max(0, i - match_window)
        end = min(i + match_window + 1, len2)
        for j in range(start, end):
            if s2_matches[j] or s1[i] != s2[j]:
                continue
            s1_matches[i] = True
            s2_matches[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i in range(len1):
        if not s1_matches[i]:
            continue
        while not s2_matches[k]:
            k += 1
        if s1[i] != s2[k]:
            transpositions += 1
        k += 1

    jaro = (
        matches / len1
        + matches / len2
        + (matches - transpositions / 2) / matches
    ) / 3

    prefix_length = 0
    for i in range(min(len1, len2, WINKLER_PREFIX_CAP)):
        if s1[i] != s2[i]:
            break
        prefix_length += 1

    return jaro + prefix_length * prefix_scale * (1 - jaro)


def longest_common_substring(s1: str, s2: str) -> Tuple[int, int, int]:
    """Locate the first longest common contiguous substring.

    Ties are broken by the earliest position in s1, then in s2.

    Returns:
        (start in s1, start in s2, length); length is 0 when nothing is shared
    """
    best_pos1 = best_pos2 = best_length = 0
    len1, len2 = len(s1), len(s2)

    for pos1 in range(len1):
        for pos2 in range(len2):
            length = 0
            while (
                pos1 + length < len1
                and pos2 + length < len2
                and s1[pos1 + length] == s2[pos2 + length]
            ):
                length += 1
            if length > best_length:
                best_pos1, best_pos2, best_length = pos1, pos2, length

    return best_pos1, best_pos2, best_length


def common_substring_chars(s1: str, s2: str) -> int:
    """Count characters shared by recursive longest-common-substring matching.

    The longest common substring is counted, then the procedure recurses on
    the unmatched left remainders and on the unmatched right remainders.
    """
    pos1, pos2, length = longest_common_substring(s1, s2)
    if length == 0:
        return 0

    total = length
    if pos1 and pos2:
        total += common_substring_chars(s1[:pos1], s2[:pos2])
    if pos1 + length < len(s1) and pos2 + length < len(s2):
        total += common_substring_chars(s1[pos1 + length:], s2[pos2 + length:])
    return total


def common_substring_similarity(s1: str, s2: str) -> float:
    """2 * shared characters / (len1 + len2); 0.0 when both strings are empty."""
    total_length = len(s1) + len(s2)
    if total_length == 0:
        return 0.0
    return 2 * common_substring_chars(s1, s2) / total_length


def similarity(a: str, b: str) -> float:
    """Best of the three metrics on lower-cased inputs.

    The metrics are never averaged: each one catches a different class of
    title distortion.

    Args:
        a: First string
        b: Second string

    Returns:
        Similarity in [0, 1]

    Example:
        >>> similarity("Solo Leveling", "solo leveling")
        1.0
    """
    a = (a or "").lower()
    b = (b or "").lower()
    return max(
        levenshtein_similarity(a, b),
        jaro_winkler(a, b),
        common_substring_similarity(a, b),
    )
