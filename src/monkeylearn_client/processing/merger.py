"""Merging of result lists from several processing runs."""

from __future__ import annotations

import dataclasses
from typing import Iterable

from .entities import Result


def merge_result_lists(*result_lists: Iterable[Result]) -> list[Result]:
    """Merge several result lists by document external identifier.

    Results sharing an external identifier are coalesced into one Result
    whose classifications and extractions are the concatenation of the
    members' lists, in input order. Scalar fields (text, is_error,
    error_detail) are taken from the first result seen for that identifier.

    Results without an external identifier (None or empty) are never merged
    with each other; each one is returned as its own entry.

    Groups are returned in the order their first member was seen. Input
    results are not modified.

    Args:
        *result_lists: Result sequences, e.g. the outputs of a classify and an
            extract run over the same documents.

    Returns:
        The merged results.
    """
    groups: dict[str, Result] = {}
    # Keyed entries and unidentified singletons share one ordering
    ordered: list[tuple[str | None, Result]] = []

    for results in result_lists:
        for result in results:
            key = result.external_id
            if not key:
                ordered.append((None, result))
                continue

            merged = groups.get(key)
            if merged is None:
                groups[key] = result
                ordered.append((key, result))
            else:
                groups[key] = _merge_pair(merged, result)

    return [groups[key] if key is not None else result for key, result in ordered]


def _merge_pair(first: Result, second: Result) -> Result:
    return dataclasses.replace(
        first,
        classifications=[*first.classifications, *second.classifications],
        extractions=[*first.extractions, *second.extractions],
    )
