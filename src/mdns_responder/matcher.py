"""Answer and additional record selection for incoming questions."""
from __future__ import annotations

from typing import Iterator

from .records import ANY, Query, Question, Record, Response, SrvData
from .registry import Registry


def _unique(values: list[str]) -> list[str]:
    """Drop repeated values, keeping first-seen order."""
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def additionals_for(registry: Registry, answers: list[Record]) -> list[Record]:
    """Collect DNS-SD glue records for a set of answers.

    PTR answers pull in the SRV and TXT records of the instance they point
    to, and each distinct SRV target pulls in its A and AAAA records.

    Args:
        registry: Records to draw from.
        answers: Answer section already selected.

    Returns:
        Additional records, grouped as SRV/TXT per PTR then A/AAAA per target.
    """
    additionals: list[Record] = []
    for answer in answers:
        if answer.type != "PTR" or not isinstance(answer.data, str):
            continue
        additionals.extend(registry.records_for(answer.data, "SRV"))
        additionals.extend(registry.records_for(answer.data, "TXT"))

    targets = _unique([
        r.data.target for r in additionals
        if r.type == "SRV" and isinstance(r.data, SrvData)
    ])
    for target in targets:
        additionals.extend(registry.records_for(target, "A"))
        additionals.extend(registry.records_for(target, "AAAA"))
    return additionals


def answer_question(registry: Registry, question: Question) -> Response | None:
    """Build the response for a single question.

    Args:
        registry: Records to draw from.
        question: Name and type being asked for; type may be ANY.

    Returns:
        The candidate response, or None when nothing matches.
    """
    if question.type == ANY:
        answers = [r for rtype in registry.types() for r in registry.records_for(question.name, rtype)]
    else:
        answers = registry.records_for(question.name, question.type)
    if not answers:
        return None

    additionals = [] if question.type == ANY else additionals_for(registry, answers)
    return Response(answers=tuple(answers), additionals=tuple(additionals))


def answer(registry: Registry, query: Query) -> Iterator[Response]:
    """Yield a response for each answerable question of `query`, in order."""
    for question in query.questions:
        response = answer_question(registry, question)
        if response is not None:
            yield response
