from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

from .errors import DomainError

_HUNDRED = Decimal(100)
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ScoreOutcome:
    correct_count: int
    total_questions: int
    percentage: Decimal


def correct_option_id(question) -> Optional[int]:
    # first option flagged correct wins when a question has several
    for opt in sorted(question.options, key=lambda o: o.id):
        if opt.is_correct:
            return opt.id
    return None


def score(test, answers: Iterable[Tuple[int, int]]) -> ScoreOutcome:
    """
    Score a submission against a loaded test.

    - answers are (question_id, selected_option_id) pairs
    - answers for questions outside the test are ignored
    - only the first answer per question counts
    - the denominator is always the test's full question count
    """
    total = len(test.questions)
    if total == 0:
        raise DomainError("test has no questions")

    keys = {q.id: correct_option_id(q) for q in test.questions}

    correct = 0
    seen: set[int] = set()
    for question_id, selected_option_id in answers:
        if question_id not in keys or question_id in seen:
            continue
        seen.add(question_id)

        key = keys[question_id]
        if key is not None and selected_option_id == key:
            correct += 1

    pct = (Decimal(correct) / Decimal(total) * _HUNDRED).quantize(_CENTS, rounding=ROUND_HALF_UP)
    return ScoreOutcome(correct_count=correct, total_questions=total, percentage=pct)
