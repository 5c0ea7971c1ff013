from __future__ import annotations

from typing import List, Optional, Sequence

from certify.models import QuizQuestion, QuizResult


class EmptyQuizError(ValueError):
    pass


def round_half_up_percentage(correct: int, total: int) -> int:
    """
    round(100 * correct / total) with halves rounded up, in integer math.

    Python's round() uses banker's rounding (12.5 -> 12), quizzes are
    expected to round 12.5 -> 13.
    """
    return (200 * correct + total) // (2 * total)


def normalize_answers(
    answers: Sequence[Optional[int]],
    total: int,
) -> List[Optional[int]]:
    """Pad to one slot per question; negative indexes mean "no answer"."""
    if len(answers) > total:
        raise ValueError(f"Got {len(answers)} answers for {total} questions")

    out: List[Optional[int]] = []
    for a in answers:
        if a is None or a < 0:
            out.append(None)
        else:
            out.append(int(a))
    out.extend([None] * (total - len(out)))
    return out


def score_quiz(
    questions: Sequence[QuizQuestion],
    answers: Sequence[Optional[int]],
    passing_score: int,
) -> QuizResult:
    total = len(questions)
    if total == 0:
        raise EmptyQuizError("Cannot score a quiz with no questions")

    selected = normalize_answers(answers, total)
    for i, (q, a) in enumerate(zip(questions, selected), start=1):
        if a is not None and a >= len(q.options):
            raise ValueError(
                f"Answer {a} to question {i} out of range 0-{len(q.options) - 1}"
            )

    correct = sum(
        1
        for q, a in zip(questions, selected)
        if a is not None and a == q.correct_answer_index
    )

    percentage = round_half_up_percentage(correct, total)

    return QuizResult(
        total_questions=total,
        correct_answers=correct,
        score_percentage=percentage,
        passed=percentage >= passing_score,
    )
