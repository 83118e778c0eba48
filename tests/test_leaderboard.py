import uuid

from app.helpers.leaderboard import build_leaderboard, fetch_quiz_results
from app.helpers.quiz_answer_evaluator import QuizScore, save_quiz_result
from app.schemas.quiz_submission import QuizResultRow


def _row(score, user_id=None, name="someone"):
    return QuizResultRow(
        user_id=user_id or uuid.uuid4(),
        user_name=name,
        score=score,
        answered=1,
        total_questions=1,
    )


def test_sorted_by_score_descending():
    rows = [_row(1, name="low"), _row(9, name="high"), _row(5, name="mid")]

    board = build_leaderboard(rows)

    assert [e.user_name for e in board] == ["high", "mid", "low"]
    assert [e.rank for e in board] == [1, 2, 3]


def test_ties_share_rank_and_break_on_user_id():
    a = uuid.UUID("00000000-0000-0000-0000-00000000000a")
    b = uuid.UUID("00000000-0000-0000-0000-00000000000b")
    c = uuid.UUID("00000000-0000-0000-0000-00000000000c")
    rows = [_row(3, c, "c"), _row(7, b, "b"), _row(7, a, "a")]

    board = build_leaderboard(rows)

    assert [e.user_id for e in board] == [a, b, c]
    assert [e.rank for e in board] == [1, 1, 3]


def test_order_does_not_depend_on_input_order():
    rows = [_row(4), _row(4), _row(4), _row(2)]

    assert build_leaderboard(rows) == build_leaderboard(list(reversed(rows)))


def test_empty_leaderboard():
    assert build_leaderboard([]) == []


async def test_results_one_row_per_submitter(db, make_quiz, make_user, clock):
    quiz = await make_quiz()
    other_quiz = await make_quiz()
    ada = await make_user("ada")
    bob = await make_user("bob")
    await make_user("carol")

    await save_quiz_result(db, quiz.id, ada.id, QuizScore(5, 2, 2), clock.now)
    await save_quiz_result(db, quiz.id, bob.id, QuizScore(0, 1, 2), clock.now)
    await save_quiz_result(db, quiz.id, bob.id, QuizScore(2, 2, 2), clock.now)
    await save_quiz_result(db, other_quiz.id, ada.id, QuizScore(1, 1, 2), clock.now)

    rows = await fetch_quiz_results(db, quiz.id)

    by_name = {r.user_name: r for r in rows}
    assert set(by_name) == {"ada", "bob"}
    assert by_name["ada"].score == 5
    assert by_name["bob"].score == 2
    assert all(r.score >= 0 for r in rows)
