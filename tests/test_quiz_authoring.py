import pytest
from unittest.mock import MagicMock

from quizshare.core.errors import QuizValidationError
from quizshare.core.models import QuestionDraft, QuizDraft
from quizshare.core.qr_codes import PlaceholderQrEncoder
from quizshare.core.quiz_manager import QuizManager
from quizshare.core.services.quiz_builder import QuizBuilder


def _valid_question(**overrides):
    fields = {"text": "2 + 2?", "options": ["3", "4", "5", "22"], "correct_option_index": 1}
    fields.update(overrides)
    return QuestionDraft(**fields)


@pytest.fixture
def spy_manager():
    quiz_store = MagicMock()
    result_store = MagicMock()
    manager = QuizManager(quiz_store=quiz_store, result_store=result_store, qr_encoder=PlaceholderQrEncoder())
    return manager, quiz_store


class TestQuizBuilder:
    def test_builds_normalized_quiz(self, sample_draft):
        ids = iter(["quiz-id", "q-a", "q-b"])
        quiz = QuizBuilder(id_factory=lambda: next(ids)).build(sample_draft)
        assert quiz.id == "quiz-id"
        assert quiz.title == "Capitals"
        assert quiz.description == "European capitals"
        assert [q.id for q in quiz.questions] == ["q-a", "q-b"]
        assert [q.text for q in quiz.questions] == ["Capital of France?", "Capital of Spain?"]
        assert quiz.questions[0].correct_option_index == 1
        assert quiz.created_at.tzinfo is not None

    def test_preserves_question_order_and_given_ids(self):
        draft = QuizDraft(
            title="Order",
            questions=[_valid_question(id="z", text="last?"), _valid_question(id="a", text="first?")],
        )
        quiz = QuizBuilder().build(draft)
        assert [(q.id, q.text) for q in quiz.questions] == [("z", "last?"), ("a", "first?")]

    def test_strips_options(self):
        quiz = QuizBuilder().build(QuizDraft(title="t", questions=[_valid_question(options=[" a ", "b", "c", "d "])]))
        assert quiz.questions[0].options == ["a", "b", "c", "d"]

    def test_missing_description_becomes_empty(self):
        quiz = QuizBuilder().build(QuizDraft(title="t", questions=[_valid_question()]))
        assert quiz.description == ""

    @pytest.mark.parametrize(
        "draft, message",
        [
            (QuizDraft(title="", questions=[]), "title"),
            (QuizDraft(title="   ", questions=[]), "title"),
            (QuizDraft(title="Quiz", questions=[]), "at least one question"),
            (QuizDraft(title="Quiz", questions=[_valid_question(text="  ")]), "must have text"),
            (QuizDraft(title="Quiz", questions=[_valid_question(options=["a", "b", "c"])]), "exactly 4"),
            (QuizDraft(title="Quiz", questions=[_valid_question(options=["a", "b", "c", "d", "e"])]), "exactly 4"),
            (QuizDraft(title="Quiz", questions=[_valid_question(options=["a", "", "c", "d"])]), "options must be filled"),
            (QuizDraft(title="Quiz", questions=[_valid_question(correct_option_index=4)]), "between 0 and 3"),
            (QuizDraft(title="Quiz", questions=[_valid_question(correct_option_index=-1)]), "between 0 and 3"),
            (QuizDraft(title="Quiz", questions=[_valid_question(id="x"), _valid_question(id="x")]), "Duplicate"),
        ],
    )
    def test_rejects_invalid_drafts(self, draft, message):
        with pytest.raises(QuizValidationError, match=message):
            QuizBuilder().build(draft)


class TestCreateQuiz:
    def test_persists_valid_quiz(self, spy_manager, sample_draft):
        manager, quiz_store = spy_manager
        quiz = manager.create_quiz(sample_draft)
        quiz_store.create.assert_called_once_with(quiz)

    def test_empty_title_rejected_before_persistence(self, spy_manager, sample_draft):
        manager, quiz_store = spy_manager
        sample_draft.title = ""
        with pytest.raises(QuizValidationError):
            manager.create_quiz(sample_draft)
        quiz_store.create.assert_not_called()

    def test_empty_option_rejected_before_persistence(self, spy_manager):
        manager, quiz_store = spy_manager
        draft = QuizDraft(title="One question", questions=[_valid_question(options=["a", "b", " ", "d"])])
        with pytest.raises(QuizValidationError):
            manager.create_quiz(draft)
        quiz_store.create.assert_not_called()

    def test_zero_questions_rejected_before_persistence(self, spy_manager):
        manager, quiz_store = spy_manager
        with pytest.raises(QuizValidationError):
            manager.create_quiz(QuizDraft(title="Empty", questions=[]))
        quiz_store.create.assert_not_called()
