import pytest

from quizshare.core.errors import QuizNotFoundError
from quizshare.core.qr_codes import (
    PlaceholderQrEncoder,
    ScannableQrEncoder,
    create_qr_encoder,
    string_hash,
)
from quizshare.core.share_link import build_share_url, parse_share_url


class TestShareLink:
    def test_build_share_url(self):
        assert build_share_url("https://quiz.example", "abc123") == "https://quiz.example/?quiz=abc123"

    def test_trailing_slash_is_not_doubled(self):
        assert build_share_url("https://quiz.example/", "abc123") == "https://quiz.example/?quiz=abc123"

    def test_round_trip_with_reserved_characters(self):
        url = build_share_url("http://localhost:8000", "a b&c")
        assert parse_share_url(url) == "a b&c"

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://quiz.example/?quiz=1714550000000", "1714550000000"),
            ("https://quiz.example/?other=1&quiz=xyz", "xyz"),
            ("https://quiz.example/", None),
            ("https://quiz.example/?quiz=", None),
            ("https://quiz.example/?quiz=%20%20", None),
        ],
    )
    def test_parse_share_url(self, url, expected):
        assert parse_share_url(url) == expected


class TestStringHash:
    def test_matches_known_values(self):
        assert string_hash("") == 0
        assert string_hash("a") == 97
        assert string_hash("ab") == 97 * 31 + 98

    def test_characters_outside_bmp_use_first_code_unit(self):
        assert string_hash("\U0001F600") == 0xD83D
        assert string_hash("a\U0001F600") == 97 * 31 + 0xD83D

    def test_wraps_to_signed_32_bit(self):
        value = string_hash("http://localhost:8000/?quiz=1714550000000" * 3)
        assert -(2**31) <= value < 2**31


class TestPlaceholderEncoder:
    def test_grid_shape_and_corner_markers(self):
        grid = PlaceholderQrEncoder().encode("http://quiz.test/?quiz=1")
        assert len(grid) == 20
        assert all(len(row) == 20 for row in grid)
        for top, left in ((0, 0), (0, 17), (17, 0)):
            block = [grid[r][c] for r in range(top, top + 3) for c in range(left, left + 3)]
            assert block.count(False) == 1
            assert grid[top + 1][left + 1] is False

    def test_pattern_is_deterministic_and_hash_driven(self):
        encoder = PlaceholderQrEncoder()
        text = "http://quiz.test/?quiz=1"
        grid = encoder.encode(text)
        assert grid == encoder.encode(text)
        offset = abs(string_hash(text))
        assert grid[10][10] == ((20 + offset) % 3 == 0)

    def test_has_no_image(self):
        assert PlaceholderQrEncoder().render_svg("anything") is None

    def test_rejects_tiny_grid(self):
        with pytest.raises(ValueError):
            PlaceholderQrEncoder(grid_size=5)


class TestScannableEncoder:
    def test_matrix_is_square_with_quiet_zone(self):
        matrix = ScannableQrEncoder(border=4).encode("http://quiz.test/?quiz=abc")
        size = len(matrix)
        assert size >= 21 + 8
        assert all(len(row) == size for row in matrix)
        assert not any(matrix[0])
        # Finder pattern corner just inside the quiet zone
        assert matrix[4][4] is True

    def test_svg_output(self):
        svg = ScannableQrEncoder().render_svg("http://quiz.test/?quiz=abc")
        assert b"<svg" in svg


def test_create_qr_encoder():
    assert isinstance(create_qr_encoder("scannable"), ScannableQrEncoder)
    assert isinstance(create_qr_encoder("placeholder"), PlaceholderQrEncoder)
    with pytest.raises(ValueError):
        create_qr_encoder("laser")


class TestManagerSharing:
    def test_share_code_for_existing_quiz(self, quiz_manager, sample_draft):
        quiz = quiz_manager.create_quiz(sample_draft)
        share = quiz_manager.get_share_code(quiz.id, "http://quiz.test")
        assert share.url == f"http://quiz.test/?quiz={quiz.id}"
        assert share.strategy == "scannable"
        assert share.modules

    def test_placeholder_share_code(self, placeholder_manager, sample_draft):
        quiz = placeholder_manager.create_quiz(sample_draft)
        share = placeholder_manager.get_share_code(quiz.id, "http://quiz.test")
        assert share.strategy == "placeholder"
        assert len(share.modules) == 20
        assert placeholder_manager.render_share_svg(quiz.id, "http://quiz.test") is None

    def test_resolve_share_url(self, quiz_manager, sample_draft):
        quiz = quiz_manager.create_quiz(sample_draft)
        resolved = quiz_manager.resolve_share_url(f"https://elsewhere.example/?quiz={quiz.id}")
        assert resolved.id == quiz.id

    def test_resolve_unknown_or_missing_quiz(self, quiz_manager):
        with pytest.raises(QuizNotFoundError):
            quiz_manager.resolve_share_url("http://quiz.test/?quiz=missing")
        with pytest.raises(QuizNotFoundError):
            quiz_manager.resolve_share_url("http://quiz.test/")
