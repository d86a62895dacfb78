import pytest

from league.logic.enums import LeagueErrorCode
from league.logic.exceptions import InvalidInputError, InvalidPlayerError, InvalidScoreError
from league.logic.validation import determine_winner, require_text, validate_players, validate_scores


class TestRequireText:
    def test_strips_value(self):
        assert require_text("  Gangnam Court ", "place") == "Gangnam Court"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_rejected(self, value):
        with pytest.raises(InvalidInputError, match="place must not be empty"):
            require_text(value, "place")


class TestValidatePlayers:
    def test_distinct_players_pass(self):
        validate_players("user-1", "user-2")

    def test_missing_opponent_rejected(self):
        with pytest.raises(InvalidPlayerError) as exc_info:
            validate_players("user-1", "")
        assert exc_info.value.code == LeagueErrorCode.INVALID_PLAYERS

    def test_same_player_rejected(self):
        with pytest.raises(InvalidPlayerError, match="against themselves"):
            validate_players("user-1", "user-1")


class TestValidateScores:
    def test_valid_scores_pass(self):
        validate_scores(21, 0)

    def test_tie_rejected_with_tied_code(self):
        with pytest.raises(InvalidScoreError) as exc_info:
            validate_scores(18, 18)
        assert exc_info.value.code == LeagueErrorCode.TIED_SCORE

    def test_negative_rejected(self):
        with pytest.raises(InvalidScoreError, match="non-negative") as exc_info:
            validate_scores(-1, 5)
        assert exc_info.value.code == LeagueErrorCode.INVALID_SCORE

    @pytest.mark.parametrize("score", ["21", 21.0, True, None])
    def test_non_integer_rejected(self, score):
        with pytest.raises(InvalidScoreError, match="must be an integer"):
            validate_scores(score, 3)


class TestDetermineWinner:
    def test_player1_wins_on_higher_score(self):
        assert determine_winner("H", "G", 21, 18) == "H"

    def test_player2_wins_otherwise(self):
        assert determine_winner("H", "G", 15, 21) == "G"

    def test_winner_matches_score_order_for_all_small_pairs(self):
        for s1 in range(6):
            for s2 in range(6):
                if s1 == s2:
                    continue
                assert (determine_winner("p1", "p2", s1, s2) == "p1") is (s1 > s2)
