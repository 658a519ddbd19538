"""
Match Resolution Service Unit Tests
"""

from src.services.match_resolution_service import MatchResolutionService


def card(card_id, image, flipped=False, matched=False):
    return {"id": card_id, "image": image, "is_flipped": flipped, "is_matched": matched}


def player(name, score=0):
    return {"player_id": f"sid-{name}", "name": name, "score": score, "moves": 0, "hits": 0}


class TestMatchResolutionService:

    def setup_method(self):
        self.service = MatchResolutionService()
        self.room = {
            "room_id": "room1",
            "cards": [card(0, "a"), card(1, "b"), card(2, "a"), card(3, "b")],
        }

    def test_pending_cards(self):
        self.room["cards"][0].update(is_flipped=True)
        self.room["cards"][1].update(is_flipped=True, is_matched=True)

        assert [c["id"] for c in self.service.get_pending_cards(self.room)] == [0]

    def test_match_scores(self):
        alice = player("alice")
        first, _, second, _ = self.room["cards"]

        assert self.service.resolve_pair(self.room, alice, first, second) is True

        assert first["is_matched"] and second["is_matched"]
        assert (alice["score"], alice["hits"], alice["moves"]) == (1, 1, 1)

    def test_mismatch_counts_move_only(self):
        alice = player("alice")
        first, second = self.room["cards"][0], self.room["cards"][1]

        assert self.service.resolve_pair(self.room, alice, first, second) is False

        assert not first["is_matched"] and not second["is_matched"]
        assert (alice["score"], alice["hits"], alice["moves"]) == (0, 0, 1)

    def test_flip_back_skips_matched(self):
        cards = [card(0, "a", flipped=True), card(1, "b", flipped=True, matched=True)]

        self.service.flip_back(cards)

        assert cards[0]["is_flipped"] is False
        assert cards[1]["is_flipped"] is True

    def test_game_over(self):
        assert self.service.is_game_over(self.room) is False
        for c in self.room["cards"]:
            c.update(is_flipped=True, is_matched=True)
        assert self.service.is_game_over(self.room) is True

    def test_empty_deck_is_not_over(self):
        assert self.service.is_game_over({"room_id": "r", "cards": []}) is False

    def test_winner_by_score(self):
        alice, bob = player("alice", 1), player("bob", 3)

        assert self.service.determine_winner([alice, bob]) == (bob, False)

    def test_tie_goes_to_first_joined(self):
        alice, bob = player("alice", 2), player("bob", 2)

        winner, is_tie = self.service.determine_winner([alice, bob])

        assert winner is alice
        assert is_tie is True

    def test_no_players(self):
        assert self.service.determine_winner([]) == (None, False)
