"""Tests for the fuzzy search module."""

from erwindb.search.fuzzy import fuzzy_filter, match_positions

TITLES = [
    "Select first row in each GROUP BY group",
    "How to upsert in PostgreSQL",
    "Group by with window functions",
    "Insert, on duplicate update",
]


class TestMatchPositions:
    """Test cases for match_positions function."""

    def test_subsequence(self) -> None:
        """Test positions of a scattered subsequence."""
        assert match_positions("abc", "xaxbxc") == [1, 3, 5]

    def test_case_insensitive(self) -> None:
        """Test matching ignores case."""
        assert match_positions("ABC", "abc") == [0, 1, 2]

    def test_not_a_subsequence(self) -> None:
        """Test out-of-order characters do not match."""
        assert match_positions("cba", "abc") is None
        assert match_positions("abcd", "abc") is None

    def test_positions_spell_pattern(self) -> None:
        """Test the matched characters spell the pattern."""
        text = "How to upsert in PostgreSQL"
        positions = match_positions("psql", text)

        assert positions is not None
        assert "".join(text[i].lower() for i in positions) == "psql"
        assert positions == sorted(positions)


class TestFuzzyFilter:
    """Test cases for fuzzy_filter function."""

    def test_empty_pattern(self) -> None:
        """Test an empty pattern matches nothing."""
        assert fuzzy_filter(TITLES, "", key=str) == []

    def test_only_subsequence_matches(self) -> None:
        """Test items without the pattern as a subsequence are dropped."""
        matches = fuzzy_filter(TITLES, "upsert", key=str)
        assert [m.index for m in matches] == [1]

    def test_best_first(self) -> None:
        """Test results are ordered by score."""
        matches = fuzzy_filter(TITLES, "group by", key=str)

        assert {m.index for m in matches} >= {0, 2}
        scores = [m.score for m in matches]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_input_order(self) -> None:
        """Test equal scores keep the input order."""
        matches = fuzzy_filter(["same title", "same title"], "same", key=str)
        assert [m.index for m in matches] == [0, 1]

    def test_key_function(self) -> None:
        """Test matching on a field of the items."""
        items = [{"title": "Alpha"}, {"title": "Beta"}]
        matches = fuzzy_filter(items, "bt", key=lambda item: item["title"])

        assert [m.index for m in matches] == [1]
        assert matches[0].match_indices == [0, 2]
