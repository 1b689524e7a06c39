"""Tests for the search/filter/sort/paginate pipeline."""

import pytest
from pydantic import ValidationError

from ghexplore.core.view import (
    PAGE_SIZE,
    ViewState,
    available_languages,
    filter_and_sort,
    profile_stats,
    recompute,
    total_pages,
)


@pytest.fixture
def repos(make_repo):
    return [
        make_repo(1, "react-dashboard", description="A React admin app", language="TypeScript",
                  stargazers_count=40, updated_at="2024-03-01T00:00:00Z", created_at="2019-05-01T00:00:00Z"),
        make_repo(2, "dotfiles", language="Shell", stargazers_count=2,
                  updated_at="2024-06-01T00:00:00Z", created_at="2015-01-01T00:00:00Z"),
        make_repo(3, "ml-notes", description=None, language="Python", topics=["machine-learning", "notes"],
                  stargazers_count=40, updated_at="2023-01-01T00:00:00Z", created_at="2021-01-01T00:00:00Z"),
        make_repo(4, "Zed", description="editor configs", language=None, stargazers_count=7,
                  updated_at="2022-01-01T00:00:00Z", created_at="2022-01-01T00:00:00Z"),
        make_repo(5, "api-server", description="a react app backend", language="Python", stargazers_count=15,
                  updated_at="2024-01-01T00:00:00Z", created_at="2020-02-01T00:00:00Z"),
    ]


def names(items):
    return [r.name for r in items]


class TestViewState:
    """Mutation rules."""

    def test_defaults(self):
        s = ViewState()
        assert (s.search, s.language, s.sort_by, s.sort_direction, s.page) == ("", "all", "stars", "desc", 1)

    def test_page_change_kept(self):
        assert ViewState().update(page=3).page == 3

    def test_other_changes_reset_page(self):
        s = ViewState().update(page=4)
        assert s.update(search="x").page == 1
        assert s.update(language="Python").page == 1
        assert s.update(sort_by="name").page == 1

    def test_update_returns_new_state(self):
        s = ViewState()
        t = s.update(search="x")
        assert s.search == "" and t.search == "x"

    def test_update_coerces_like_constructor(self):
        assert ViewState().update(page="2").page == 2

    @pytest.mark.parametrize("changes", [
        {"page": None},
        {"page": "two"},
        {"sort_direction": "DOWN"},
        {"bogus": 1},
    ])
    def test_update_rejects_invalid_values(self, changes):
        with pytest.raises(ValidationError):
            ViewState().update(**changes)


class TestSearch:
    """Stage 1: text search."""

    def test_case_insensitive_description_match(self, repos):
        out = filter_and_sort(repos, ViewState(search="REACT"))
        assert set(names(out)) == {"react-dashboard", "api-server"}

    def test_matches_topics(self, repos):
        assert names(filter_and_sort(repos, ViewState(search="learning"))) == ["ml-notes"]

    def test_matches_name(self, repos):
        assert names(filter_and_sort(repos, ViewState(search="dot"))) == ["dotfiles"]

    def test_missing_description_does_not_break_search(self, repos):
        assert filter_and_sort(repos, ViewState(search="zzz")) == []


class TestLanguageFilter:
    """Stage 2: language filter."""

    def test_exact_match(self, repos):
        out = filter_and_sort(repos, ViewState(language="Python"))
        assert set(names(out)) == {"ml-notes", "api-server"}

    def test_case_sensitive(self, repos):
        assert filter_and_sort(repos, ViewState(language="python")) == []

    def test_all_sentinel_keeps_everything(self, repos):
        assert len(filter_and_sort(repos, ViewState(language="all"))) == len(repos)

    def test_search_and_language_combined(self, repos):
        out = filter_and_sort(repos, ViewState(search="react", language="Python"))
        assert names(out) == ["api-server"]


class TestSort:
    """Stage 3: sorting."""

    def test_stars_desc_with_stable_ties(self, repos):
        out = filter_and_sort(repos, ViewState(sort_by="stars", sort_direction="desc"))
        # react-dashboard and ml-notes tie on 40 and keep collection order
        assert names(out) == ["react-dashboard", "ml-notes", "api-server", "Zed", "dotfiles"]

    def test_stars_asc_with_stable_ties(self, repos):
        out = filter_and_sort(repos, ViewState(sort_by="stars", sort_direction="asc"))
        assert names(out) == ["dotfiles", "Zed", "api-server", "react-dashboard", "ml-notes"]

    def test_updated(self, repos):
        out = filter_and_sort(repos, ViewState(sort_by="updated", sort_direction="desc"))
        assert names(out) == ["dotfiles", "react-dashboard", "api-server", "ml-notes", "Zed"]

    def test_created_asc(self, repos):
        out = filter_and_sort(repos, ViewState(sort_by="created", sort_direction="asc"))
        assert names(out) == ["dotfiles", "react-dashboard", "api-server", "ml-notes", "Zed"]

    def test_name_is_case_insensitive(self, repos):
        out = filter_and_sort(repos, ViewState(sort_by="name", sort_direction="asc"))
        assert names(out) == ["api-server", "dotfiles", "ml-notes", "react-dashboard", "Zed"]

    def test_two_item_example(self, make_repo):
        b = make_repo(1, "b", stargazers_count=5)
        a = make_repo(2, "a", stargazers_count=10)
        assert names(filter_and_sort([b, a], ViewState(sort_by="stars", sort_direction="desc"))) == ["a", "b"]
        assert names(filter_and_sort([b, a], ViewState(sort_by="name", sort_direction="asc"))) == ["a", "b"]

    def test_name_punctuation_before_digits(self, make_repo):
        items = [make_repo(1, "a1"), make_repo(2, "a-b"), make_repo(3, "a_b"), make_repo(4, "ab")]
        out = filter_and_sort(items, ViewState(sort_by="name", sort_direction="asc"))
        assert names(out) == ["a_b", "a-b", "a1", "ab"]

    def test_name_accents_are_secondary(self, make_repo):
        items = [make_repo(1, "ed"), make_repo(2, "\u00e9a"), make_repo(3, "eb"), make_repo(4, "ea")]
        out = filter_and_sort(items, ViewState(sort_by="name", sort_direction="asc"))
        assert names(out) == ["ea", "\u00e9a", "eb", "ed"]

    def test_unknown_sort_key_keeps_order(self, repos):
        out = filter_and_sort(repos, ViewState(sort_by="popularity"))
        assert out == repos

    def test_input_not_mutated(self, repos):
        before = list(repos)
        filter_and_sort(repos, ViewState(sort_by="name", sort_direction="asc"))
        assert repos == before


class TestRecompute:
    """Stage 4: pagination and the full pipeline."""

    def test_empty_collection_has_one_page(self):
        result = recompute([], ViewState())
        assert result.items == []
        assert result.total_filtered == 0
        assert result.total_pages == 1
        assert result.page == 1

    def test_pages_of_twelve(self, make_repo):
        items = [make_repo(i, f"r{i:02d}", stargazers_count=100 - i) for i in range(30)]
        first = recompute(items, ViewState())
        third = recompute(items, ViewState(page=3))
        assert PAGE_SIZE == 12
        assert first.total_pages == 3
        assert len(first.items) == 12
        assert names(third.items) == [f"r{i:02d}" for i in range(24, 30)]

    def test_page_clamped_high_and_low(self, make_repo):
        items = [make_repo(i, f"r{i}") for i in range(13)]
        assert recompute(items, ViewState(page=99)).page == 2
        assert recompute(items, ViewState(page=0)).page == 1
        assert recompute(items, ViewState(page=-5)).items == recompute(items, ViewState()).items

    def test_idempotent(self, repos):
        state = ViewState(search="a", sort_by="name", sort_direction="asc")
        assert recompute(repos, state) == recompute(repos, state)

    def test_custom_page_size(self, repos):
        result = recompute(repos, ViewState(page=2), page_size=2)
        assert result.total_pages == 3
        assert len(result.items) == 2

    @pytest.mark.parametrize("count,expected", [(0, 1), (1, 1), (12, 1), (13, 2), (24, 2), (25, 3)])
    def test_total_pages(self, count, expected):
        assert total_pages(count) == expected


class TestDerivedLists:

    def test_languages_from_unfiltered_collection(self, repos):
        assert available_languages(repos) == ["Python", "Shell", "TypeScript"]

    def test_languages_empty(self):
        assert available_languages([]) == []

    def test_profile_stats(self, repos):
        stats = profile_stats(repos)
        assert stats.total_stars == 104
        assert stats.languages == ["TypeScript", "Shell", "Python"]
