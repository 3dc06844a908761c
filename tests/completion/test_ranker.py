from firequery.completion.catalog import EDITOR_COMPLETIONS, OPERATOR_COMPLETIONS
from firequery.completion.context import analyze_context
from firequery.completion.ranker import (
    infer_kind,
    is_subsequence,
    normalize_for_match,
    rank_completions,
    score_candidate,
    score_completions,
)
from firequery.completion.suppliers import editor_completion_supplier
from firequery.domain.types.completion import AutocompleteContext, Completion, CompletionKind


def plain_context(trigger: str) -> AutocompleteContext:
    return AutocompleteContext(
        is_line_empty=False,
        trigger=trigger,
        is_in_string=False,
        is_after_dot=False,
        is_db_access=False,
    )


def rank_at_end(text: str, supplier=None, static=EDITOR_COMPLETIONS, **kwargs) -> list[Completion]:
    context = analyze_context(text, len(text))
    return rank_completions(static, supplier, context.trigger, context, **kwargs)


class CountingSupplier:
    def __init__(self, items: list[Completion]):
        self.items = items
        self.calls = 0

    def __call__(self, context: AutocompleteContext) -> list[Completion]:
        self.calls += 1
        return list(self.items)


class TestScoring:
    def test_exact_match_scores_all_components(self) -> None:
        assert score_candidate("where", "where") == 260

    def test_quoted_trigger_matches_unquoted_prefix(self) -> None:
        assert score_candidate("'use", "'users") == 200

    def test_no_match(self) -> None:
        assert score_candidate("xyz", "where") == 0
        assert score_candidate("x", None) == 0

    def test_weight_scales_score(self) -> None:
        assert score_candidate("where", "where clause", 0.5) == score_candidate("where", "where clause") / 2

    def test_helpers(self) -> None:
        assert normalize_for_match("  .'Users") == "users"
        assert is_subsequence("wc", "where clause")
        assert not is_subsequence("cw", "where clause")

    def test_infer_kind(self) -> None:
        assert infer_kind(Completion(".where")) is CompletionKind.METHOD
        assert infer_kind(Completion("db.collection")) is CompletionKind.KEYWORD
        assert infer_kind(Completion("'users")) is CompletionKind.VALUE
        assert infer_kind(Completion("FieldValue.delete")) is CompletionKind.PROPERTY
        assert infer_kind(Completion("asyncfunction")) is CompletionKind.SNIPPET
        assert infer_kind(Completion("log")) is None
        assert infer_kind(Completion(".x", kind=CompletionKind.FIELD)) is CompletionKind.FIELD


class TestRanking:
    def test_method_after_dot(self) -> None:
        items = rank_at_end("db.collection('users').wh")

        assert items[0].trigger == ".where"

    def test_exact_trigger_beats_substring_match(self) -> None:
        static = [
            Completion("myorders_archive", kind=CompletionKind.FIELD),
            Completion("orders", kind=CompletionKind.FIELD),
        ]
        scored = score_completions(static, None, "orders", plain_context("orders"))

        assert [item.completion.trigger for item in scored] == ["orders", "myorders_archive"]
        assert scored[0].score > scored[1].score

    def test_results_are_capped(self) -> None:
        assert len(rank_completions(EDITOR_COMPLETIONS, None, "e", plain_context("e"))) == 14
        assert len(rank_completions(EDITOR_COMPLETIONS, None, "e", plain_context("e"), max_results=5)) == 5

    def test_dedup_keeps_highest_score(self) -> None:
        static = [Completion(".where", "()", full_match=".where")]
        supplier = CountingSupplier([Completion(".where", "('', '==', '')", full_match=".where", priority=10)])

        items = rank_at_end("db.collection('users').wh", supplier, static)

        assert [item.dedup_key for item in items] == [".where"]
        assert items[0].priority == 10

    def test_dedup_keys_are_unique(self) -> None:
        supplier = editor_completion_supplier("users", ["age", "name"], ["users", "orders"])
        items = rank_at_end("db.", supplier)

        keys = [item.dedup_key for item in items]
        assert len(keys) == len(set(keys))

    def test_empty_trigger_outside_any_context(self) -> None:
        supplier = CountingSupplier([Completion("anything")])

        assert rank_completions(EDITOR_COMPLETIONS, supplier, "", plain_context("")) == []
        assert supplier.calls == 0

    def test_supplier_is_called_every_time(self) -> None:
        supplier = CountingSupplier([Completion(".wherever", full_match=".wherever")])

        first = rank_at_end("db.collection('a').wh", supplier)
        second = rank_at_end("db.collection('a').wh", supplier)

        assert first == second
        assert ".wherever" in [item.trigger for item in first]
        assert supplier.calls == 2

    def test_operators_for_second_where_argument(self) -> None:
        items = rank_at_end("db.collection('users').where('age', ", editor_completion_supplier())

        assert {item.kind for item in items} == {CompletionKind.OPERATOR}
        assert len(items) == len(OPERATOR_COMPLETIONS)
        assert items[0].trigger == "array-contains-any"

    def test_directions_for_second_order_by_argument(self) -> None:
        items = rank_at_end("db.collection('users').orderBy('age', ", editor_completion_supplier())

        assert [item.trigger for item in items] == ["desc", "asc"]

    def test_fields_for_first_where_argument(self) -> None:
        supplier = editor_completion_supplier("users", ["age", "name"])
        items = rank_at_end("db.collection('users').where(", supplier)

        assert {item.kind for item in items} == {CompletionKind.FIELD}
        assert {item.dedup_key for item in items} == {"'age'", '"age"', "age", "'name'", '"name"', "name"}

    def test_collections_inside_collection_string(self) -> None:
        supplier = editor_completion_supplier(collections=["users", "usage", "orders"])
        items = rank_at_end("db.collection('us", supplier)

        assert [item.trigger for item in items[:2]] == ["'users", "'usage"]
        assert all("orders" not in item.trigger for item in items)

    def test_snippets_on_empty_line(self) -> None:
        items = rank_at_end("")

        assert len(items) == 14
        assert {item.kind for item in items} == {CompletionKind.SNIPPET}
        assert [item.trigger for item in items[:2]] == ["paginate", "find"]

    def test_root_shortcut_on_db_access(self) -> None:
        items = rank_at_end("db.", editor_completion_supplier("users"))

        assert items[0].trigger == "db."
        assert items[0].dedup_key == "db.collection('users')"
