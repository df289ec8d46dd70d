"""Tests for the filter engine and free-text search."""

from conftest import make_variant
from hypothesis import given, settings
from hypothesis import strategies as st

from variant_inspector.filters import FilterEngine
from variant_inspector.models import FacetOverrides, FilterState


def positions(records):
    return [v.position for v in records]


class TestStagePredicates:
    """Tests for the individual filter stages."""

    def test_quality_absent_flag_always_passes(self):
        from variant_inspector.filters import passes_quality

        v = make_variant(filter=None)

        assert passes_quality(v, "PASS")
        assert passes_quality(v, "LOW")
        assert passes_quality(v, "All")

    def test_quality_exact_match(self):
        from variant_inspector.filters import passes_quality

        v = make_variant(filter="PASS")

        assert passes_quality(v, "PASS")
        assert not passes_quality(v, "pass")
        assert not passes_quality(v, "LOW")

    def test_type_case_insensitive(self):
        from variant_inspector.filters import passes_type

        v = make_variant(type="SNV")

        assert passes_type(v, "snv")
        assert passes_type(v, "all")
        assert passes_type(v, "ALL")
        assert not passes_type(v, "Indel")

    def test_patient_matches_companion(self):
        from variant_inspector.filters import passes_patient

        v = make_variant(patient="P1", polymorphism=[make_variant(patient="P7")])

        assert passes_patient(v, "P1")
        assert passes_patient(v, "P7")
        assert not passes_patient(v, "P2")

    def test_missing_consequence_never_matches(self):
        from variant_inspector.filters import passes_consequence

        v = make_variant(consequence=None)

        assert passes_consequence(v, "All")
        assert not passes_consequence(v, "missense_variant")


class TestSearch:
    """Tests for the free-text search predicate."""

    def test_empty_query_matches(self):
        from variant_inspector.search import matches_search

        assert matches_search(make_variant(), "   ")

    def test_matches_mutation_label(self):
        from variant_inspector.search import matches_search

        v = make_variant(100, "A", "G")

        assert matches_search(v, "a100g")
        assert matches_search(v, " A100 ")
        assert not matches_search(v, "c100g")

    def test_matches_position_substring(self):
        from variant_inspector.search import matches_search

        assert matches_search(make_variant(123456), "345")

    def test_matches_companion_patient(self):
        from variant_inspector.search import matches_search

        v = make_variant(patient="P1", polymorphism=[make_variant(patient="Sample-XYZ")])

        assert matches_search(v, "xyz")

    def test_matches_resolved_hgvs_instead_of_raw(self):
        from variant_inspector.search import matches_search

        v = make_variant(hgvs=None)

        assert not matches_search(v, "nm_001")
        assert matches_search(v, "nm_001", lambda _: ["hgvs:NM_001234.5:c.1A>G"])


class TestFilterEngine:
    """Tests for composing stages into a filtered view."""

    def test_neutral_state_returns_everything_in_order(self, cohort):
        result = FilterEngine().apply(cohort, FilterState())

        assert result == cohort

    def test_quality_scenario(self):
        records = [
            make_variant(100, type="SNV", patient="P1", filter="PASS"),
            make_variant(200, type="Indel", patient="P2", filter="LOW"),
        ]
        engine = FilterEngine()

        assert positions(engine.apply(records, FilterState(quality="PASS"))) == [100]
        assert positions(engine.apply(records, FilterState(quality="All"))) == [100, 200]

    def test_stages_combine(self, cohort):
        state = FilterState(type="snv", patient="P1", quality="PASS")

        assert positions(FilterEngine().apply(cohort, state)) == [100, 400]

    def test_patient_filter_includes_polymorphism(self, cohort):
        state = FilterState(patient="P3")

        assert positions(FilterEngine().apply(cohort, state)) == [100, 500]

    def test_overrides_do_not_mutate_state(self, cohort):
        state = FilterState(type="Indel")
        result = FilterEngine().apply(cohort, state, FacetOverrides(type="All"))

        assert len(result) == len(cohort)
        assert state.type == "Indel"

    def test_search_uses_resolver(self, cohort):
        def resolve(v):
            return ["NM_999.1:c.9A>G"] if v.position == 400 else []

        engine = FilterEngine(resolve_hgvs=resolve)

        assert positions(engine.apply(cohort, FilterState(search="nm_999"))) == [400]

    def test_excluding_stages(self, cohort):
        engine = FilterEngine()
        state = FilterState(type="Indel", quality="LOW", search="zzz")

        assert engine.excluding_stages(cohort[0], state) == ["quality", "type", "search"]
        assert not engine.is_visible(cohort[0], state)


class TestFilterEngineProperties:
    """Property-based tests using hypothesis."""

    variant_strategy = st.builds(
        make_variant,
        position=st.integers(min_value=1, max_value=10_000),
        ref=st.sampled_from(["A", "C", "G", "T", "AT"]),
        alt=st.sampled_from(["A", "C", "G", "T", "GC"]),
        type=st.sampled_from(["SNV", "Indel", "MNV"]),
        patient=st.sampled_from(["P1", "P2", "P3"]),
        filter=st.sampled_from([None, "PASS", "LOW"]),
        consequence=st.sampled_from([None, "missense_variant", "stop_gained"]),
    )
    state_strategy = st.builds(
        FilterState,
        type=st.sampled_from(["All", "SNV", "indel"]),
        patient=st.sampled_from(["All", "P1", "P2"]),
        quality=st.sampled_from(["All", "PASS", "LOW"]),
        consequence=st.sampled_from(["All", "missense_variant"]),
        search=st.sampled_from(["", "p1", "A", "1"]),
    )

    @given(records=st.lists(variant_strategy, max_size=20), state=state_strategy)
    @settings(max_examples=100)
    def test_apply_is_idempotent_and_stable(self, records, state):
        engine = FilterEngine()
        once = engine.apply(records, state)

        assert engine.apply(once, state) == once
        assert engine.apply(records, state) == once
        # stable: output is a subsequence of the input
        remaining = iter(records)
        assert all(any(v is r for r in remaining) for v in once)

    @given(records=st.lists(variant_strategy, max_size=20), state=state_strategy)
    @settings(max_examples=100)
    def test_records_without_quality_survive_quality_filter(self, records, state):
        engine = FilterEngine()
        neutral = FilterState(quality=state.quality)

        visible = engine.apply(records, neutral)

        for v in records:
            if v.filter is None:
                assert any(v is r for r in visible)
