# ==============================================================================
# Tests for the Module Resolver
# ==============================================================================
"""
Unit tests for module reference parsing, normalization and memoized resolution.

Tests cover:
- "<type>: <id>" parsing and malformed references
- Activity and sequence normalization
- Teacher-Edition detection from the script label
- One fetch per external id, same instance on every resolution
- Failed, timed-out and empty fetches resolve to None (memoized)
"""

import asyncio
import logging

import pytest

from builders import (
    activity_export,
    question_wrapper_data,
    sequence_export,
    side_tip_data,
    te_embeddable,
)
from conftest import FakeModuleSource, RaisingModuleSource
from tereport.core.memo import MemoCache
from tereport.core.modules import (
    build_module,
    is_sequence,
    is_te_export,
    parse_external_id,
    resolve_module,
)
from tereport.exceptions import InvalidModuleIdError, MalformedContentError


# ==============================================================================
# Parsing
# ==============================================================================


class TestParseExternalId:
    def test_activity(self):
        """Activity reference splits into type and id."""
        assert parse_external_id("activity: 100") == ("activity", "100")

    def test_sequence(self):
        """Sequence reference splits into type and id."""
        assert parse_external_id("sequence: 55") == ("sequence", "55")

    @pytest.mark.parametrize("bad", ["activity 100", "activity:100", "", "100"])
    def test_malformed(self, bad):
        """References without ": " are rejected."""
        with pytest.raises(InvalidModuleIdError):
            parse_external_id(bad)

    def test_malformed_is_value_error(self):
        """InvalidModuleIdError is also a ValueError."""
        with pytest.raises(ValueError):
            parse_external_id("nope")


class TestIsSequence:
    @pytest.mark.parametrize("ref", ["sequence: 55", "sequence", "sequences"])
    def test_sequence_prefix(self, ref):
        """Anything starting with "sequence" is a sequence."""
        assert is_sequence(ref)

    @pytest.mark.parametrize("ref", ["activity: 100", "activity", "my sequence"])
    def test_other(self, ref):
        """Activities and mid-string matches are not."""
        assert not is_sequence(ref)


# ==============================================================================
# Normalization
# ==============================================================================


class TestBuildModule:
    def test_activity(self, te_activity):
        """Lone activity becomes a one-activity module."""
        module = build_module("activity: 100", te_activity)

        assert module.name == "Seasons"
        assert module.is_te_module
        assert len(module.activities) == 1
        assert module.activities[0].name == "Seasons"
        assert [p.ref_id for p in module.plugins] == ["729-Embeddable::EmbeddablePlugin"]

    def test_activity_with_nested_content(self):
        """Nested "activity" object supplies the pages."""
        nested = activity_export("Inner", te_embeddable("7", side_tip_data()))
        module = build_module("activity: 7", {"name": "Outer", "activity": nested})

        assert module.name == "Outer"
        assert [p.ref_id for p in module.plugins] == ["7"]

    def test_sequence(self):
        """Sequence keeps its activities in order."""
        export = sequence_export(
            "Earth Science",
            activity_export("One", te_embeddable("1", side_tip_data())),
            activity_export("Two", te_embeddable("2", question_wrapper_data(exemplar="x"))),
            activity_export("Three"),
        )
        module = build_module("sequence: 55", export)

        assert module.name == "Earth Science"
        assert [a.name for a in module.activities] == ["One", "Two", "Three"]
        assert [p.ref_id for p in module.plugins] == ["1", "2"]
        assert module.is_te_module

    def test_plain_activity_is_not_te(self):
        """Export without the script label is not TE."""
        module = build_module("activity: 8", activity_export("Plain"))
        assert not module.is_te_module
        assert module.plugins == []


class TestIsTeExport:
    def test_label_anywhere(self):
        """Label is found at any depth."""
        assert is_te_export({"deep": [{"approved_script_label": "teacherEditionTips"}]})

    def test_other_label(self):
        """Other script labels do not count."""
        assert not is_te_export({"approved_script_label": "glossary"})


# ==============================================================================
# Resolution
# ==============================================================================


class TestResolveModule:
    @pytest.mark.asyncio
    async def test_memoized_same_instance(self, module_source):
        """Repeat resolutions share one Module and one fetch."""
        cache = MemoCache()

        first = await resolve_module(cache, "activity: 100", module_source)
        second = await resolve_module(cache, "activity: 100", module_source)

        assert first is second
        assert module_source.calls == ["activity: 100"]

    @pytest.mark.asyncio
    async def test_separate_caches_fetch_separately(self, module_source):
        """Each build cache fetches on its own."""
        await resolve_module(MemoCache(), "activity: 100", module_source)
        await resolve_module(MemoCache(), "activity: 100", module_source)
        assert module_source.calls == ["activity: 100", "activity: 100"]

    @pytest.mark.asyncio
    async def test_failed_fetch_is_none_and_not_retried(self, caplog):
        """Failed fetch resolves to None once, logged with URL and status."""
        source = FakeModuleSource(failures={"sequence: 55": 500})
        cache = MemoCache()

        with caplog.at_level(logging.ERROR, logger="tereport.core.modules"):
            assert await resolve_module(cache, "sequence: 55", source) is None
            assert await resolve_module(cache, "sequence: 55", source) is None

        assert source.calls == ["sequence: 55"]
        assert "status=500" in caplog.text
        assert "https://authoring.test/sequence/55/export.json" in caplog.text

    @pytest.mark.asyncio
    async def test_empty_content_is_none(self):
        """Empty export resolves to None."""
        source = FakeModuleSource({"activity: 9": None})
        assert await resolve_module(MemoCache(), "activity: 9", source) is None

    @pytest.mark.asyncio
    async def test_malformed_reference_raises_without_fetch(self, module_source):
        """Malformed reference raises before any fetch."""
        with pytest.raises(InvalidModuleIdError):
            await resolve_module(MemoCache(), "activity-100", module_source)
        assert module_source.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [TimeoutError("authoring timed out"), asyncio.TimeoutError(), OSError("reset")],
    )
    async def test_unexpected_error_is_none_and_not_retried(self, error, caplog):
        """Timeouts and unmapped errors resolve to None once, logged at error level."""
        source = RaisingModuleSource(error)
        cache = MemoCache()

        with caplog.at_level(logging.ERROR, logger="tereport.core.modules"):
            assert await resolve_module(cache, "activity: 729", source) is None
            assert await resolve_module(cache, "activity: 729", source) is None

        assert source.calls == ["activity: 729"]
        assert "Failed to fetch module activity: 729" in caplog.text

    @pytest.mark.asyncio
    async def test_domain_errors_from_source_propagate(self):
        """Content errors raised by a source still fail the build."""
        source = RaisingModuleSource(MalformedContentError("bad author data"))
        with pytest.raises(MalformedContentError):
            await resolve_module(MemoCache(), "activity: 729", source)
