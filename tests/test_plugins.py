# ==============================================================================
# Tests for the Plugin Classifier
# ==============================================================================
"""
Unit tests for Teacher-Edition plugin extraction.

Tests cover:
- Question-wrapper significance flags (whitespace-only text is not significant)
- Window-shade type parsing, including the legacy "type" field
- Side tips
- Skipping unrecognized, incomplete or non-object payloads without dropping the rest
- Non-TE plugins and exports without pages
- Unparseable author data
"""

import logging

import pytest

from builders import (
    activity_export,
    question_wrapper_data,
    side_tip_data,
    te_embeddable,
    window_shade_data,
)
from tereport.core.models import (
    PluginType,
    QuestionWrapperDef,
    SideTipDef,
    WindowShadeDef,
    WindowShadeType,
)
from tereport.core.plugins import (
    classify_plugin,
    extract_plugins,
    is_significant,
    parse_window_shade_type,
)
from tereport.exceptions import MalformedContentError


# ==============================================================================
# Helpers
# ==============================================================================


class TestIsSignificant:
    def test_text(self):
        """Text counts as significant."""
        assert is_significant("Explain the answer")

    def test_blank(self):
        """Whitespace-only text does not."""
        assert not is_significant("")
        assert not is_significant("   \n\t")

    def test_missing(self):
        """Missing value does not."""
        assert not is_significant(None)


class TestParseWindowShadeType:
    """Shade names arrive camel-cased from authors and title-cased from enums."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("teacherTip", WindowShadeType.TEACHER_TIP),
            ("Teacher Tip", WindowShadeType.TEACHER_TIP),
            ("theoryAndBackground", WindowShadeType.THEORY_AND_BACKGROUND),
            ("Theory & Background", WindowShadeType.THEORY_AND_BACKGROUND),
            ("offlineActivity", WindowShadeType.OFFLINE_ACTIVITY),
            ("Demo", WindowShadeType.DEMO),
        ],
    )
    def test_known_names(self, name, expected):
        """Both spellings resolve."""
        assert parse_window_shade_type(name) is expected

    def test_unknown_name(self):
        """Unlisted shade names give None."""
        assert parse_window_shade_type("Pop Quiz") is None

    def test_non_string(self):
        """Non-strings give None."""
        assert parse_window_shade_type(None) is None
        assert parse_window_shade_type(3) is None


# ==============================================================================
# classify_plugin
# ==============================================================================


class TestClassifyPlugin:
    def test_question_wrapper_flags(self):
        """Flags follow which texts are significant."""
        plugin = classify_plugin(
            "1-Embeddable::EmbeddablePlugin",
            question_wrapper_data(correct="Because", distractors="  ", teacher_tip="Try this"),
        )
        assert plugin.plugin_type is PluginType.QUESTION_WRAPPER
        assert plugin.definition == QuestionWrapperDef(
            is_correct_explanation=True,
            is_distractors_explanation=False,
            is_exemplar=False,
            is_teacher_tip=True,
        )

    def test_window_shade(self):
        """Shade type comes from windowShadeType."""
        plugin = classify_plugin("2", window_shade_data("diggingDeeper"))
        assert plugin.definition == WindowShadeDef(window_shade_type=WindowShadeType.DIGGING_DEEPER)

    def test_window_shade_legacy_type_field(self):
        """Legacy "type" field is still read."""
        author_data = {"tipType": "windowShade", "windowShade": {"type": "howToUse"}}
        plugin = classify_plugin("3", author_data)
        assert plugin.definition.window_shade_type is WindowShadeType.HOW_TO_USE

    def test_side_tip(self):
        """Side tips get their own definition."""
        plugin = classify_plugin("4", side_tip_data())
        assert isinstance(plugin.definition, SideTipDef)
        assert plugin.plugin_type is PluginType.SIDE_TIP

    def test_unknown_tip_type_skipped(self, caplog):
        """Unknown tipType is dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            assert classify_plugin("5", {"tipType": "popup"}) is None
        assert "unrecognized tipType" in caplog.text

    def test_missing_tip_type_skipped(self, caplog):
        """Missing tipType is dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            assert classify_plugin("6", {"windowShade": {}}) is None
        assert "no tipType" in caplog.text

    @pytest.mark.parametrize(
        "author_data",
        [
            {"tipType": "questionWrapper", "questionWrapper": ["x"]},
            {"tipType": "questionWrapper", "questionWrapper": "teacherTip"},
            {"tipType": "windowShade", "windowShade": "teacherTip"},
            {"tipType": "windowShade", "windowShade": ["teacherTip"]},
        ],
    )
    def test_non_object_payload_skipped(self, author_data, caplog):
        """A wrapper or shade payload that is not an object is dropped with a warning."""
        with caplog.at_level(logging.WARNING, logger="tereport.core.plugins"):
            assert classify_plugin("7", author_data) is None
        assert "expected an object" in caplog.text


# ==============================================================================
# extract_plugins
# ==============================================================================


class TestExtractPlugins:
    def test_plugins_in_page_order(self):
        """Plugins come back in page order."""
        export = activity_export(
            "Seasons",
            te_embeddable("10-Embeddable::EmbeddablePlugin", window_shade_data("teacherTip")),
            te_embeddable("11-Embeddable::EmbeddablePlugin", side_tip_data()),
        )
        plugins = extract_plugins(export)
        assert [p.ref_id for p in plugins] == [
            "10-Embeddable::EmbeddablePlugin",
            "11-Embeddable::EmbeddablePlugin",
        ]

    def test_window_shade_without_type_is_skipped_others_kept(self, caplog):
        """A shade with no type field is dropped with a warning; siblings survive."""
        export = activity_export(
            "Seasons",
            te_embeddable("20", window_shade_data(shade_type=None)),
            te_embeddable("21", window_shade_data("demo")),
            te_embeddable("22", question_wrapper_data(exemplar="Model answer")),
        )
        with caplog.at_level(logging.WARNING, logger="tereport.core.plugins"):
            plugins = extract_plugins(export)

        assert [p.ref_id for p in plugins] == ["21", "22"]
        assert "Skipping window-shade plugin 20" in caplog.text

    def test_non_object_payloads_skipped_others_kept(self, caplog):
        """String shade and list wrapper payloads are dropped; siblings survive."""
        export = activity_export(
            "Seasons",
            te_embeddable("23", {"tipType": "windowShade", "windowShade": "teacherTip"}),
            te_embeddable("24", {"tipType": "questionWrapper", "questionWrapper": ["x"]}),
            te_embeddable("25", window_shade_data("teacherTip")),
        )
        with caplog.at_level(logging.WARNING, logger="tereport.core.plugins"):
            plugins = extract_plugins(export)

        assert [p.ref_id for p in plugins] == ["25"]
        assert "Skipping window-shade plugin 23" in caplog.text
        assert "Skipping question-wrapper plugin 24" in caplog.text

    def test_non_te_plugins_ignored(self):
        """Plugins with another script label are ignored."""
        export = activity_export(
            "Seasons",
            te_embeddable("30", {"anything": True}, label="glossary"),
            {"embeddable": {"ref_id": "31", "type": "MultipleChoice"}},
        )
        assert extract_plugins(export) == []

    def test_no_pages(self):
        """Export without pages has no plugins."""
        assert extract_plugins({"name": "Empty"}) == []

    def test_not_a_dict(self):
        """Non-object export has no plugins."""
        assert extract_plugins(None) == []

    def test_author_data_may_already_be_parsed(self):
        """Author data given as an object is used as-is."""
        export = activity_export("Seasons")
        export["pages"][0]["embeddables"] = [
            {
                "embeddable": {
                    "ref_id": "40",
                    "plugin": {
                        "approved_script_label": "teacherEditionTips",
                        "author_data": side_tip_data(),
                    },
                }
            }
        ]
        assert [p.ref_id for p in extract_plugins(export)] == ["40"]

    def test_unparseable_author_data_raises(self):
        """Broken author JSON fails with the plugin's ref id."""
        export = activity_export("Seasons", te_embeddable("50", "{not json"))
        with pytest.raises(MalformedContentError, match="50"):
            extract_plugins(export)

    def test_author_data_not_an_object_raises(self):
        """Author JSON that is not an object fails."""
        export = activity_export("Seasons", te_embeddable("51", "[1, 2]"))
        with pytest.raises(MalformedContentError):
            extract_plugins(export)
