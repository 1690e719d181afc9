"""
Tests for the failedTemplate validator.

Covers render-error matching, the per-manifest path with its
monotonic aggregation, the empty-collection rule and the
zero-parameter skip.
"""

import re

import pytest

from rendertest.rendering import RenderError
from rendertest.validators import FailedTemplateValidator, ValidateContext, build_validator


def raw_manifests(make_manifest, *texts):
    return tuple(
        make_manifest(index=i, source="templates/NOTES.txt", raw=text)
        for i, text in enumerate(texts)
    )


class TestRenderError:
    """Rendering failed: the error text is what gets checked."""

    def test_pattern_matches_error(self):
        """A pattern matches anywhere in the error message."""
        context = ValidateContext(render_error=RenderError("template: bad indentation"))
        passed, errors = FailedTemplateValidator(error_pattern="bad.*").validate(context)
        assert passed
        assert errors == []

    def test_message_requires_exact_text(self):
        """errorMessage is compared for equality, so a prefix breaks it."""
        context = ValidateContext(render_error=RenderError("template: bad indentation"))
        passed, errors = FailedTemplateValidator(error_message="bad indentation").validate(context)
        assert not passed
        assert errors == [
            "Expected to equal:",
            "\tbad indentation",
            "Actual:",
            "\ttemplate: bad indentation",
        ]

    def test_message_exact_match(self):
        context = ValidateContext(render_error=RenderError("template: bad indentation"))
        passed, _ = FailedTemplateValidator(error_message="template: bad indentation").validate(context)
        assert passed

    def test_negated_pattern_match_fails(self):
        """With negation a matching error is the failure."""
        context = ValidateContext(render_error=RenderError("template: bad indentation"), negative=True)
        passed, errors = FailedTemplateValidator(error_pattern="bad").validate(context)
        assert not passed
        assert errors == ["Expected NOT to match:", "\tbad"]

    def test_no_parameters_accepts_any_error(self):
        context = ValidateContext(render_error=RenderError("anything"))
        passed, errors = FailedTemplateValidator().validate(context)
        assert passed
        assert errors == []

    def test_invalid_pattern_is_reported(self):
        context = ValidateContext(render_error=RenderError("boom"))
        passed, errors = FailedTemplateValidator(error_pattern="(unclosed").validate(context)
        assert not passed
        assert errors[0] == "Error:"
        assert "invalid regular expression '(unclosed'" in errors[1]


class TestConfiguration:
    """Both errorMessage and errorPattern set is always a failure."""

    @pytest.mark.parametrize("negative", [False, True])
    @pytest.mark.parametrize("render_error", [None, RenderError("boom")])
    def test_both_parameters_fail(self, make_manifest, negative, render_error):
        context = ValidateContext(
            manifests=raw_manifests(make_manifest, "boom"),
            negative=negative,
            render_error=render_error,
        )
        validator = FailedTemplateValidator(error_message="boom", error_pattern="b.*m")
        passed, errors = validator.validate(context)
        assert not passed
        assert errors == [
            "Error:",
            "\tsingle attribute 'errorMessage' or 'errorPattern' supported at the same time",
        ]

    def test_built_from_test_file_keys(self):
        validator, negated = build_validator("notFailedTemplate", {"errorPattern": "x"})
        assert validator == FailedTemplateValidator(error_pattern="x")
        assert negated is True


class TestManifests:
    """Rendering succeeded: each manifest's raw text is checked."""

    @pytest.mark.parametrize(
        "texts, negative",
        [
            (("bad thing",), False),
            (("bad thing",), True),
            (("good", "bad"), False),
            (("good", "bad"), True),
            (("good", "fine"), False),
            (("good", "fine"), True),
            (("bad", "worse bad"), False),
            (("bad", "worse bad"), True),
        ],
    )
    def test_pattern_verdict_per_manifest(self, make_manifest, texts, negative):
        """Passes iff every manifest agrees with the polarity."""
        manifests = raw_manifests(make_manifest, *texts)
        context = ValidateContext(manifests=manifests, negative=negative)
        passed, _ = FailedTemplateValidator(error_pattern="bad").validate(context)

        matches = [re.search("bad", text) is not None for text in texts]
        assert passed == all(matched != negative for matched in matches)

    def test_failure_is_not_undone_by_later_match(self, make_manifest):
        """A failing manifest followed by a passing one still fails."""
        context = ValidateContext(manifests=raw_manifests(make_manifest, "fine", "bad"))
        passed, errors = FailedTemplateValidator(error_pattern="bad").validate(context)
        assert not passed
        assert errors[:2] == ["Template:\ttemplates/NOTES.txt", "DocumentIndex:\t0"]

    def test_fail_fast_stops_after_first_failure(self, make_manifest):
        manifests = raw_manifests(make_manifest, "fine", "ok")
        slow, all_errors = FailedTemplateValidator(error_pattern="bad").validate(
            ValidateContext(manifests=manifests)
        )
        fast, fast_errors = FailedTemplateValidator(error_pattern="bad").validate(
            ValidateContext(manifests=manifests, fail_fast=True)
        )
        assert not slow and not fast
        assert "DocumentIndex:\t1" in all_errors
        assert "DocumentIndex:\t1" not in fast_errors

    def test_non_string_raw_is_an_error(self, make_manifest):
        """A raw value that is not text is reported, not coerced."""
        context = ValidateContext(manifests=(make_manifest(index=0, raw=42),), negative=True)
        passed, errors = FailedTemplateValidator(error_message="42").validate(context)
        assert not passed
        assert "Error:" in errors
        assert any("expected a string" in line for line in errors)

    def test_manifest_without_raw_never_matches(self, make_manifest, deployment):
        context = ValidateContext(manifests=(deployment,))
        passed, errors = FailedTemplateValidator(error_message="boom").validate(context)
        assert not passed
        assert errors[-1] == "\tnull"

    def test_no_parameters_skips_populated_output(self, make_manifest):
        """Nothing expected and nothing failed is treated as success."""
        context = ValidateContext(manifests=raw_manifests(make_manifest, "whatever"))
        passed, errors = FailedTemplateValidator().validate(context)
        assert passed
        assert errors == []


class TestEmptyCollection:
    """No manifests and no render error."""

    @pytest.mark.parametrize(
        "validator",
        [
            FailedTemplateValidator(),
            FailedTemplateValidator(error_message="boom"),
            FailedTemplateValidator(error_pattern="boom"),
        ],
    )
    def test_fails_when_not_negated(self, validator):
        passed, errors = validator.validate(ValidateContext())
        assert not passed
        assert errors[-1] == "\tNo failed document"

    @pytest.mark.parametrize(
        "validator",
        [
            FailedTemplateValidator(),
            FailedTemplateValidator(error_message="boom"),
            FailedTemplateValidator(error_pattern="boom"),
        ],
    )
    def test_passes_when_negated(self, validator):
        passed, errors = validator.validate(ValidateContext(negative=True))
        assert passed
        assert errors == []
