from pathlib import Path

from safetag_migrate.diagnostics import DiagnosticKind
from safetag_migrate.transclusion import (
    ACTIVITIES_HEADING,
    ACTIVITY_REFERENCE_MARKER,
    ACTIVITY_SEGMENT,
    EXERCISE_INCLUDE,
    GUIDE_INCLUDE,
    PAGE_INCLUDE,
    LocalFileProbe,
    find_links,
    rewrite,
    strip_lines,
    validate_targets,
)


class TestDirectiveSyntax:
    def test_exercise_include_restores_extension(self):
        text = '#### Title\n\n!INCLUDE "summary.md"\n!INCLUDE "approach.md"\n'
        assert EXERCISE_INCLUDE.rewrite(text) == "#### Title\n\n:[](summary.md)\n:[](approach.md)\n"

    def test_exercise_include_finds_role_names(self):
        text = '!INCLUDE "summary.md"\n!INCLUDE "bogus.md"'
        assert [directive.target for directive in EXERCISE_INCLUDE.find(text)] == ["summary", "bogus"]

    def test_include_must_start_a_line(self):
        text = 'See !INCLUDE "summary.md" for details'
        assert PAGE_INCLUDE.rewrite(text) == text
        assert EXERCISE_INCLUDE.find(text) == []

    def test_page_include_keeps_path(self):
        text = 'intro\n!INCLUDE "recon/summary.md"\noutro'
        assert PAGE_INCLUDE.rewrite(text) == "intro\n:[](recon/summary.md)\noutro"

    def test_page_include_tolerates_trailing_character(self):
        assert PAGE_INCLUDE.rewrite('!INCLUDE "a.md" ') == ":[](a.md)"

    def test_guide_include_is_directory_relative(self):
        assert GUIDE_INCLUDE.rewrite('!INCLUDE "methods/recon.md"') == ":[](./methods/recon.md)"

    def test_directive_span_points_at_marker(self):
        text = 'x\n!INCLUDE "a.md"'
        (directive,) = PAGE_INCLUDE.find(text)
        assert text[directive.span[0] : directive.span[1]] == '!INCLUDE "a.md"'


class TestRewrite:
    def test_rewrites_exercise_segments(self):
        text = '!INCLUDE "../exercises/scan/index.md"'
        assert rewrite(text, PAGE_INCLUDE, substitutions=(ACTIVITY_SEGMENT,)) == ":[](../activities/scan/index.md)"

    def test_rewrite_is_idempotent_on_its_output(self):
        text = '## Recon\n!INCLUDE "recon/summary.md"\n!INCLUDE "../exercises/scan/index.md"\n'
        once = rewrite(text, PAGE_INCLUDE, substitutions=(ACTIVITY_SEGMENT,))
        twice = rewrite(once, PAGE_INCLUDE, substitutions=(ACTIVITY_SEGMENT,))
        assert twice == once

    def test_strip_removes_heading_and_is_idempotent(self):
        text = "## Recon\n### Activities\n:[](a.md)\n"
        stripped = strip_lines(text, ACTIVITIES_HEADING)
        assert stripped == "## Recon\n\n:[](a.md)\n"
        assert strip_lines(stripped, ACTIVITIES_HEADING) == stripped

    def test_rewrite_applies_strip(self):
        text = '### Activities:\n!INCLUDE "a.md"'
        assert rewrite(text, PAGE_INCLUDE, strip=(ACTIVITIES_HEADING,)) == "\n:[](a.md)"


def test_find_links_returns_every_target():
    text = ":[](a.md)\nsome text :[](b/c.md)\n"
    assert [directive.target for directive in find_links(text)] == ["a.md", "b/c.md"]


class TestValidateTargets:
    def test_missing_target_yields_one_diagnostic(self, make_probe, tmp_path):
        base = tmp_path / "methods"
        probe = make_probe(base / "present.md")
        text = ":[](present.md)\n:[](foo.md)\n"

        diagnostics = validate_targets(text, base, "methods/recon.md", probe=probe)

        assert len(diagnostics) == 1
        (diagnostic,) = diagnostics
        assert diagnostic.kind is DiagnosticKind.MISSING_TARGET
        assert diagnostic.key == "methods/recon.md"
        assert diagnostic.target == str(base / "foo.md")
        assert "methods/recon.md" in diagnostic.message

    def test_activity_references_are_exempt(self, make_probe, tmp_path):
        probe = make_probe()
        text = ":[](../activities/scan/index.md)\n"

        diagnostics = validate_targets(
            text, tmp_path / "methods", "methods/recon.md", probe=probe, exempt_marker=ACTIVITY_REFERENCE_MARKER
        )

        assert diagnostics == []
        assert probe.probed == []


class TestLocalFileProbe:
    def test_existing_file(self, tmp_path: Path):
        target = tmp_path / "a.md"
        target.write_text("x", encoding="utf-8")
        assert LocalFileProbe().open_for_read(target)

    def test_missing_file_and_directory(self, tmp_path: Path):
        probe = LocalFileProbe()
        assert not probe.open_for_read(tmp_path / "missing.md")
        assert not probe.open_for_read(tmp_path)
