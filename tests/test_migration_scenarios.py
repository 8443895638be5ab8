"""End-to-end migrations through the driver against a real source tree."""

import logging

import pytest

from safetag_migrate.config import MigrationSettings
from safetag_migrate.diagnostics import DiagnosticKind
from safetag_migrate.exceptions import MissingDocumentError
from safetag_migrate.host import load_source_tree
from safetag_migrate.pipeline import migrate, run_migration

CORPUS = {
    "index.guide.md": '# SAFETAG\n!INCLUDE "methods/intro.md"\n!INCLUDE "methods/recon.guide.md"\n',
    "methods/intro.md": "## Introduction\nWelcome",
    "methods/recon.guide.md": '## Recon\n!INCLUDE "recon/summary.md"\n### Activities\n!INCLUDE "../exercises/scan/index.md"\n',
    "methods/recon/summary.md": "### Summary\nRecon gathers public information about the organisation",
    "exercises/check_user_browser_vulns/index.md": (
        "---\nAuthors: SAFETAG\n---\n#### Check user browser vulnerabilities\n\n"
        '!INCLUDE "summary.md"\n!INCLUDE "instructions.md"\n'
    ),
    "exercises/check_user_browser_vulns/summary.md": "Outdated browsers and plugins expose staff to drive-by attacks.",
    "exercises/check_user_browser_vulns/instructions.md": "Visit the plugin check page.",
    "exercises/check_user_browser_vulns/browser_java_plugin.md": "Check for outdated Java plugins.",
    "references/tools.md": "#### Tools\nA list of recommended tools for auditors",
    "references/footnotes.md": "[^1]:https://safetag.org\n",
    "document_matter/about.md": "## About\nThis guide is maintained by volunteers",
    "images/logo.png": b"\x89PNG",
    "README.md": "Not part of the guide",
}


@pytest.fixture
def tree(write_tree):
    return load_source_tree(write_tree(CORPUS))


def test_browser_vulnerability_activity(tree):
    settings = MigrationSettings(activities=True, origin_path_prefix="src/")

    run_migration(tree.files, tree.source(), settings)

    record = tree.files["activities/check-user-browser-vulns.md"]
    assert record.get("title") == "Check user browser vulnerabilities"
    assert record.get("origin_path") == "src/exercises/check_user_browser_vulns/index.md"
    assert record.get("authors") == "SAFETAG"
    assert record.text == "Check for outdated Java plugins."
    assert set(tree.files) == {"activities/check-user-browser-vulns.md"}


def test_missing_method_include_is_diagnosed_not_fatal(write_tree, caplog):
    root = write_tree({"methods/recon.md": '## Recon\n!INCLUDE "foo.md"\n', "methods/other.md": "## Other\n"})
    tree = load_source_tree(root)

    with caplog.at_level(logging.WARNING, logger="safetag_migrate.diagnostics"):
        diagnostics = run_migration(tree.files, tree.source(), MigrationSettings(methods=True))

    (diagnostic,) = diagnostics
    assert diagnostic.kind is DiagnosticKind.MISSING_TARGET
    assert diagnostic.key == "methods/recon.md"
    assert diagnostic.target == str(root / "methods" / "foo.md")
    assert ":[](foo.md)" in tree.files["methods/recon.md"].text
    assert "methods/other.md" in tree.files
    assert any("methods/recon.md" in message for message in caplog.messages)


def test_reference_scenario(tree):
    run_migration(tree.files, tree.source(), MigrationSettings(references=True, origin="upstream"))

    record = tree.files["references/tools.md"]
    assert record.get("layout") == "reference.md"
    assert record.get("title") == "Tools"
    assert record.get("description") == "A list of recommended tools for..."
    assert tree.files["references/footnotes.md"].text == "[^1]: https://safetag.org\n"


def test_full_corpus(tree):
    settings = MigrationSettings.all_enabled(origin="upstream", origin_path_prefix="src/")

    diagnostics = run_migration(tree.files, tree.source(), settings)

    assert len(diagnostics) == 0
    assert sorted(tree.files) == [
        "activities/check-user-browser-vulns.md",
        "document_matter/about.md",
        "images/logo.png",
        "index.guide.md",
        "methods/intro.md",
        "methods/recon.guide.md",
        "methods/recon.md",
        "methods/recon/summary.md",
        "references/footnotes.md",
        "references/tools.md",
    ]
    assert all(document.get("origin") == "upstream" for document in tree.files.values())
    assert tree.files["methods/recon.md"].get("description") == "Recon gathers public information about the..."
    assert ":[](./activities/" not in tree.files["index.guide.md"].text
    assert tree.files["index.guide.md"].text.endswith(":[](references/footnotes.md)")


def test_disabled_classes_are_dropped(tree):
    migrate(tree, MigrationSettings(methods=True))

    assert tree.files
    assert all(key.startswith("methods/") for key in tree.files)


def test_fatal_error_leaves_mapping_untouched(write_tree):
    root = write_tree({"exercises/check_user_browser_vulns/index.md": "#### Check\n"})
    tree = load_source_tree(root)
    before = dict(tree.files)

    with pytest.raises(MissingDocumentError):
        run_migration(tree.files, tree.source(), MigrationSettings(activities=True))

    assert tree.files == before
