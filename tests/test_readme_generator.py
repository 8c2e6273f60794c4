from __future__ import annotations

from datetime import datetime

from repo_analyzer.models.record import LanguageShare, RepositoryRecord
from repo_analyzer.services.readme_generator import CustomSection, ReadmeOptions, generate_readme

TODAY = datetime(2024, 3, 5, 9, 30)


def make_record(language: str = "Python", description: str = "Parses Things Quickly") -> RepositoryRecord:
    return RepositoryRecord(
        id="7",
        full_name="acme/Widget",
        description=description,
        owner_avatar_url="",
        stars="1.2k",
        forks="10",
        open_issues="3",
        primary_language=language,
        created_at="January 5, 2020",
        last_updated="2 days ago",
        code_quality_score=90,
        code_coverage_score=80,
        commit_frequency="4/week",
        active_contributors=15,
        languages=[
            LanguageShare(name="Python", percentage=66.666, color_hex="#3572A5"),
            LanguageShare(name="Shell", percentage=33.334, color_hex="#808080"),
        ],
        commit_activity=[],
        complex_files=[],
        dependencies=[],
    )


def test_default_readme_has_every_standard_section_in_order() -> None:
    content = generate_readme(make_record(), today=TODAY)

    headings = [line for line in content.splitlines() if line.startswith("#") and not line.startswith("# ")]
    assert content.startswith("# Widget\n\nParses Things Quickly\n\n")
    assert headings == ["## Overview", "## Languages", "## Installation", "## Usage", "## Contributing", "## License"]
    assert "https://img.shields.io/github/stars/acme/Widget?style=social" in content
    assert "https://img.shields.io/github/license/acme/Widget" in content
    assert "https://img.shields.io/github/last-commit/acme/Widget" in content
    assert "This repository contains a Python project that parses things quickly.\n" in content
    assert "- Python: 66.7%\n- Shell: 33.3%\n" in content
    assert content.endswith("---\n\nGenerated by GitHub Repository Analyzer on 3/5/2024\n")


def test_python_install_and_usage_blocks() -> None:
    content = generate_readme(make_record("Python"), today=TODAY)

    assert "git clone https://github.com/acme/Widget.git\n\n# Change directory\ncd Widget\n" in content
    assert "pip install -r requirements.txt\n" in content
    assert "```python\nfrom widget import Widget\n\n# Initialize the component\nwidget = Widget()\nwidget.start()\n```" in content


def test_typescript_shares_the_javascript_template() -> None:
    content = generate_readme(make_record("TypeScript"), today=TODAY)

    assert "npm install\n" in content
    assert "```javascript\nimport { Widget } from 'widget';\n" in content


def test_java_template() -> None:
    content = generate_readme(make_record("Java"), today=TODAY)

    assert "mvn install\n" in content
    assert "Widget widget = new Widget();" in content


def test_unmapped_language_uses_placeholders() -> None:
    content = generate_readme(make_record("Haskell"), today=TODAY)

    assert "# Install dependencies according to your package manager\n" in content
    assert "```\n\n// Example usage code for Widget\n```" in content


def test_disabled_sections_are_omitted() -> None:
    options = ReadmeOptions(
        include_installation=False,
        include_usage=False,
        include_contributing=False,
        include_license=False,
    )

    content = generate_readme(make_record(), options, today=TODAY)

    for heading in ("## Installation", "## Usage", "## Contributing", "## License"):
        assert heading not in content
    assert "## Languages" in content


def test_options_accept_camel_case_keys() -> None:
    options = ReadmeOptions.model_validate({"includeInstallation": False, "customSections": [{"title": "Notes", "content": "x"}]})

    assert options.include_installation is False
    assert options.include_usage is True
    assert options.custom_sections[0].title == "Notes"


def test_custom_sections_follow_standard_sections() -> None:
    options = ReadmeOptions(
        custom_sections=[
            CustomSection(title="Notes", content="x"),
            CustomSection(title="", content="ignored"),
            CustomSection(title="Empty", content=""),
            CustomSection(title="Roadmap", content="Ship it."),
        ]
    )

    content = generate_readme(make_record(), options, today=TODAY)

    assert "## Notes\n\nx\n\n" in content
    assert content.index("## License") < content.index("## Notes") < content.index("## Roadmap") < content.index("---")
    assert "ignored" not in content
    assert "## Empty" not in content


def test_generation_is_deterministic_for_a_fixed_date() -> None:
    record = make_record()

    assert generate_readme(record, today=TODAY) == generate_readme(record, today=TODAY)
