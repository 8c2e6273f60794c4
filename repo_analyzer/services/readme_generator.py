"""README text generation from a cached repository record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from repo_analyzer.models.record import RepositoryRecord
from repo_analyzer.services.formatting import format_short_date


class CustomSection(BaseModel):
    title: str = ""
    content: str = ""


class ReadmeOptions(BaseModel):
    """Which README blocks to emit. Accepts camelCase keys from clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    include_installation: bool = True
    include_usage: bool = True
    include_contributing: bool = True
    include_license: bool = True
    custom_sections: list[CustomSection] = Field(default_factory=list)


@dataclass(frozen=True)
class LanguageTemplate:
    """Install command and usage snippet for one primary language."""

    install_command: str
    fence_language: str
    usage: Callable[[str], str]


def _javascript_usage(name: str) -> str:
    lowered = name.lower()
    return (
        f"import {{ {name} }} from '{lowered}';\n\n"
        "// Initialize the component\n"
        f"const {lowered} = new {name}();\n"
        f"{lowered}.start();\n"
    )


def _python_usage(name: str) -> str:
    lowered = name.lower()
    return (
        f"from {lowered} import {name}\n\n"
        "# Initialize the component\n"
        f"{lowered} = {name}()\n"
        f"{lowered}.start()\n"
    )


def _java_usage(name: str) -> str:
    lowered = name.lower()
    return (
        f"import com.example.{name};\n\n"
        "// Initialize the component\n"
        f"{name} {lowered} = new {name}();\n"
        f"{lowered}.start();\n"
    )


_JAVASCRIPT = LanguageTemplate("npm install", "javascript", _javascript_usage)

LANGUAGE_TEMPLATES: dict[str, LanguageTemplate] = {
    "JavaScript": _JAVASCRIPT,
    "TypeScript": _JAVASCRIPT,
    "Python": LanguageTemplate("pip install -r requirements.txt", "python", _python_usage),
    "Java": LanguageTemplate("mvn install", "java", _java_usage),
}

DEFAULT_TEMPLATE = LanguageTemplate(
    "# Install dependencies according to your package manager",
    "",
    lambda name: f"\n// Example usage code for {name}\n",
)


def template_for(language: str) -> LanguageTemplate:
    return LANGUAGE_TEMPLATES.get(language, DEFAULT_TEMPLATE)


def generate_readme(
    record: RepositoryRecord,
    options: Optional[ReadmeOptions] = None,
    *,
    today: Optional[datetime] = None,
) -> str:
    """Assemble README markdown for ``record``.

    The output is deterministic apart from the footer date; pass ``today``
    to pin it.
    """

    options = options or ReadmeOptions()
    today = today or datetime.now()
    repo_name = record.name
    template = template_for(record.primary_language)
    description = record.description or ""

    parts: list[str] = [
        f"# {repo_name}\n\n",
        f"{description}\n\n",
        f"![GitHub stars](https://img.shields.io/github/stars/{record.full_name}?style=social) ",
        f"![License](https://img.shields.io/github/license/{record.full_name}) ",
        f"![Last commit](https://img.shields.io/github/last-commit/{record.full_name})\n\n",
        "## Overview\n\n",
        f"This repository contains a {record.primary_language} project that {description.lower()}.\n\n",
        "## Languages\n\n",
    ]
    parts.extend(f"- {lang.name}: {lang.percentage:.1f}%\n" for lang in record.languages)
    parts.append("\n")

    if options.include_installation:
        parts.append(
            "## Installation\n\n"
            "```bash\n"
            "# Clone the repository\n"
            f"git clone https://github.com/{record.full_name}.git\n\n"
            "# Change directory\n"
            f"cd {repo_name}\n\n"
            "# Install dependencies\n"
            f"{template.install_command}\n"
            "```\n\n"
        )

    if options.include_usage:
        parts.append(f"## Usage\n\n```{template.fence_language}\n{template.usage(repo_name)}```\n\n")

    if options.include_contributing:
        parts.append(
            "## Contributing\n\n"
            "Contributions are welcome! Please feel free to submit a Pull Request.\n\n"
            "1. Fork the repository\n"
            "2. Create your feature branch (`git checkout -b feature/amazing-feature`)\n"
            "3. Commit your changes (`git commit -m 'Add some amazing feature'`)\n"
            "4. Push to the branch (`git push origin feature/amazing-feature`)\n"
            "5. Open a Pull Request\n\n"
        )

    if options.include_license:
        parts.append(
            "## License\n\n"
            "This project is licensed under the MIT License - see the LICENSE file for details.\n\n"
        )

    for section in options.custom_sections:
        if section.title and section.content:
            parts.append(f"## {section.title}\n\n{section.content}\n\n")

    parts.append(f"---\n\nGenerated by GitHub Repository Analyzer on {format_short_date(today)}\n")
    return "".join(parts)
