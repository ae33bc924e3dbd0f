"""Markdown rendering of session states for chat messages."""

from __future__ import annotations

from civtracker.models import CitiesState, TechnologiesState, TechnologyInState


def cities_markdown(state: CitiesState) -> str:
    """Render every member's cities."""
    lines = ["# 🌆 Cities\n\n"]
    for member, cities in state.cities:
        lines.append(f"## {member.name}\n\n")
        lines.extend(f"* {city.city_name}\n" for city in cities)
    return "".join(lines)


def _technology_line(technology: TechnologyInState) -> str:
    return f"* {technology.technology_name} ({', '.join(technology.member_names())})\n"


def technologies_markdown(state: TechnologiesState) -> str:
    """Render the technologies owned and being researched."""
    lines = ["# 🔬 Technology\n\n", "## ✅ Almost one nation own\n\n"]
    lines.extend(_technology_line(technology) for technology in state.done)
    lines.append("## 🎯 Almost one nation searching\n\n")
    lines.extend(_technology_line(technology) for technology in state.search)
    return "".join(lines)