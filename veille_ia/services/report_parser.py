from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

"""
Report Parser (présentation).

Rôle (fonctionnel) :
- Découpe le texte libre d’un rapport IA en sections titrées, pour affichage.
- Fonction pure : aucune dépendance DB, tolère n’importe quelle entrée.

Détection d’un titre de section (dans cet ordre) :
- en-tête markdown (#, ##, ###)
- élément numéroté ("1. Titre")
- ligne en gras ("**Titre**" avec ':' final optionnel)
- ligne courte terminée par ':' (< 100 caractères, sans point)

Règles :
- Les lignes vides sont ignorées, les autres sont trimées.
- Les lignes avant le premier titre forment une section "Introduction".
- Une section sans contenu est ignorée.
- Aucun titre détecté : une seule section "Résultat" avec le texte tel quel.
"""

HEADER_RE = re.compile(r"^#{1,3}\s*(.+)$")
NUMBERED_RE = re.compile(r"^(\d+)\.\s*(.+)$")
BOLD_RE = re.compile(r"^\*\*(.+?)\*\*\s*:?$")
COLON_RE = re.compile(r"^(.+?)\s*:$")

COLON_TITLE_MAX = 100

INTRO_TITLE = "Introduction"
FALLBACK_TITLE = "Résultat"

# (mots-clés, catégorie, couleur) : premier groupe qui matche le titre en minuscules
CATEGORIES: Tuple[Tuple[Tuple[str, ...], str, str], ...] = (
    (("résumé", "executive", "synthèse"), "summary", "blue"),
    (("tendance", "point", "clé"), "trends", "green"),
    (("acteur", "innovation", "principal"), "actors", "purple"),
    (("enjeu", "perspective", "risque"), "challenges", "orange"),
    (("recommandation", "conseil", "action"), "recommendations", "yellow"),
)
DEFAULT_CATEGORY = ("other", "gray")


@dataclass
class Section:
    title: str
    body: str
    category: str
    color: str


def categorize(title: str) -> Tuple[str, str]:
    """Retourne (catégorie, couleur) d’après les mots-clés du titre."""
    lowered = title.lower()
    for keywords, category, color in CATEGORIES:
        if any(k in lowered for k in keywords):
            return category, color
    return DEFAULT_CATEGORY


def heading_title(line: str) -> Optional[str]:
    """Titre de section si `line` (déjà trimée) ressemble à un titre, sinon None."""
    m = HEADER_RE.match(line)
    if m:
        return m.group(1)

    m = NUMBERED_RE.match(line)
    if m:
        return m.group(2)

    m = BOLD_RE.match(line)
    if m:
        return m.group(1)

    m = COLON_RE.match(line)
    if m and len(m.group(1)) < COLON_TITLE_MAX and "." not in m.group(1):
        return m.group(1)

    return None


def parse_sections(text: Optional[str]) -> List[Section]:
    if not text or not text.strip():
        return []

    sections: List[Section] = []
    title: Optional[str] = None
    body: List[str] = []
    found_heading = False

    def flush() -> None:
        content = "\n".join(body).strip()
        if title is not None and content:
            category, color = categorize(title)
            if title == INTRO_TITLE and not found_heading:
                category, color = "summary", "blue"
            sections.append(Section(title=title, body=content, category=category, color=color))

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue

        detected = heading_title(line)
        if detected:
            flush()
            found_heading = True
            title, body = detected, []
        else:
            if title is None:
                title = INTRO_TITLE
            body.append(line)

    if not found_heading:
        return [Section(title=FALLBACK_TITLE, body=text, category=DEFAULT_CATEGORY[0], color=DEFAULT_CATEGORY[1])]

    flush()
    return sections
