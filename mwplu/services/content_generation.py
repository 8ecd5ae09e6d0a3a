from __future__ import annotations

from typing import Any, Mapping

import openai
from instructor import from_openai
from pydantic import BaseModel, Field

from ..config import settings


class BlogDraftLLMOut(BaseModel):
    title: str
    meta_title: str = Field(max_length=70)
    meta_description: str = Field(max_length=170)
    slug: str
    excerpt: str
    content: str  # markdown, starting with a single H1
    suggested_tags: list[str] = Field(default_factory=list)


SYSTEM = (
    "Tu es rédacteur pour un portail d'urbanisme français (PLU, zonage, permis de construire). "
    "Tu écris des articles de blog clairs, exacts et optimisés pour le référencement."
)


USER_TMPL = """Sujet: {topic}
Mot-clé principal: {keyword}
Public: {audience}
Longueur visée: {length} mots

Contexte de l'entreprise:
- Nom: {company}
- Mission: {mission}
- Ton: {tone}
- Messages clés: {messaging}
- Charte éditoriale: {guidelines}

Return a JSON object with keys:
- title
- meta_title (30-60 chars, contains the keyword)
- meta_description (70-160 chars)
- slug (lowercase, hyphen separated)
- excerpt (1-2 sentences)
- content (markdown, one H1, H2 sections)
- suggested_tags (up to 5)
"""


def build_prompt(payload: Mapping[str, Any], context: Mapping[str, Any] | None) -> str:
    context = context or {}
    return USER_TMPL.format(
        topic=payload.get("topic") or payload.get("title") or "",
        keyword=payload.get("focus_keyword") or "",
        audience=payload.get("audience") or "particuliers et professionnels de l'immobilier",
        length=payload.get("word_count") or 900,
        company=context.get("name") or "",
        mission=context.get("mission") or "",
        tone=payload.get("tone") or context.get("tone") or "professionnel et accessible",
        messaging=context.get("messaging") or "",
        guidelines=context.get("brand_voice_guidelines") or "",
    )


def generate_blog_draft(payload: Mapping[str, Any], context: Mapping[str, Any] | None = None) -> BlogDraftLLMOut:
    client = from_openai(openai.OpenAI())
    return client.chat.completions.create(
        model=settings.llm_model,
        response_model=BlogDraftLLMOut,
        messages=[
            {"role": "system", "content": SYSTEM},
            {"role": "user", "content": build_prompt(payload, context)},
        ],
        temperature=0.7,
    )
