"""
Skill sources — favorite skills and recommended skill repositories.
"""

from __future__ import annotations

from jcli.core.models.catalog import Skill, SkillRepo

FAVORITE_SKILLS: tuple[Skill, ...] = (
    Skill("anthropics/skills", "frontend-design"),
    Skill("expo/skills", "upgrading-expo"),
    Skill("giuseppe-trisciuoglio/developer-kit", "shadcn-ui"),
    Skill("sickn33/antigravity-awesome-skills", "last30days"),
    Skill("tobi/qmd", "qmd"),
    Skill("vercel-labs/agent-skills", "vercel-react-best-practices"),
    Skill("vercel-labs/agent-skills", "vercel-react-native-skills"),
)

SKILL_REPOS: tuple[SkillRepo, ...] = (
    SkillRepo("anthropics/skills", "Official Anthropic skills for Claude"),
    SkillRepo("better-auth/skills", "Authentication best practices"),
    SkillRepo("code-with-beto/skills", "Beto's development skills"),
    SkillRepo("coreyhaines31/marketingskills", "Marketing and SEO skills"),
    SkillRepo("expo/skills", "Expo and React Native mobile development"),
    SkillRepo("firecrawl/cli", "Web content extraction for AI agents"),
    SkillRepo("giuseppe-trisciuoglio/developer-kit", "Developer toolkit including shadcn-ui"),
    SkillRepo("obra/superpowers", "Development workflow and productivity skills"),
    SkillRepo("remotion-dev/skills", "Remotion video creation skills"),
    SkillRepo("resend/email-best-practices", "Email development best practices"),
    SkillRepo("supabase/agent-skills", "Supabase database and backend skills"),
    SkillRepo("tobi/qmd", "Local search engine for docs and knowledge bases"),
    SkillRepo("vercel-labs/agent-skills", "Vercel React and web development skills"),
)


def favorite_skills() -> list[Skill]:
    return list(FAVORITE_SKILLS)


def recommended_repos() -> list[SkillRepo]:
    return list(SKILL_REPOS)


def skill_repo_by_name(repo: str) -> SkillRepo | None:
    for r in SKILL_REPOS:
        if r.repo == repo:
            return r
    return None


def is_favorite_skill(skill_name: str, repo: str = "") -> bool:
    """True if *skill_name* is a favorite (from *repo*, when given)."""
    return any(
        fav.skill_name == skill_name and (not repo or fav.repo == repo)
        for fav in FAVORITE_SKILLS
    )
