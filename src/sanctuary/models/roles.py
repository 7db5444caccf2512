"""User roles, per-role project types and starter templates."""

from __future__ import annotations

from pydantic import BaseModel, Field


class UserRole(BaseModel):
    id: str
    title: str
    icon: str
    description: str
    examples: list[str] = Field(default_factory=list)


class ProjectTemplate(BaseModel):
    title: str
    type: str
    description: str = ""
    notes: str = ""
    tags: list[str] = Field(default_factory=list)


USER_ROLES: list[UserRole] = [
    UserRole(
        id="developer",
        title="Developer",
        icon="code",
        description="Building apps, websites, and digital solutions",
        examples=["Side projects", "Open source contributions", "Learning new frameworks"],
    ),
    UserRole(
        id="writer",
        title="Writer",
        icon="edit_note",
        description="Crafting stories, articles, and creative content",
        examples=["Blog posts", "Novel chapters", "Poetry collections"],
    ),
    UserRole(
        id="student",
        title="Student",
        icon="school",
        description="Learning, researching, and academic pursuits",
        examples=["Course projects", "Research papers", "Study goals"],
    ),
    UserRole(
        id="entrepreneur",
        title="Entrepreneur",
        icon="work",
        description="Building businesses and innovative solutions",
        examples=["Startup ideas", "Business plans", "Market research"],
    ),
    UserRole(
        id="creative",
        title="Creative Hobbyist",
        icon="palette",
        description="Exploring artistic and creative expressions",
        examples=["Art projects", "Music compositions", "Craft projects"],
    ),
]

PROJECT_TYPES_BY_ROLE: dict[str, list[str]] = {
    "developer": ["Web App", "Mobile App", "API", "Library", "Tool", "Learning Project", "Open Source"],
    "writer": ["Blog Post", "Article", "Story", "Novel", "Poetry", "Script", "Research"],
    "student": ["Assignment", "Research Paper", "Study Guide", "Project", "Thesis", "Course Work"],
    "entrepreneur": ["Business Plan", "MVP", "Market Research", "Pitch Deck", "Product Idea", "Strategy"],
    "creative": ["Art Project", "Music", "Craft", "Design", "Photography", "Video", "Performance"],
}

PROJECT_TEMPLATES: dict[str, list[ProjectTemplate]] = {
    "developer": [
        ProjectTemplate(
            title="React Component Library",
            type="Library",
            description="Build reusable UI components for future projects",
            notes="Start with Button, Input, and Card components. Set up Storybook for documentation.",
            tags=["react", "typescript", "storybook"],
        ),
        ProjectTemplate(
            title="Personal Portfolio Website",
            type="Web App",
            description="Showcase your work and skills",
            notes="Include projects section, about page, contact form.",
            tags=["portfolio", "nextjs", "tailwind"],
        ),
    ],
    "writer": [
        ProjectTemplate(
            title="Daily Writing Practice",
            type="Blog Post",
            description="Establish a consistent writing routine",
            notes="Write 500 words daily. Focus on different topics each week.",
            tags=["practice", "routine", "creativity"],
        ),
        ProjectTemplate(
            title="Short Story Collection",
            type="Story",
            description="Collection of interconnected short stories",
            notes="Start with character sketches. Aim for 5-7 stories, 2000 words each.",
            tags=["fiction", "collection", "characters"],
        ),
    ],
    "student": [
        ProjectTemplate(
            title="Research Paper Outline",
            type="Research Paper",
            description="Structured approach to academic writing",
            notes="Create thesis statement, gather sources, outline main arguments.",
            tags=["research", "academic", "writing"],
        ),
    ],
    "entrepreneur": [
        ProjectTemplate(
            title="Market Validation Study",
            type="Market Research",
            description="Validate your business idea with real data",
            notes="Survey target audience, analyze competitors, identify pain points.",
            tags=["validation", "research", "customers"],
        ),
    ],
    "creative": [
        ProjectTemplate(
            title="30-Day Art Challenge",
            type="Art Project",
            description="Daily creative practice to build skills",
            notes="Different theme each day. Share progress on social media.",
            tags=["challenge", "practice", "skills"],
        ),
    ],
}

QUICK_CAPTURE_TYPE = "Quick Idea"
DEFAULT_ROLE_ID = "developer"


def get_role(role_id: str) -> UserRole | None:
    normalized = role_id.strip().lower()
    return next((role for role in USER_ROLES if role.id == normalized), None)


def project_types_for(role_id: str) -> list[str]:
    """Type list scoped to a role, falling back to the developer list."""
    return PROJECT_TYPES_BY_ROLE.get(role_id, PROJECT_TYPES_BY_ROLE[DEFAULT_ROLE_ID])


def default_project_type(role_id: str) -> str:
    return project_types_for(role_id)[0]


def templates_for(role_id: str) -> list[ProjectTemplate]:
    return PROJECT_TEMPLATES.get(role_id, [])
