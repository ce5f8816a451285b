"""Sample users and deterministic demo data."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fatigat.models.projects import Project, Segment, SegmentKind
from fatigat.services.timer import DEFAULT_BREAK_DURATION_MS

if TYPE_CHECKING:
    from fatigat.data.protocols import ProjectStoreProtocol

logger = logging.getLogger(__name__)

PROJECT_TAGS: tuple[str, ...] = (
    "Development",
    "Design",
    "Research",
    "Documentation",
    "Meeting",
    "Planning",
    "Bug Fix",
    "Feature",
)


@dataclass(frozen=True)
class DemoTemplate:
    name: str
    description: str
    tags: tuple[str, ...]


DEMO_TEMPLATES: tuple[DemoTemplate, ...] = (
    DemoTemplate(
        "awesome-project",
        "A fantastic web application",
        ("JavaScript", "React", "frontend"),
    ),
    DemoTemplate(
        "data-analyzer",
        "Advanced data analysis tools",
        ("Python", "data-science", "machine-learning"),
    ),
    DemoTemplate(
        "mobile-app",
        "Cross-platform mobile application",
        ("React Native", "mobile", "iOS"),
    ),
    DemoTemplate(
        "api-server",
        "RESTful API backend service",
        ("Node.js", "Express", "backend"),
    ),
    DemoTemplate(
        "ml-model",
        "Machine learning prediction model",
        ("Python", "TensorFlow", "AI"),
    ),
    DemoTemplate(
        "game-engine",
        "Lightweight 2D game engine",
        ("C++", "OpenGL", "gaming"),
    ),
    DemoTemplate(
        "blog-platform",
        "Modern blogging platform",
        ("Vue.js", "Nuxt", "CMS"),
    ),
    DemoTemplate(
        "chat-app",
        "Real-time messaging application",
        ("Socket.io", "WebRTC", "realtime"),
    ),
)


def build_project(
    project_id: int,
    name: str,
    tags: Sequence[str],
    sessions: Sequence[int],
    breaks: int,
    end_ms: int,
    description: str = "",
) -> Project:
    """Lay out ``sessions`` back to back ending at ``end_ms``.

    One break follows each of the first ``breaks`` sessions; any extra breaks
    trail the last session. The result satisfies the timeline invariants.
    """
    extra = max(breaks - len(sessions), 0)
    total_ms = sum(sessions) * 1000 + breaks * DEFAULT_BREAK_DURATION_MS
    cursor = end_ms - total_ms
    timeline: list[Segment] = []
    for index, length in enumerate(sessions):
        timeline.append(Segment(kind=SegmentKind.WORK, start=cursor, end=cursor + length * 1000))
        cursor += length * 1000
        if index < breaks:
            timeline.append(_break_at(cursor))
            cursor += DEFAULT_BREAK_DURATION_MS
    for _ in range(extra):
        timeline.append(_break_at(cursor))
        cursor += DEFAULT_BREAK_DURATION_MS
    return Project(
        id=project_id,
        name=name,
        tags=list(tags),
        time_spent=sum(sessions),
        breaks=breaks,
        session_lengths=[float(s) for s in sessions],
        timeline=timeline,
        description=description,
    )


def _break_at(start: int) -> Segment:
    return Segment(kind=SegmentKind.BREAK, start=start, end=start + DEFAULT_BREAK_DURATION_MS)


def sample_users(now_ms: int) -> dict[str, list[Project]]:
    """The built-in sample users and their projects."""
    hour = 3_600_000
    return {
        "sindhu-m-valerie": [
            build_project(
                1, "FatiGat Development", ["Development", "React"], [2700, 3600, 8100], 3, now_ms
            ),
            build_project(
                2, "UI/UX Design", ["Design", "UI"], [1800, 2700, 6300], 4, now_ms - 5 * hour
            ),
        ],
        "demo-user": [
            build_project(1, "Project Alpha", ["Development"], [3600] * 5, 5, now_ms),
            build_project(
                2, "Meeting Notes", ["Documentation", "Meeting"], [5400], 1, now_ms - 8 * hour
            ),
        ],
        "test-user": [
            build_project(
                1, "Bug Fixes", ["Bug Fix", "Development"], [4200, 4200, 4200], 3, now_ms
            ),
        ],
    }


def generate_demo_projects(username: str, now_ms: int) -> list[Project]:
    """Deterministic demo projects for ``username``."""
    username = username.lower()
    rng = random.Random(username)
    templates = rng.sample(DEMO_TEMPLATES, rng.randint(2, 4))
    projects: list[Project] = []
    for index, template in enumerate(templates, start=1):
        sessions = [rng.randint(1800, 7200) for _ in range(3)]
        end_ms = now_ms - rng.randint(3_600_000, 2_592_000_000)
        projects.append(
            build_project(
                index,
                f"{template.name}-{rng.randint(1, 999)}",
                template.tags,
                sessions,
                rng.randint(1, 6),
                end_ms,
                description=f"{template.description} - {username}'s implementation",
            )
        )
    return projects


async def seed_sample_users(store: ProjectStoreProtocol, now_ms: int) -> list[str]:
    """Store every sample user; returns the usernames written."""
    users = sample_users(now_ms)
    for username, projects in users.items():
        await store.save(username, projects)
    logger.info("Seeded %d sample users", len(users))
    return list(users)
