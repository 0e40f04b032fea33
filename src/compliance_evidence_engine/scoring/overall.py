"""Overall compliance score — one percentage from four category scores.

Categories (policies, tasks, documents, people) are weighted equally
regardless of their size: each contributes its own rounded percentage, and
the overall score is the rounded mean of those percentages. A category with
no denominator is left out of the mean. When no category has a denominator
the overall score is 0.

Rounding is half-up (12.5 -> 13), not Python's round-half-to-even.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from compliance_evidence_engine.observability import get_logger

logger = get_logger(__name__)

CATEGORY_POLICIES = "policies"
CATEGORY_TASKS = "tasks"
CATEGORY_DOCUMENTS = "documents"
CATEGORY_PEOPLE = "people"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percentage(done: int, total: int) -> int:
    """Return ``done / total`` as a rounded percentage, 0 when total <= 0."""
    if total <= 0:
        return 0
    return round_half_up(done / total * 100)


@dataclass(frozen=True)
class CategoryScore:
    """Done/total counts for one scoring category.

    Attributes:
        key: Category key (policies, tasks, documents, people).
        done: Items that satisfy the category.
        total: Items tracked in the category.
        label: Display name.
        subtitle_template: Format string taking ``done`` and ``total``.
    """

    key: str
    done: int
    total: int
    label: str = ""
    subtitle_template: str = "{done}/{total}"

    @property
    def has_data(self) -> bool:
        return self.total > 0

    @property
    def percentage(self) -> int:
        return percentage(self.done, self.total)

    @property
    def subtitle(self) -> str:
        return self.subtitle_template.format(done=self.done, total=self.total)


@dataclass(frozen=True)
class ComplianceOverview:
    """Per-category scores plus the combined overall score."""

    overall_score: int
    categories: tuple[CategoryScore, ...]

    def get_category(self, key: str) -> CategoryScore | None:
        for category in self.categories:
            if category.key == key:
                return category
        return None


def calculate_overall_compliance_score(categories: Iterable[CategoryScore]) -> int:
    """Combine category scores into one overall percentage.

    Args:
        categories: Category scores; those with total <= 0 are ignored.

    Returns:
        Rounded mean of the per-category rounded percentages, or 0 when no
        category has data.
    """
    with_data = [category for category in categories if category.has_data]
    if not with_data:
        return 0
    percentages = [category.percentage for category in with_data]
    return round_half_up(sum(percentages) / len(percentages))


def build_compliance_overview(
    published_policies: int,
    total_policies: int,
    done_tasks: int,
    total_tasks: int,
    completed_documents: int,
    total_documents: int,
    completed_members: int,
    total_members: int,
) -> ComplianceOverview:
    """Build the organization compliance overview.

    Args:
        published_policies: Policies in published state.
        total_policies: All policies.
        done_tasks: Strictly completed tasks.
        total_tasks: All tasks.
        completed_documents: Documents up to date.
        total_documents: Documents counted toward completeness.
        completed_members: People who completed their obligations.
        total_members: People tracked.

    Returns:
        ComplianceOverview with four categories in display order.
    """
    categories = (
        CategoryScore(
            key=CATEGORY_POLICIES,
            done=published_policies,
            total=total_policies,
            label="Policies",
            subtitle_template="{done}/{total} policies published",
        ),
        CategoryScore(
            key=CATEGORY_TASKS,
            done=done_tasks,
            total=total_tasks,
            label="Tasks",
            subtitle_template="{done}/{total} evidence tasks complete",
        ),
        CategoryScore(
            key=CATEGORY_DOCUMENTS,
            done=completed_documents,
            total=total_documents,
            label="Documents",
            subtitle_template="{done}/{total} documents up to date",
        ),
        CategoryScore(
            key=CATEGORY_PEOPLE,
            done=completed_members,
            total=total_members,
            label="People",
            subtitle_template="{done}/{total} people complete",
        ),
    )
    overall = calculate_overall_compliance_score(categories)
    logger.debug(
        "Compliance overview built",
        overall_score=overall,
        categories={c.key: c.percentage for c in categories if c.has_data},
    )
    return ComplianceOverview(overall_score=overall, categories=categories)
