"""Export planning: numbering, grouping and naming of output files."""

from dataclasses import dataclass
from typing import Literal

from chapter_extractor.models import Chapter

from .config import ExportConfig
from .errors import EmptySelection

GROUP_SEPARATOR = "\n\n\n---------------- END ----------------\n\n\n"


@dataclass(frozen=True)
class ExportPlan:
    mode: Literal["single", "grouped"] = "single"
    pattern: str = "Chapter"
    start_number: int = 1
    offset: int = 0
    group_size: int = 1
    skip_last: int = 0

    @classmethod
    def from_config(cls, config: ExportConfig) -> "ExportPlan":
        return cls(
            mode=config.mode,
            pattern=config.pattern,
            start_number=config.start_number,
            offset=config.offset,
            group_size=config.group_size if config.mode == "grouped" else 1,
            skip_last=config.skip_last,
        )


@dataclass(frozen=True)
class OutputUnit:
    """One physical output file.

    Args:
        filename: File name without extension
        chapters: Member chapters, in order
        first_number: Number assigned to the first member
        last_number: Number assigned to the last member
    """

    filename: str
    chapters: tuple[Chapter, ...]
    first_number: int
    last_number: int

    @property
    def content(self) -> str:
        """Member texts joined with the group separator."""
        return GROUP_SEPARATOR.join(chapter.text for chapter in self.chapters)


def unit_name(pattern: str, first: int, last: int) -> str:
    if first == last:
        return f"{pattern}{first:02d}"
    return f"{pattern}{first:02d}-{last:02d}"


def plan_export(chapters: list[Chapter], plan: ExportPlan) -> list[OutputUnit]:
    """Split the selected chapters into output units.

    Args:
        chapters: Selected chapters in extraction order
        plan: Numbering and grouping rules

    Returns:
        Output units in order

    Raises:
        EmptySelection: If the selection is empty or offset/skip_last remove
            every chapter
    """
    if not chapters:
        raise EmptySelection("No chapters selected to process.")

    end = len(chapters) - plan.skip_last
    usable = chapters[plan.offset:max(end, 0)]
    if not usable:
        raise EmptySelection(
            f"Offset of {plan.offset} and skip last of {plan.skip_last} resulted in "
            f"no chapters to process from your selection of {len(chapters)}."
        )

    size = plan.group_size if plan.mode == "grouped" else 1
    units = []
    for start in range(0, len(usable), size):
        group = tuple(usable[start:start + size])
        first = plan.start_number + start
        last = first + len(group) - 1
        units.append(
            OutputUnit(
                filename=unit_name(plan.pattern, first, last),
                chapters=group,
                first_number=first,
                last_number=last,
            )
        )
    return units
