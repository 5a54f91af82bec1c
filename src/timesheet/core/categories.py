"""Tag classification and per-day category entries - pure, no I/O."""

import re
from dataclasses import dataclass, field
from enum import Enum

from .intervals import TrackedInterval

GUILD_PREFIX = "guild"
STANDUP_PREFIX = "standup"
INDUCTION_PREFIX = "induction"

# at<N> -> Apertis Phabricator, t<N> -> Collabora Phabricator
_TASK_PATTERN = re.compile(r"^(at|t)(\d+)$")

DEFAULT_TASK_URLS = {
    "at": "https://phabricator.apertis.org/T{id}",
    "t": "https://phabricator.collabora.org/T{id}",
}


class CategoryKind(Enum):
    """The closed family of category kinds. Extend here to add new ones."""

    GUILD = "guild"
    STANDUP = "standup"
    INDUCTION = "induction"
    TASK = "task"


_FIXED_LABELS = {
    CategoryKind.GUILD: "Guild",
    CategoryKind.STANDUP: "Standup",
    CategoryKind.INDUCTION: "Induction",
}

# Ordering used by sort_entries; tasks come last, by number.
_KIND_ORDER = [CategoryKind.GUILD, CategoryKind.STANDUP, CategoryKind.INDUCTION, CategoryKind.TASK]


@dataclass(frozen=True)
class Category:
    """A classified tag: which kind, and the key identifying the instance."""

    kind: CategoryKind
    key: str


@dataclass(frozen=True)
class TaskMetadata:
    """Title and tags of a task as known by its issue tracker."""

    title: str = ""
    tags: tuple[str, ...] = ()


def parse_task_id(tag: str) -> tuple[str, int] | None:
    """Split a task tag into (system prefix, number), or None if not a task tag."""
    match = _TASK_PATTERN.match(tag.lower())
    if not match:
        return None
    number = int(match.group(2))
    if number == 0:
        return None
    return match.group(1), number


def task_number(tag: str) -> int | None:
    parsed = parse_task_id(tag)
    return parsed[1] if parsed else None


def is_task_tag(tag: str) -> bool:
    return parse_task_id(tag) is not None


def task_uri(task_id: str, task_urls: dict[str, str] | None = None) -> str:
    """Deep link to a task in its tracker, or "" for unknown systems."""
    parsed = parse_task_id(task_id)
    if not parsed:
        return ""
    prefix, number = parsed
    template = (task_urls or DEFAULT_TASK_URLS).get(prefix)
    if not template:
        return ""
    return template.format(id=number)


def matches_kind(kind: CategoryKind, tag: str, induction_prefix: str = INDUCTION_PREFIX) -> bool:
    """Check whether a tag belongs to a given category kind."""
    tag = tag.lower()
    match kind:
        case CategoryKind.TASK:
            return is_task_tag(tag)
        case CategoryKind.GUILD:
            return tag.startswith(GUILD_PREFIX)
        case CategoryKind.STANDUP:
            return tag.startswith(STANDUP_PREFIX)
        case CategoryKind.INDUCTION:
            return tag.startswith(induction_prefix)
    return False


def classify(tag: str, induction_prefix: str = INDUCTION_PREFIX) -> Category | None:
    """
    Classify a tag as a category, or None for a plain descriptive tag.

    Kinds are tried in order task, guild, standup, induction. With
    induction_prefix="guild" the induction kind can never be reached, since
    guild claims those tags first.
    """
    tag = tag.lower()
    if matches_kind(CategoryKind.TASK, tag):
        return Category(CategoryKind.TASK, tag)
    for kind in (CategoryKind.GUILD, CategoryKind.STANDUP, CategoryKind.INDUCTION):
        if matches_kind(kind, tag, induction_prefix):
            return Category(kind, kind.value)
    return None


def tag_group_label(tags: tuple[str, ...], is_category_tag) -> str:
    """Join the non-category tags, first letter upper-cased, with ", "."""
    labels = []
    for tag in tags:
        tag = tag.lower()
        if is_category_tag(tag):
            continue
        labels.append(tag[:1].upper() + tag[1:])
    return ", ".join(labels)


@dataclass
class CategoryEntry:
    """
    One category instance for one report day.

    Holds the day's intervals for the category, grouped by the label built
    from each interval's non-category tags.
    """

    kind: CategoryKind
    key: str
    induction_prefix: str = INDUCTION_PREFIX
    task_urls: dict[str, str] | None = None
    track_tags: dict[str, list[TrackedInterval]] = field(default_factory=dict)
    metadata: TaskMetadata | None = None

    @classmethod
    def for_category(cls, category: Category, **kwargs) -> "CategoryEntry":
        return cls(kind=category.kind, key=category.key, **kwargs)

    def category(self) -> str:
        return self.key

    def pretty_id(self) -> str:
        if self.kind is CategoryKind.TASK:
            return self.key.upper()
        return _FIXED_LABELS[self.kind]

    def uri(self) -> str:
        if self.kind is CategoryKind.TASK:
            return task_uri(self.key, self.task_urls)
        return ""

    def title(self) -> str:
        return self.metadata.title if self.metadata else ""

    def number(self) -> int | None:
        """Numeric task id, None for fixed categories."""
        if self.kind is CategoryKind.TASK:
            return task_number(self.key)
        return None

    def is_category_tag(self, tag: str) -> bool:
        return matches_kind(self.kind, tag, self.induction_prefix)

    def add_track_tags(self, tags: tuple[str, ...], track: TrackedInterval) -> None:
        """Append an interval under the label of its non-category tags."""
        label = tag_group_label(tags, self.is_category_tag)
        self.track_tags.setdefault(label, []).append(track)

    def groups(self) -> list[tuple[str, list[TrackedInterval]]]:
        """Tag-groups ordered by label, the empty label first."""
        return sorted(self.track_tags.items())

    def intervals(self) -> list[TrackedInterval]:
        return [track for _, tracks in self.groups() for track in tracks]


def sort_entries(entries: list[CategoryEntry]) -> list[CategoryEntry]:
    """
    Sort entries deterministically.

    Fixed categories first (guild, standup, induction), then tasks by number.
    """

    def sort_key(entry: CategoryEntry) -> tuple[int, int, str]:
        return (_KIND_ORDER.index(entry.kind), entry.number() or 0, entry.key)

    return sorted(entries, key=sort_key)
