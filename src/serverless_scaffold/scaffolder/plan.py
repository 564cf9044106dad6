"""Template entries and the ordered generation plan built from them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from serverless_scaffold.scaffolder.errors import DuplicateEntryError


class TemplateEntry(BaseModel):
    """One output file: where it goes and which template produces it."""

    model_config = ConfigDict(frozen=True)

    output_path: str = Field(..., description="Relative POSIX path inside the project")
    template: str = Field(..., description="Template name under the template root")
    render: bool = Field(default=True, description="Render with Jinja2 (False copies verbatim)")
    executable: bool = Field(default=False, description="Set the executable bits after writing")


class GenerationPlan:
    """Ordered directories and template entries for one generation run.

    Entries keep insertion order and each output path may be declared only
    once, so every template in the plan is written exactly once.
    """

    def __init__(self) -> None:
        self.directories: list[str] = []
        self._entries: dict[str, TemplateEntry] = {}

    def add(self, entry: TemplateEntry) -> None:
        if entry.output_path in self._entries:
            raise DuplicateEntryError(entry.output_path)
        self._entries[entry.output_path] = entry

    def extend(self, entries: Iterable[TemplateEntry]) -> None:
        for entry in entries:
            self.add(entry)

    def add_directories(self, directories: Iterable[str]) -> None:
        for directory in directories:
            if directory not in self.directories:
                self.directories.append(directory)

    def output_paths(self) -> list[str]:
        """Return every declared output path, sorted."""
        return sorted(self._entries)

    @property
    def entries(self) -> list[TemplateEntry]:
        return list(self._entries.values())

    def __contains__(self, output_path: object) -> bool:
        return output_path in self._entries

    def __iter__(self) -> Iterator[TemplateEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
