"""Default access rights template.

The template is a YAML document describing the access sections that every
new root project receives.  Rule strings may use the ``${owner}``
placeholder, replaced by the name of the project's owner group.

Schema
------
::

    access:
      "refs/*":
        exclusiveGroupPermissions: read
        read:
          - group ${owner}
        push: group Administrators
      "refs/heads/*":
        create: group ${owner}
        label-Code-Review: -2..+2 group ${owner}

Each entry value is a single rule string or a list of them.
``exclusiveGroupPermissions`` holds permission names separated by commas,
spaces or tabs (or a list of such strings).

Only the document structure is checked when loading.  Ref patterns,
permission names and rules are checked entry by entry when the template
is applied, so one bad entry never disables the whole template.

Example
-------
::

    template = AccessRightsTemplate.load("/etc/project-structure/access.yaml")
    for section in template.sections:
        print(section.ref_pattern, [name for name, _ in section.entries])
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from project_group_structure.access.permissions import EXCLUSIVE_GROUP_PERMISSIONS
from project_group_structure.errors import TemplateLoadError

logger = logging.getLogger(__name__)

ACCESS_KEY = "access"


@dataclass(frozen=True)
class TemplateSection:
    """One access section of the template, as written.

    Attributes
    ----------
    ref_pattern:
        Ref pattern the section applies to (not validated yet).
    exclusive:
        Raw ``exclusiveGroupPermissions`` values.
    entries:
        ``(permission name, rule strings)`` pairs in document order.
    """

    ref_pattern: str
    exclusive: tuple[str, ...] = ()
    entries: tuple[tuple[str, tuple[str, ...]], ...] = ()


@dataclass(frozen=True)
class AccessRightsTemplate:
    """Immutable, process-wide default access rights."""

    sections: tuple[TemplateSection, ...] = ()
    source: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.sections

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, template_path: str | Path) -> "AccessRightsTemplate":
        """Load the template from a YAML file.

        Raises
        ------
        TemplateLoadError
            If the file is missing, unreadable, not YAML, or not shaped
            like a template.
        """
        template_path = Path(template_path)
        try:
            with template_path.open("r", encoding="utf-8") as fh:
                raw: object = yaml.safe_load(fh)
        except OSError as exc:
            raise TemplateLoadError(f"Cannot read template: {exc}", str(template_path)) from exc
        except yaml.YAMLError as exc:
            raise TemplateLoadError(f"Failed to parse YAML: {exc}", str(template_path)) from exc
        return cls.from_dict(raw, source=str(template_path))

    @classmethod
    def from_yaml_string(
        cls, yaml_string: str, source: str | None = None
    ) -> "AccessRightsTemplate":
        try:
            raw: object = yaml.safe_load(yaml_string)
        except yaml.YAMLError as exc:
            raise TemplateLoadError(f"Failed to parse YAML string: {exc}", source) from exc
        return cls.from_dict(raw, source=source)

    @classmethod
    def from_dict(cls, raw: object, source: str | None = None) -> "AccessRightsTemplate":
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise TemplateLoadError("Template must be a YAML mapping.", source)

        access = raw.get(ACCESS_KEY) or {}
        if not isinstance(access, dict):
            raise TemplateLoadError(f"'{ACCESS_KEY}' must be a mapping of ref patterns.", source)

        sections = tuple(
            _parse_section(str(ref_pattern), body, source)
            for ref_pattern, body in access.items()
        )
        logger.info(
            "Loaded default access rights template from %s (%d sections)",
            source or "<dict>",
            len(sections),
        )
        return cls(sections=sections, source=source)


def _parse_section(ref_pattern: str, body: object, source: str | None) -> TemplateSection:
    if body is None:
        return TemplateSection(ref_pattern=ref_pattern)
    if not isinstance(body, dict):
        raise TemplateLoadError(f"Section '{ref_pattern}' must be a mapping.", source)

    exclusive: tuple[str, ...] = ()
    entries: list[tuple[str, tuple[str, ...]]] = []
    for key, value in body.items():
        values = _as_strings(ref_pattern, str(key), value, source)
        if key == EXCLUSIVE_GROUP_PERMISSIONS:
            exclusive = values
        else:
            entries.append((str(key), values))
    return TemplateSection(ref_pattern=ref_pattern, exclusive=exclusive, entries=tuple(entries))


def _as_strings(
    ref_pattern: str, key: str, value: object, source: str | None
) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = [value]
    for item in items:
        if isinstance(item, (dict, list, tuple)):
            raise TemplateLoadError(
                f"Entry '{key}' of section '{ref_pattern}' must hold strings.", source
            )
    return tuple(str(item) for item in items if item is not None)
