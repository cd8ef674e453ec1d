from __future__ import annotations

"""SPARQL template registry used by the graph classifier."""

from dataclasses import dataclass
import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

from lodexplorer.explore.errors import ValidationError

_TEMPLATE_DIR = Path(__file__).resolve().parent / "queries"
_REGISTRY_PATH = _TEMPLATE_DIR / "registry.json"


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    name: str
    type: str
    default: Any | None = None


@dataclass(frozen=True, slots=True)
class Template:
    name: str
    text: str
    params: Mapping[str, ParameterSpec]

    def render(self, values: Mapping[str, Any]) -> str:
        merged: Dict[str, str] = {}
        for key, spec in self.params.items():
            if key in values:
                merged[key] = _sanitize(values[key], spec.type)
            elif spec.default is not None:
                merged[key] = _sanitize(spec.default, spec.type)
            else:
                raise KeyError(
                    f"Missing required template parameter '{key}' for {self.name}"
                )
        for unexpected in set(values) - set(self.params):
            raise KeyError(f"Unknown template parameter '{unexpected}' for {self.name}")
        rendered = self.text
        for key, value in merged.items():
            rendered = rendered.replace(f"{{{{{key}}}}}", value)
        return rendered


class TemplateRegistry:
    """Named SELECT templates loaded from ``queries/registry.json``."""

    def __init__(self, templates: Mapping[str, Template]):
        self._templates = dict(templates)

    @classmethod
    def load_default(cls) -> "TemplateRegistry":
        return cls.load(_REGISTRY_PATH)

    @classmethod
    def load(cls, registry_path: Path) -> "TemplateRegistry":
        raw = json.loads(registry_path.read_text(encoding="utf-8"))
        templates: Dict[str, Template] = {}
        for name, entry in raw.items():
            file_path = registry_path.parent / entry["file"]
            params = {
                p_name: ParameterSpec(
                    name=p_name,
                    type=p_details["type"],
                    default=p_details.get("default"),
                )
                for p_name, p_details in entry.get("params", {}).items()
            }
            templates[name] = Template(
                name=name,
                text=file_path.read_text(encoding="utf-8"),
                params=params,
            )
        return cls(templates)

    def get(self, name: str) -> Template:
        try:
            return self._templates[name]
        except KeyError as exc:
            raise KeyError(f"Unknown template '{name}'") from exc

    def render(self, name: str, values: Mapping[str, Any]) -> str:
        return self.get(name).render(values)

    @property
    def names(self) -> Iterable[str]:
        return self._templates.keys()


def is_iri(value: Any) -> bool:
    """True when ``value`` can be written between angle brackets in a query."""

    return (
        isinstance(value, str)
        and bool(_IRI_RE.match(value))
        and not _IRI_FORBIDDEN_RE.search(value)
    )


def _sanitize_iri(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError("IRI values must be strings")
    if not is_iri(value):
        # Never echo the rejected value.
        raise ValidationError("Invalid IRI value")
    return f"<{value}>"


def _sanitize(value: Any, kind: str) -> str:
    if kind == "iri":
        return _sanitize_iri(value)
    if kind == "iri_list":
        if isinstance(value, str):
            raise TypeError("IRI list parameters must be sequences of strings")
        return " ".join(_sanitize_iri(item) for item in value)
    if kind == "string":
        if not isinstance(value, str):
            raise TypeError("String parameters must be str")
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if kind == "int":
        if isinstance(value, str) and value.isdigit():
            value = int(value)
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("Integer parameters must be integers")
        return str(value)
    raise ValueError(f"Unsupported parameter type '{kind}'")


_IRI_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:.*")
_IRI_FORBIDDEN_RE = re.compile(r"[\s<>\"{}|\\^`]")


__all__ = ["ParameterSpec", "Template", "TemplateRegistry", "is_iri"]
