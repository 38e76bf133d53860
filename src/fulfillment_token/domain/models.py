"""
Domain models — immutable values read out of a fulfillment token.

Only the keyed metadata entry is ever populated from a document today;
Permission exists so the multi-valued accessors have a typed contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class AttributeBag:
    """
    Text content of an element plus its attributes.

    Attribute names are as the tree reports them: local names for
    un-namespaced attributes, `{uri}local` for namespaced ones.
    """

    text: str = ""
    attributes: dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)


@dataclass(frozen=True, slots=True)
class Property:
    """A metadata entry such as `<dc:title>` under resourceItemInfo/metadata."""

    name: str
    value: AttributeBag = field(default_factory=AttributeBag)

    @property
    def text(self) -> str:
        return self.value.text


@dataclass(frozen=True, slots=True)
class Permission:
    """
    A permission grant (display, excerpt, print, ...).

    Accepted by the builder's optional stage but not written or read yet.
    """

    kind: str
    attributes: dict[str, str] = field(default_factory=dict)
