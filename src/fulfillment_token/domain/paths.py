"""
Symbolic paths — the single source of every XPath the token layer evaluates.

The document has one fixed namespace, addressed with one fixed prefix:

    <adept:fulfillmentToken xmlns:adept="http://ns.adobe.com/adept"
                            fulfillmentType="..." auth="...">
      <adept:distributor/> <adept:operatorURL/> <adept:transaction/>
      <adept:purchase/> <adept:expiration/>
      <adept:resourceItemInfo>
        <adept:resource/> <adept:resourceItem/> <adept:metadata/>
        <adept:src/> <adept:downloadType/>
      </adept:resourceItemInfo>
      <adept:userId/>
      <adept:hmac/>
    </adept:fulfillmentToken>

DocumentModel getters/setters and the builder's optional stage both read
their paths from here, so a field is addressed the same way everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

ADEPT_NS: Final = "http://ns.adobe.com/adept"
ADEPT_PREFIX: Final = "adept"
NAMESPACES: Final = {ADEPT_PREFIX: ADEPT_NS}

ROOT_NAME: Final = "fulfillmentToken"
RESOURCE_ITEM_INFO: Final = "resourceItemInfo"
METADATA: Final = "metadata"

URN_UUID_PREFIX: Final = "urn:uuid:"

ROOT_PATH: Final = f"/{ADEPT_PREFIX}:{ROOT_NAME}"


def _step(name: str) -> str:
    return f"/{ADEPT_PREFIX}:{name}"


@dataclass(frozen=True, slots=True)
class FieldPath:
    """
    Location of a text-bearing element.

    `parent` is the chain of container elements between the root and the
    field (empty for direct children of the root).
    """

    name: str
    parent: tuple[str, ...] = ()

    @property
    def parent_node(self) -> str:
        return ROOT_PATH + "".join(_step(p) for p in self.parent)

    @property
    def node(self) -> str:
        return self.parent_node + _step(self.name)

    @property
    def text(self) -> str:
        return self.node + "/text()"


@dataclass(frozen=True, slots=True)
class AttributePath:
    """Location of an attribute on the root element."""

    name: str

    @property
    def value(self) -> str:
        return f"{ROOT_PATH}/@{self.name}"


DISTRIBUTOR: Final = FieldPath("distributor")
OPERATOR_URL: Final = FieldPath("operatorURL")
TRANSACTION: Final = FieldPath("transaction")
PURCHASE: Final = FieldPath("purchase")
EXPIRATION: Final = FieldPath("expiration")
USER_ID: Final = FieldPath("userId")
HMAC: Final = FieldPath("hmac")

RESOURCE_ITEM_INFO_PATH: Final = FieldPath(RESOURCE_ITEM_INFO)
RESOURCE: Final = FieldPath("resource", (RESOURCE_ITEM_INFO,))
RESOURCE_ITEM: Final = FieldPath("resourceItem", (RESOURCE_ITEM_INFO,))
SRC: Final = FieldPath("src", (RESOURCE_ITEM_INFO,))
DOWNLOAD_TYPE: Final = FieldPath("downloadType", (RESOURCE_ITEM_INFO,))
METADATA_PATH: Final = FieldPath(METADATA, (RESOURCE_ITEM_INFO,))

FULFILLMENT_TYPE: Final = AttributePath("fulfillmentType")
AUTH: Final = AttributePath("auth")


def content(node_name: str) -> FieldPath:
    """Path of an arbitrary direct child of the root."""
    return FieldPath(node_name)


# One child of resourceItemInfo/metadata, any namespace. The key is bound as
# the XPath variable $key, never spliced into the expression.
METADATA_ENTRY: Final = f"{METADATA_PATH.node}/*[local-name()=$key]"
