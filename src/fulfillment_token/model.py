"""
DocumentModel — typed, fail-soft access to the fields of a fulfillment token.

The model wraps a reference to an existing tree; it never copies it. Any other
holder of the same tree (including an unfinished builder stage) sees every
write immediately, and vice versa.

Reads evaluate a fixed symbolic path and return the value or None.
Writes locate the target node by the same path and return a Result:
Success(value written), Failure(NOT_FOUND) when the node is missing, or
Failure(INVALID_FORMAT) when the value cannot be stored (control characters,
a naive datetime). A failed write leaves the tree untouched; writes never
create nodes.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

import structlog
from railway import ErrorCode, ResultFailures
from railway.result import Result

from fulfillment_token.adapters.lxml_tree import LxmlPathResolver, local_name
from fulfillment_token.domain import paths
from fulfillment_token.domain.errors import InvalidFormatError, InvalidStructureError
from fulfillment_token.domain.models import AttributeBag, Permission, Property
from fulfillment_token.domain.paths import AttributePath, FieldPath
from fulfillment_token.domain.ports import PathResolver

log = structlog.get_logger()


def format_timestamp(value: datetime) -> str:
    """
    ISO-8601 date-time rendering used for purchase and expiration; UTC is
    written as `Z`. Raises InvalidFormatError for a naive datetime.
    """
    offset = value.utcoffset()
    if offset is None:
        raise InvalidFormatError(f"Timestamp {value.isoformat()} has no UTC offset")
    text = value.isoformat()
    if offset == timedelta(0):
        text = text.removesuffix("+00:00") + "Z"
    return text


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def resource_urn(resource_id: UUID) -> str:
    """`urn:uuid:` rendering of a resource identifier."""
    return f"{paths.URN_UUID_PREFIX}{resource_id}"


def _assign_text(node: Any, value: str) -> str:
    node.text = value
    return value


def _assign_attribute(element: Any, name: str, value: str) -> str:
    element.set(name, value)
    return value


class DocumentModel:
    """
    Read/write facade over a `fulfillmentToken` tree.

    Raises InvalidStructureError if the root's local name is not
    `fulfillmentToken`. Use DocumentModel.open() for a Result instead.
    """

    def __init__(self, document: Any, resolver: PathResolver | None = None) -> None:
        if hasattr(document, "getroottree"):
            document = document.getroottree()
        root_name = local_name(document.getroot())
        if root_name != paths.ROOT_NAME:
            raise InvalidStructureError(
                f"Document root element is {root_name!r}, expected {paths.ROOT_NAME!r}"
            )
        self._document = document
        self._resolver = resolver or LxmlPathResolver()

    @classmethod
    def open(cls, document: Any, resolver: PathResolver | None = None) -> Result[DocumentModel]:
        try:
            return Result.success(cls(document, resolver))
        except InvalidStructureError as e:
            return ResultFailures.invalid_structure(str(e), e)

    # ─────────────────────── Internals ───────────────────────

    def _text(self, field: FieldPath) -> str | None:
        value = self._resolver.find_string(self._document, field.text)
        if value is not None:
            return value
        # text() matches nothing on an empty element; report "" rather than None
        if self._resolver.find_node(self._document, field.node) is not None:
            return ""
        return None

    def _set_text(self, field: FieldPath, value: str) -> Result[str]:
        node = self._resolver.find_node(self._document, field.node)
        if node is None:
            log.debug("token.field_not_found", field=field.name, path=field.node)
            return ResultFailures.not_found(field.name, field.node)
        return Result.from_computation(
            lambda: _assign_text(node, value),
            ErrorCode.INVALID_FORMAT,
            f"{field.name} cannot hold {value!r}",
        )

    def _set_timestamp(self, field: FieldPath, value: str | datetime) -> Result[str]:
        if isinstance(value, datetime):
            try:
                value = format_timestamp(value)
            except InvalidFormatError as e:
                return ResultFailures.invalid_format(f"{field.name}: {e}", e)
        return self._set_text(field, value)

    def _attribute(self, attribute: AttributePath) -> str | None:
        return self._resolver.find_string(self._document, attribute.value)

    def _set_attribute(self, attribute: AttributePath, value: str) -> Result[str]:
        root = self._resolver.find_node(self._document, paths.ROOT_PATH)
        if root is None:
            log.debug("token.field_not_found", field=attribute.name, path=paths.ROOT_PATH)
            return ResultFailures.not_found(attribute.name, paths.ROOT_PATH)
        return Result.from_computation(
            lambda: _assign_attribute(root, attribute.name, value),
            ErrorCode.INVALID_FORMAT,
            f"{attribute.name} cannot hold {value!r}",
        )

    # ─────────────────────── Tree access ───────────────────────

    @property
    def document(self) -> Any:
        """The backing tree (shared, not a copy)."""
        return self._document

    @property
    def fulfillment_token(self) -> Any:
        """The root element."""
        return self._document.getroot()

    def get_content(self, node_name: str) -> str | None:
        """Text of any direct child of the root."""
        return self._text(paths.content(node_name))

    # ─────────────────────── Mandatory fields ───────────────────────

    @property
    def distributor(self) -> str | None:
        return self._text(paths.DISTRIBUTOR)

    def set_distributor(self, distributor: str) -> Result[str]:
        return self._set_text(paths.DISTRIBUTOR, distributor)

    @property
    def operator_url(self) -> str | None:
        return self._text(paths.OPERATOR_URL)

    def set_operator_url(self, operator_url: str) -> Result[str]:
        return self._set_text(paths.OPERATOR_URL, operator_url)

    @property
    def transaction(self) -> str | None:
        return self._text(paths.TRANSACTION)

    def set_transaction(self, transaction: str) -> Result[str]:
        return self._set_text(paths.TRANSACTION, transaction)

    @property
    def purchase(self) -> str | None:
        return self._text(paths.PURCHASE)

    @property
    def purchase_datetime(self) -> datetime | None:
        return parse_timestamp(self.purchase)

    def set_purchase(self, purchase: str | datetime) -> Result[str]:
        """
        Accepts pre-formatted text or a datetime (rendered as ISO-8601).

        A naive datetime is refused with INVALID_FORMAT.
        """
        return self._set_timestamp(paths.PURCHASE, purchase)

    @property
    def expiration(self) -> str | None:
        return self._text(paths.EXPIRATION)

    @property
    def expiration_datetime(self) -> datetime | None:
        return parse_timestamp(self.expiration)

    def set_expiration(self, expiration: str | datetime) -> Result[str]:
        return self._set_timestamp(paths.EXPIRATION, expiration)

    @property
    def resource(self) -> str | None:
        """Raw `urn:uuid:...` value of resourceItemInfo/resource."""
        return self._text(paths.RESOURCE)

    @property
    def resource_uuid(self) -> UUID | None:
        """
        The resource identifier without its `urn:uuid:` prefix.

        None when the resource is absent or not prefixed. Raises
        InvalidFormatError when the prefix is there but the rest is not a UUID.
        """
        urn = self.resource
        if urn is None or not urn.startswith(paths.URN_UUID_PREFIX):
            return None
        suffix = urn[len(paths.URN_UUID_PREFIX):]
        try:
            return UUID(suffix)
        except ValueError as e:
            raise InvalidFormatError(f"Resource {urn!r} does not carry a valid UUID") from e

    def set_resource_uuid(self, resource_id: UUID) -> Result[str]:
        """Writes the canonical `urn:uuid:<id>` form; returns it."""
        return self._set_text(paths.RESOURCE, resource_urn(resource_id))

    @property
    def resource_item(self) -> str | None:
        return self._text(paths.RESOURCE_ITEM)

    def set_resource_item(self, resource_item: str) -> Result[str]:
        return self._set_text(paths.RESOURCE_ITEM, resource_item)

    @property
    def hmac(self) -> str | None:
        return self._text(paths.HMAC)

    def set_hmac(self, hmac: str) -> Result[str]:
        return self._set_text(paths.HMAC, hmac)

    # ─────────────────────── Optional fields ───────────────────────

    @property
    def src(self) -> str | None:
        return self._text(paths.SRC)

    def set_src(self, src: str) -> Result[str]:
        return self._set_text(paths.SRC, src)

    @property
    def download_type(self) -> str | None:
        return self._text(paths.DOWNLOAD_TYPE)

    def set_download_type(self, download_type: str) -> Result[str]:
        return self._set_text(paths.DOWNLOAD_TYPE, download_type)

    @property
    def user_id(self) -> str | None:
        return self._text(paths.USER_ID)

    def set_user_id(self, user_id: str) -> Result[str]:
        return self._set_text(paths.USER_ID, user_id)

    @property
    def fulfillment_type(self) -> str | None:
        return self._attribute(paths.FULFILLMENT_TYPE)

    def set_fulfillment_type(self, fulfillment_type: str) -> Result[str]:
        return self._set_attribute(paths.FULFILLMENT_TYPE, fulfillment_type)

    @property
    def auth(self) -> str | None:
        return self._attribute(paths.AUTH)

    def set_auth(self, auth: str) -> Result[str]:
        return self._set_attribute(paths.AUTH, auth)

    # ─────────────────────── Multi-valued ───────────────────────

    def get_metadata(self, key: str) -> Property | None:
        """
        The child of resourceItemInfo/metadata whose local name is `key`,
        whatever its namespace (dc:title, dc:creator, ...).
        """
        node = self._resolver.find_node(self._document, paths.METADATA_ENTRY, key=key)
        if node is None:
            return None
        bag = AttributeBag(text="".join(node.itertext()), attributes=self._resolver.attributes(node))
        return Property(name=local_name(node), value=bag)

    def get_all_metadata(self) -> list[Property]:
        # TODO: walk every resourceItemInfo/metadata child once the multi-valued
        # metadata layout is settled; always empty until then.
        return []

    def get_permissions(self) -> list[Permission]:
        # TODO: parse resourceItemInfo/licenseToken/permissions; always empty until then.
        return []

    def __repr__(self) -> str:
        return f"DocumentModel(transaction={self.transaction!r}, resource={self.resource!r})"

