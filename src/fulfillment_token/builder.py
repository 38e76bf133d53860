"""
Staged builder — construct a fulfillment token that cannot miss a mandatory field.

Each stage is its own class exposing exactly one transition, so the only
expressible call chain is:

    FulfillmentTokenBuilder.start()      -> DistributorStage
      .set_distributor(str)              -> OperatorURLStage
      .set_operator_url(str)             -> TransactionStage
      .set_transaction(str)              -> PurchaseStage
      .set_purchase(datetime)            -> ExpirationStage
      .set_expiration(datetime)          -> ResourceIdStage
      .set_resource_id(UUID)             -> OptionalStage    (commit)
      .set_src(...).set_user_id(...)...  -> OptionalStage    (any order, any count)
      .build()                           -> DocumentModel

start() creates the bare tree: the namespaced root and an empty
resourceItemInfo. The five mandatory values before the resource id are only
staged; set_resource_id() writes all of them, the resource, the default
resourceItem and the hmac placeholder in one step.

Stages are single-use. Once a stage has handed over to the next one, or
OptionalStage has built its model, calling it again raises StageConsumedError.
Text XML cannot carry, and timestamps without a UTC offset, raise
InvalidFormatError before the stage is consumed, so the call can be retried.
The finished model still shares the tree, so whoever holds it can keep
mutating the document.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

import structlog

from fulfillment_token.adapters.lxml_tree import LxmlPathResolver, LxmlTreeFactory
from fulfillment_token.config import BuilderSettings
from fulfillment_token.domain import paths
from fulfillment_token.domain.errors import InvalidFormatError, StageConsumedError
from fulfillment_token.domain.models import Permission, Property
from fulfillment_token.domain.paths import FieldPath
from fulfillment_token.domain.ports import PathResolver, TreeFactory
from fulfillment_token.elements import ElementFactory, check_text
from fulfillment_token.model import DocumentModel, format_timestamp, resource_urn

log = structlog.get_logger()

# Optional elements created on demand go ahead of these siblings, if present.
_INSERT_BEFORE: dict[str, FieldPath] = {
    paths.USER_ID.name: paths.HMAC,
}

# Staged before the commit, written ahead of resourceItemInfo in this order.
_STAGED_FIELDS: tuple[FieldPath, ...] = (
    paths.DISTRIBUTOR,
    paths.OPERATOR_URL,
    paths.TRANSACTION,
    paths.PURCHASE,
    paths.EXPIRATION,
)


class FulfillmentTokenBuilder:
    """
    The tree under construction plus the mandatory values awaiting commit.

    Not used directly: call FulfillmentTokenBuilder.start() and drive the
    returned stages.
    """

    def __init__(
        self,
        settings: BuilderSettings | None = None,
        tree_factory: TreeFactory | None = None,
        resolver: PathResolver | None = None,
    ) -> None:
        self.settings = settings or BuilderSettings()
        factory = tree_factory or LxmlTreeFactory()
        self.resolver = resolver or LxmlPathResolver()
        self.elements = ElementFactory(factory)
        self.document = factory.new_document(paths.ROOT_NAME)
        self.root = self.document.getroot()
        self.resource_item_info = self.elements.append_element(self.root, paths.RESOURCE_ITEM_INFO)
        self.staged: dict[str, str] = {}

    @classmethod
    def start(
        cls,
        settings: BuilderSettings | None = None,
        tree_factory: TreeFactory | None = None,
        resolver: PathResolver | None = None,
    ) -> DistributorStage:
        """Begin a new token; the first value required is the distributor."""
        return DistributorStage(cls(settings, tree_factory, resolver))

    def commit(self, resource_id: UUID) -> None:
        """
        Write every mandatory element into the tree.

        All elements are created detached first; the tree is only touched
        once every one of them exists.
        """
        top_level = [self.elements.create_element(field.name, self.staged[field.name]) for field in _STAGED_FIELDS]
        resource = self.elements.create_element(paths.RESOURCE.name, resource_urn(resource_id))
        resource_item = self.elements.create_element(paths.RESOURCE_ITEM.name, self.settings.default_resource_item)
        hmac = self.elements.create_element(paths.HMAC.name, self.settings.hmac_placeholder)

        for element in top_level:
            self.elements.attach(self.root, element, before=self.resource_item_info)
        self.elements.attach(self.resource_item_info, resource)
        self.elements.attach(self.resource_item_info, resource_item)
        self.elements.attach(self.root, hmac)
        log.info("token.committed", transaction=self.staged[paths.TRANSACTION.name], resource=str(resource_id))
        self.staged.clear()

    def create_missing(self, field: FieldPath) -> Any | None:
        """Create an element the commit did not, under its parent and in its usual place."""
        if not self.settings.create_missing_optional:
            return None
        parent = self.resolver.find_node(self.document, field.parent_node)
        if parent is None:
            return None
        anchor = _INSERT_BEFORE.get(field.name)
        before = self.resolver.find_node(self.document, anchor.node) if anchor is not None else None
        if before is not None and before.getparent() is not parent:
            before = None
        return self.elements.append_element(parent, field.name, before=before)


class _Stage:
    __slots__ = ("_builder",)

    def __init__(self, builder: FulfillmentTokenBuilder) -> None:
        self._builder: FulfillmentTokenBuilder | None = builder

    def _live(self) -> FulfillmentTokenBuilder:
        if self._builder is None:
            raise StageConsumedError(f"{type(self).__name__} has already been used")
        return self._builder

    def _take(self) -> FulfillmentTokenBuilder:
        builder = self._live()
        self._builder = None
        return builder


class DistributorStage(_Stage):
    __slots__ = ()

    def set_distributor(self, distributor: str) -> OperatorURLStage:
        check_text(paths.DISTRIBUTOR.name, distributor)
        builder = self._take()
        builder.staged[paths.DISTRIBUTOR.name] = distributor
        return OperatorURLStage(builder)


class OperatorURLStage(_Stage):
    __slots__ = ()

    def set_operator_url(self, operator_url: str) -> TransactionStage:
        check_text(paths.OPERATOR_URL.name, operator_url)
        builder = self._take()
        builder.staged[paths.OPERATOR_URL.name] = operator_url
        return TransactionStage(builder)


class TransactionStage(_Stage):
    __slots__ = ()

    def set_transaction(self, transaction: str) -> PurchaseStage:
        check_text(paths.TRANSACTION.name, transaction)
        builder = self._take()
        builder.staged[paths.TRANSACTION.name] = transaction
        return PurchaseStage(builder)


class PurchaseStage(_Stage):
    __slots__ = ()

    def set_purchase(self, purchase: datetime) -> ExpirationStage:
        text = format_timestamp(purchase)
        builder = self._take()
        builder.staged[paths.PURCHASE.name] = text
        return ExpirationStage(builder)


class ExpirationStage(_Stage):
    __slots__ = ()

    def set_expiration(self, expiration: datetime) -> ResourceIdStage:
        text = format_timestamp(expiration)
        builder = self._take()
        builder.staged[paths.EXPIRATION.name] = text
        return ResourceIdStage(builder)


class ResourceIdStage(_Stage):
    __slots__ = ()

    def set_resource_id(self, resource_id: UUID | str) -> OptionalStage:
        """
        Last mandatory value; materializes the mandatory skeleton.

        A string must be a UUID in any form uuid.UUID accepts; it is written
        in canonical lowercase hyphenated form. Raises InvalidFormatError
        otherwise, leaving this stage usable.
        """
        if not isinstance(resource_id, UUID):
            try:
                resource_id = UUID(resource_id)
            except (ValueError, TypeError, AttributeError) as e:
                raise InvalidFormatError(f"Resource id {resource_id!r} is not a valid UUID") from e
        builder = self._take()
        builder.commit(resource_id)
        return OptionalStage(builder)


class OptionalStage(_Stage):
    """
    Every mandatory element exists. Setters here write straight into the tree
    and return this same stage; build() hands the tree to a DocumentModel.
    """

    __slots__ = ()

    def _set_text(self, field: FieldPath, value: str) -> OptionalStage:
        builder = self._live()
        check_text(field.name, value)
        node = builder.resolver.find_node(builder.document, field.node)
        if node is None:
            node = builder.create_missing(field)
        if node is None:
            log.warning("token.optional_field_dropped", field=field.name, path=field.node)
            return self
        node.text = value
        return self

    def _set_attribute(self, name: str, value: str) -> OptionalStage:
        builder = self._live()
        builder.root.set(name, check_text(name, value))
        return self

    def set_resource_item(self, resource_item: str) -> OptionalStage:
        return self._set_text(paths.RESOURCE_ITEM, resource_item)

    def set_src(self, src: str) -> OptionalStage:
        return self._set_text(paths.SRC, src)

    def set_download_type(self, download_type: str) -> OptionalStage:
        return self._set_text(paths.DOWNLOAD_TYPE, download_type)

    def set_user_id(self, user_id: str) -> OptionalStage:
        return self._set_text(paths.USER_ID, user_id)

    def set_hmac(self, hmac: str) -> OptionalStage:
        return self._set_text(paths.HMAC, hmac)

    def set_fulfillment_type(self, fulfillment_type: str) -> OptionalStage:
        return self._set_attribute(paths.FULFILLMENT_TYPE.name, fulfillment_type)

    def set_auth(self, auth: str) -> OptionalStage:
        return self._set_attribute(paths.AUTH.name, auth)

    def set_metadata(self, metadata: list[Property]) -> OptionalStage:
        # TODO: write resourceItemInfo/metadata children; accepted and ignored for now.
        self._live()
        log.debug("token.metadata_ignored", count=len(metadata))
        return self

    def set_permissions(self, permissions: list[Permission]) -> OptionalStage:
        # TODO: write licenseToken/permissions; accepted and ignored for now.
        self._live()
        log.debug("token.permissions_ignored", count=len(permissions))
        return self

    def build(self) -> DocumentModel:
        builder = self._take()
        return DocumentModel(builder.document, builder.resolver)
