"""InitService: create a fresh root directory with the default collections."""

from __future__ import annotations

import logging

from nkt.domain.types import CollectionKind
from nkt.errors import NktError
from nkt.services.base import BaseService
from nkt.services.result import ServiceError, ServiceResult
from nkt.services.telemetry import traced

logger = logging.getLogger(__name__)


class InitService(BaseService):
    """Creates ``topology.json``, the registries and the default collections."""

    @traced
    def init(self, *, force: bool = False) -> ServiceResult:
        """Initialise the root; refuses to overwrite unless *force* is set."""
        op = "init"
        try:
            fs = self._root.require_fs()
            if self._root.is_initialized() and not force:
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code="ALREADY_INITIALIZED",
                        message=f"{fs.root} is already initialised (use --force to overwrite)",
                    ),
                )
            self._root.reset()
            self._root.add_initial_collections()
            self._root.create_filesystem()
        except NktError as exc:
            return self._fail(op, exc)

        logger.info("Initialised root at %s", fs.root)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(fs.root),
                **{kind.field_name: self._root.collection_names(kind) for kind in CollectionKind},
            },
        )
