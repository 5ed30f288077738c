"""BaseService: shared foundation for all nkt services.

Every service receives the :class:`Root` it works against, the
timezone used for local dates, and the selection policy from config.
Services flush their own mutations with ``self._root.write_changes()``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from nkt.domain.time import TimeZone, time_now
from nkt.domain.types import CollectionKind, DirectoryIndexPolicy
from nkt.errors import NktError
from nkt.services.resolve import Resolver, Selection
from nkt.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from nkt.domain.items import Item
    from nkt.infrastructure.root import Root

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class CreateService(BaseService):
            def log(self, text: str) -> ServiceResult:
                try:
                    ...
                    self._root.write_changes()
                except NktError as exc:
                    return self._fail("log", exc)
    """

    def __init__(
        self,
        root: Root,
        *,
        tz: TimeZone | None = None,
        directory_index: DirectoryIndexPolicy = DirectoryIndexPolicy.REJECT,
        clock: Callable[[], datetime] = time_now,
    ) -> None:
        self._root = root
        self._tz = tz or TimeZone.local()
        self._directory_index = directory_index
        self._clock = clock

    def _resolver(self, now: datetime | None = None) -> Resolver:
        return Resolver(
            self._root,
            self._tz,
            now=now or self._clock(),
            directory_index=self._directory_index,
        )

    def _collection(self, kind: CollectionKind, name: str | None = None) -> Any:
        """The named (or default) collection of *kind*; NoSuchCollection if absent."""
        return self._root.require_collection(name or self._root.default_name(kind), kind)

    def _resolve(self, selection: Selection, now: datetime | None = None) -> Item:
        return self._resolver(now).resolve(selection)

    @staticmethod
    def _fail(op: str, exc: NktError) -> ServiceResult:
        """Convert an expected failure into an ``ok=False`` result."""
        logger.debug("%s failed: %s (%s)", op, exc.message, exc.code)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=exc.code,
                message=exc.message,
                detail={k: str(v) for k, v in exc.detail.items()},
            ),
        )
