"""
auth/service.py -- Administrator orchestration: login, creation, listing.

AdministratorService sits between the routes and AdministratorStore. It owns
the invariants the store cannot express on its own:
  - login is a single exact (email, password) match; every failure looks the same
  - Role.NONE is never persisted
  - duplicate emails surface as DuplicateKey, whether caught by the pre-insert
    check or by the UNIQUE constraint under a concurrent insert

Listing goes through core.query so administrators and vehicles paginate with
identical semantics.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from auth.models import Administrator, Role
from auth.store import AdministratorStore
from core.errors import DuplicateKey, InvalidArgument
from core.query import query

logger = logging.getLogger("carmanager.auth")


class AdministratorService:
    def __init__(self, store: AdministratorStore, clamp_pagination: bool = False) -> None:
        self._store = store
        self._clamp = clamp_pagination

    def login(self, email: str, password: str) -> Administrator | None:
        """Return the administrator matching both email and password, else None.

        Unknown email and wrong password are indistinguishable to the caller.
        """
        administrator = self._store.get_by_credentials(email, password)
        if administrator is None:
            logger.info("Rejected login for %s", email)
        return administrator

    def add(self, administrator: Administrator) -> Administrator:
        """Persist a new administrator and fill in its id.

        Raises InvalidArgument for a missing record or Role.NONE, and
        DuplicateKey when the email is already registered. The store is not
        touched on either failure.
        """
        if administrator is None:
            raise InvalidArgument("administrator is required")
        if administrator.role is Role.NONE:
            raise InvalidArgument("administrator role must be Adm or Editor")
        if self._store.get_by_email(administrator.email) is not None:
            logger.warning("Duplicate administrator email rejected: %s", administrator.email)
            raise DuplicateKey(administrator.email)
        try:
            administrator.id = self._store.create_administrator(administrator)
        except IntegrityError as exc:
            # Lost a race with a concurrent insert of the same email.
            logger.warning("Duplicate administrator email rejected by constraint: %s", administrator.email)
            raise DuplicateKey(administrator.email) from exc
        logger.info("Administrator %d created (%s)", administrator.id, administrator.role.value)
        return administrator

    def get_by_id(self, administrator_id: int) -> Administrator | None:
        return self._store.get_by_id(administrator_id)

    def get_all(self, page: Optional[int] = None, page_size: Optional[int] = None) -> list[Administrator]:
        """Return administrators in id order, optionally windowed. No text filters."""
        return query(self._store.list_administrators(), page, page_size, clamp=self._clamp)

    def ensure_seed_administrator(self, email: str, password: str, role: Role) -> Administrator | None:
        """Create the first administrator when the store is empty.

        Returns the created record, or None when seeding was skipped because
        administrators already exist or no credentials were configured.
        """
        if not email or not password:
            return None
        if self._store.has_administrators():
            return None
        created = self.add(Administrator(email=email, password=password, role=role))
        logger.warning("Seeded initial administrator %s from SEED_ADMIN_EMAIL", email)
        return created
