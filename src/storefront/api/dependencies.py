"""Request identity for owner-scoped endpoints.

Sessions are handled by an upstream provider which forwards the signed-in
merchant's email in the ``X-User-Email`` header. Handlers receive the resolved
User (and Store) as explicit dependencies.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.merchant.user import User
from storefront.store.store import Store
from storefront.utils.logging import add_context


async def current_user(x_user_email: Annotated[str | None, Header()] = None) -> User:
    if not x_user_email:
        raise HTTPException(status_code=401, detail="No autenticado")

    user = current_domain.repository_for(User).find_by_email(x_user_email)
    if user is None:
        raise ObjectNotFoundError("Usuario no encontrado")

    add_context(user_id=str(user.id))
    return user


async def optional_store(user: Annotated[User, Depends(current_user)]) -> Store | None:
    store = current_domain.repository_for(Store).find_for_owner(user.id)
    if store is not None:
        add_context(store_id=str(store.id))
    return store


async def current_store(store: Annotated[Store | None, Depends(optional_store)]) -> Store:
    if store is None:
        raise ObjectNotFoundError("Tienda no encontrada")
    return store


CurrentUser = Annotated[User, Depends(current_user)]
OptionalStore = Annotated[Store | None, Depends(optional_store)]
CurrentStore = Annotated[Store, Depends(current_store)]
