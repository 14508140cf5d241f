"""Store provisioning — command and handler.

A user provisions exactly one store, and its slug must be unused across all
tenants because it is the key subdomain routing resolves against.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.merchant.user import User
from storefront.shared.errors import ConflictError
from storefront.store.store import Store
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Store")
class CreateStore:
    user_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=63)
    description: Text()
    primary_color: String(max_length=7)


@storefront.command_handler(part_of=Store)
class CreateStoreHandler:
    @handle(CreateStore)
    def create_store(self, command):
        repo = current_domain.repository_for(Store)

        if repo.find_by_slug(command.slug) is not None:
            raise ConflictError({"slug": ["Esta URL ya está en uso, prueba con otra"]})

        try:
            current_domain.repository_for(User).get(command.user_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError("Usuario no encontrado") from None

        if repo.find_for_owner(command.user_id) is not None:
            raise ConflictError({"store": ["Ya tienes una tienda creada"]})

        store = Store.provision(
            user_id=command.user_id,
            name=command.name,
            slug=command.slug,
            description=command.description,
            primary_color=command.primary_color,
        )
        repo.add(store)
        logger.info("store_created", store_id=str(store.id), slug=store.slug)
        return str(store.id)
