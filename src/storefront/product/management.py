"""Catalogue management — add, edit and remove products of the caller's store."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class AddProduct:
    store_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True)
    description: Text()
    image: String(max_length=1000)


@storefront.command(part_of="Product")
class UpdateProduct:
    store_id: Identifier(required=True)
    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True)
    description: Text()
    image: String(max_length=1000)
    is_active: Boolean()


@storefront.command(part_of="Product")
class RemoveProduct:
    store_id: Identifier(required=True)
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            store_id=command.store_id,
            name=command.name,
            price=command.price,
            description=command.description,
            image=command.image,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.find_in_store(command.store_id, command.product_id)
        if product is None:
            raise ObjectNotFoundError("Producto no encontrado o sin permisos para editar")

        product.update(
            name=command.name,
            price=command.price,
            description=command.description,
            image=command.image,
            is_active=command.is_active,
        )
        repo.add(product)
        return str(product.id)

    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.find_in_store(command.store_id, command.product_id)
        if product is None:
            raise ObjectNotFoundError("Producto no encontrado o no tienes permiso para eliminarlo")

        product.remove()
        repo.add(product)
        logger.info("product_removed", product_id=str(product.id), store_id=str(command.store_id))
