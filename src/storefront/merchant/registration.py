"""Merchant registration — command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.merchant.user import User
from storefront.shared.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    """Create the account record for an identity vouched for by the session provider."""

    email: String(required=True, max_length=254)
    name: String(max_length=255)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ConflictError({"email": ["Ya existe una cuenta con este correo electrónico"]})

        user = User.register(email=command.email, name=command.name)
        repo.add(user)
        logger.info("user_registered", user_id=str(user.id))
        return str(user.id)
