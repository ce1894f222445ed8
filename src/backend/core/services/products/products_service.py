"""Business rules for products on top of the product repository."""

from loguru import logger

from src.backend.core.enums import VALID_ROLE_IDS, VALID_STATUS_IDS, AuthProvidersEnum
from src.backend.core.errors import UnprocessableEntityError
from src.backend.core.pagination import PaginationOptions
from src.backend.core.security import hash_password, verify_password
from src.backend.core.services.files.files_service import FilesService
from src.backend.entities.service.product import (
    FileRef,
    Product,
    ProductPatch,
    ProductRepository,
    RoleRef,
    StatusRef,
)
from src.backend.entities.service.product.dto import (
    CreateProductDto,
    FileDto,
    FilterProductDto,
    RoleDto,
    SortProductDto,
    StatusDto,
    UpdateProductDto,
)


class ProductsService:
    """Validates and persists products.

    Checks performed on create and update:
    - email is not already used by another product,
    - a referenced photo resolves through the files service,
    - role and status ids belong to their enumerations.

    The email check and the write are not atomic; a concurrent duplicate is
    only caught by the storage unique index, surfacing as ``ConflictError``.
    """

    def __init__(
        self, products_repository: ProductRepository, files_service: FilesService
    ) -> None:
        self._products_repository = products_repository
        self._files_service = files_service

    def _resolve_photo(self, photo: FileDto) -> FileRef:
        file = self._files_service.find_by_id(photo.id)
        if file is None:
            raise UnprocessableEntityError({"photo": "imageNotExists"})
        return FileRef(id=file.id, path=file.path)

    @staticmethod
    def _check_role(role: RoleDto) -> RoleRef:
        if str(role.id) not in VALID_ROLE_IDS:
            raise UnprocessableEntityError({"role": "roleNotExists"})
        return RoleRef(id=role.id)

    @staticmethod
    def _check_status(status: StatusDto) -> StatusRef:
        if str(status.id) not in VALID_STATUS_IDS:
            raise UnprocessableEntityError({"status": "statusNotExists"})
        return StatusRef(id=status.id)

    def create(self, create_product_dto: CreateProductDto) -> Product:
        password = None
        if create_product_dto.password:
            password = hash_password(create_product_dto.password)

        email = None
        if create_product_dto.email:
            if self._products_repository.find_by_email(create_product_dto.email):
                raise UnprocessableEntityError({"email": "emailAlreadyExists"})
            email = create_product_dto.email

        photo = None
        if create_product_dto.photo is not None:
            photo = self._resolve_photo(create_product_dto.photo)

        role = None
        if create_product_dto.role is not None:
            role = self._check_role(create_product_dto.role)

        status = None
        if create_product_dto.status is not None:
            status = self._check_status(create_product_dto.status)

        product = self._products_repository.create(
            Product(
                first_name=create_product_dto.first_name,
                last_name=create_product_dto.last_name,
                email=email,
                password=password,
                photo=photo,
                role=role,
                status=status,
                provider=create_product_dto.provider or AuthProvidersEnum.email.value,
                social_id=create_product_dto.social_id,
            )
        )
        logger.bind(product_id=product.id).info("product.created")
        return product

    def find_many_with_pagination(
        self,
        *,
        filter_options: FilterProductDto | None,
        sort_options: list[SortProductDto] | None,
        pagination_options: PaginationOptions,
    ) -> list[Product]:
        return self._products_repository.find_many_with_pagination(
            filter_options=filter_options,
            sort_options=sort_options,
            pagination_options=pagination_options,
        )

    def find_by_id(self, product_id: int | str) -> Product | None:
        return self._products_repository.find_by_id(product_id)

    def find_by_ids(self, product_ids: list[int | str]) -> list[Product]:
        return self._products_repository.find_by_ids(product_ids)

    def find_by_email(self, email: str | None) -> Product | None:
        return self._products_repository.find_by_email(email)

    def find_by_social_id_and_provider(
        self, *, social_id: str | None, provider: str | None
    ) -> Product | None:
        return self._products_repository.find_by_social_id_and_provider(
            social_id=social_id, provider=provider
        )

    def update(
        self, product_id: int | str, update_product_dto: UpdateProductDto
    ) -> Product | None:
        supplied = update_product_dto.model_fields_set
        changes: dict = {}

        if update_product_dto.password:
            current = self._products_repository.find_by_id(product_id)
            # Only re-hash when the plaintext differs from what is stored.
            if current and not verify_password(update_product_dto.password, current.password):
                changes["password"] = hash_password(update_product_dto.password)

        if update_product_dto.email:
            existing = self._products_repository.find_by_email(update_product_dto.email)
            if existing and str(existing.id) != str(product_id):
                raise UnprocessableEntityError({"email": "emailAlreadyExists"})
            changes["email"] = update_product_dto.email
        elif "email" in supplied:
            changes["email"] = None

        if update_product_dto.photo is not None:
            changes["photo"] = self._resolve_photo(update_product_dto.photo)
        elif "photo" in supplied:
            changes["photo"] = None

        if update_product_dto.role is not None:
            changes["role"] = self._check_role(update_product_dto.role)
        elif "role" in supplied:
            changes["role"] = None

        if update_product_dto.status is not None:
            changes["status"] = self._check_status(update_product_dto.status)
        elif "status" in supplied:
            changes["status"] = None

        for name in ("first_name", "last_name", "provider", "social_id"):
            if name in supplied:
                changes[name] = getattr(update_product_dto, name)

        product = self._products_repository.update(product_id, ProductPatch(**changes))
        if product is not None:
            logger.bind(product_id=product.id, fields=sorted(changes)).info("product.updated")
        return product

    def remove(self, product_id: int | str) -> None:
        self._products_repository.remove(product_id)
