"""FastAPI dependency implementations."""

from collections.abc import Callable, Iterator

from fastapi import Depends, HTTPException, Query, Request
from pydantic import ValidationError

from src.backend.api.http.app_data import ApplicationDependencies
from src.backend.core.enums import RoleEnum
from src.backend.core.security import TokenClaims, decode_access_token
from src.backend.core.services import FilesService, ProductsService, Repositories
from src.backend.entities.service.product.dto import QueryProductDto


def get_repositories(request: Request) -> Iterator[Repositories]:
    """Yield the repositories of the backend selected at startup."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    with app_deps.persistence.scope() as repositories:
        yield repositories


def get_products_service(
    repositories: Repositories = Depends(get_repositories),
) -> ProductsService:
    return ProductsService(repositories.products, FilesService(repositories.files))


def get_token_claims(request: Request) -> TokenClaims:
    """Authenticate the request using a Bearer token."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")
    return decode_access_token(auth_header.split(" ", 1)[1])


def require_roles(*roles: RoleEnum) -> Callable[..., TokenClaims]:
    """Build a dependency admitting only callers holding one of ``roles``."""
    allowed = {str(role.value) for role in roles}

    def _guard(claims: TokenClaims = Depends(get_token_claims)) -> TokenClaims:
        if claims.role_id is None or str(claims.role_id) not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return claims

    return _guard


def get_query_product(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    filters: str | None = Query(default=None, description="JSON encoded filters"),
    sort: str | None = Query(default=None, description="JSON encoded sort keys"),
) -> QueryProductDto:
    """Parse list query parameters, answering 400 with the offending fields."""
    try:
        return QueryProductDto.model_validate(
            {"page": page, "limit": limit, "filters": filters, "sort": sort}
        )
    except ValidationError as exc:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        raise HTTPException(status_code=400, detail=errors) from exc
