from fastapi import APIRouter, Depends, HTTPException, status

from common.core.exceptions import ValidationError
from packages.accounts.models.domain.account import AccountCreateModel
from packages.accounts.models.schemas.account import AccountCreate, AccountResponse
from packages.accounts.services.account_service import AccountService
from packages.auth.dependencies import require_internal_api_key

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    dependencies=[Depends(require_internal_api_key)],
)


def get_account_service() -> AccountService:
    return AccountService()


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def register_account(
    account_data: AccountCreate,
    account_service: AccountService = Depends(get_account_service),
):
    """Register an employer or agency account; the trial starts now."""
    try:
        account = await account_service.register_account(
            AccountCreateModel(**account_data.model_dump())
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return AccountResponse(
        id=account.id,
        name=account.name,
        email=account.email,
        account_type=account.account_type,
        created_at=account.created_at,
        trial_ends_at=account.trial_ends_at,
    )


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: int,
    account_service: AccountService = Depends(get_account_service),
):
    account = await account_service.get_account(account_id)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Account {account_id} not found",
        )

    return AccountResponse(
        id=account.id,
        name=account.name,
        email=account.email,
        account_type=account.account_type,
        created_at=account.created_at,
        trial_ends_at=account.trial_ends_at,
    )
