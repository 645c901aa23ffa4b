from fastapi import APIRouter, Request, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
import logging
from app.domains.transactions.services import TransactionService
from app.domains.transactions.listing import SortKey, SortDirection
from app.domains.transactions.models import ActionResult, Category, DashboardSummary, Transaction, TransactionPage
from app.domains.auth.middleware import JWTAuthMiddleware
from app.config.setting import settings

logger = logging.getLogger(__name__)

router = APIRouter()
jwt_auth = JWTAuthMiddleware()


def get_transaction_service(request: Request) -> TransactionService:
    return request.app.state.transaction_service


def action_response(result: ActionResult) -> JSONResponse:
    if result.success:
        status_code = 200
    elif result.field_errors:
        status_code = 400
    elif result.not_found:
        status_code = 404
    else:
        status_code = 503
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


@router.get("/categories")
async def get_categories():
    return {"categories": [{"value": c.value, "label": c.label} for c in Category]}


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    user_id: str = Depends(jwt_auth),
    service: TransactionService = Depends(get_transaction_service),
):
    try:
        return await service.get_dashboard(user_id)
    except Exception as e:
        logger.error(f"Error building dashboard: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/transactions", response_model=TransactionPage)
async def list_transactions(
    sort_by: SortKey = SortKey.DATE,
    direction: SortDirection = SortDirection.DESC,
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    user_id: str = Depends(jwt_auth),
    service: TransactionService = Depends(get_transaction_service),
):
    try:
        return await service.list_transactions(user_id, sort_by, direction, page_size=page_size, page=page)
    except Exception as e:
        logger.error(f"Error listing transactions: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/transactions/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    user_id: str = Depends(jwt_auth),
    service: TransactionService = Depends(get_transaction_service),
):
    transaction = await service.get_transaction(user_id, transaction_id)
    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found.")
    return transaction


@router.post("/transactions")
async def add_transaction(
    payload: dict,
    user_id: str = Depends(jwt_auth),
    service: TransactionService = Depends(get_transaction_service),
):
    result = await service.add_transaction(user_id, payload)
    logger.info(f"Add transaction for {user_id}: success={result.success}")
    return action_response(result)


@router.put("/transactions/{transaction_id}")
async def update_transaction(
    transaction_id: str,
    payload: dict,
    user_id: str = Depends(jwt_auth),
    service: TransactionService = Depends(get_transaction_service),
):
    result = await service.update_transaction(user_id, transaction_id, payload)
    logger.info(f"Update transaction {transaction_id} for {user_id}: success={result.success}")
    return action_response(result)


@router.delete("/transactions/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(jwt_auth),
    service: TransactionService = Depends(get_transaction_service),
):
    result = await service.delete_transaction(user_id, transaction_id)
    logger.info(f"Delete transaction {transaction_id} for {user_id}: success={result.success}")
    return action_response(result)


@router.get("/views/versions")
async def get_view_versions(
    user_id: str = Depends(jwt_auth),
    service: TransactionService = Depends(get_transaction_service),
):
    return {"versions": service.invalidator.versions(user_id)}
