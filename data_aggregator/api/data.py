from fastapi import APIRouter, Depends, HTTPException, Request

from data_aggregator.api.schemas import DataRequest, DataResponse
from data_aggregator.observability.metrics import count_items
from data_aggregator.services.aggregator import Aggregator

router = APIRouter()

def get_aggregator(request: Request) -> Aggregator:
    # The aggregator is built once by create_app and shared by all requests
    return request.app.state.aggregator

@router.post("/data", response_model=DataResponse)
async def aggregate_data(body: DataRequest, aggregator: Aggregator = Depends(get_aggregator)):
    """
    Accepts a JSON payload {"data": [...]} of strings and unsigned integers.
    Returns the total string length and the integer sum.
    Malformed input never reaches this handler: it is rejected with 400 during validation.
    """
    try:
        totals = aggregator(body.data)
    except ValueError as exc:
        # Only reachable with AGGREGATOR_OVERFLOW=error
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    count_items(body.data)
    return DataResponse(string_len=totals.string_len, int_sum=totals.int_sum)
