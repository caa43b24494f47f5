"""
Request body to ``Parameters`` conversion
"""
from fastapi import HTTPException, Request, status

from blogdemo.core.parameters import Parameters


async def request_params(request: Request) -> Parameters:
    """FastAPI dependency: the JSON body as unpermitted parameters"""
    body = await request.body()
    try:
        return Parameters.from_json(body)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid JSON body: {e}")
