from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from grohuh_core.domain.errors import SinkError

from grohuh_server.adapters.api.routes import router

app = FastAPI(title="grohuh")
app.include_router(router)


@app.exception_handler(SinkError)
def store_unavailable(_request: Request, exc: SinkError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})
