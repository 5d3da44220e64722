import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from fuel_backend.app import gateway
from fuel_backend.app.core.constants import SERVER_HOST, SERVER_PORT, SERVICE_VERSION
from fuel_backend.app.models import FuelAnalysisRequest

logger = logging.getLogger(__name__)

app = FastAPI()

# === CORS ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def read_health():
    return {"status": "System Online", "version": SERVICE_VERSION}


# === HTML form ===
@app.get("/", response_class=HTMLResponse)
def show_form():
    return gateway.render(gateway.handle("GET"))


@app.post("/", response_class=HTMLResponse)
async def submit_form(request: Request):
    body = await request.body()
    view = gateway.handle("POST", gateway.parse_form_body(body))
    return gateway.render(view)


# === JSON API ===
@app.post("/calculate/fuel")
def run_fuel_calculation(data: FuelAnalysisRequest):
    """
    Same validation and formulas as the form, JSON in and out.
    Validation failures come back as 422 with the display message.
    """
    status, payload = gateway.analyze(data)
    return JSONResponse(status_code=status, content=payload)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # keep the {"input_echo", "error", "kind"} shape on the JSON API
    if request.url.path != "/calculate/fuel":
        return await request_validation_exception_handler(request, exc)
    status, payload = gateway.reject_request(exc.body, exc.errors())
    return JSONResponse(status_code=status, content=payload)


def run():
    logging.basicConfig(level=logging.INFO)
    logger.info("Server is listening on port %d...", SERVER_PORT)
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    run()
