# app/gateway.py
# Form handling shared by the FastAPI app and the Vercel handlers.
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
from urllib.parse import parse_qs

from jinja2 import Environment, FileSystemLoader, select_autoescape

from fuel_backend.app.core.calculator import blank_measurements, calculate
from fuel_backend.app.core.constants import INPUT_FIELDS
from fuel_backend.app.core.errors import CalculationError, InvalidNumberError
from fuel_backend.app.models import FormView, FuelAnalysisRequest

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
PAGE_TEMPLATE = "index.html"

INVALID_REQUEST_MESSAGE = "невірний формат запиту"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


def parse_form_body(body: bytes) -> Optional[Dict[str, str]]:
    """
    Decode an application/x-www-form-urlencoded body.
    Returns None when the body cannot be decoded.
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        logger.info("Undecodable form body (%d bytes), ignoring submission", len(body))
        return None
    pairs = parse_qs(text, keep_blank_values=True)
    # first value wins, like FormValue in most servers
    return {key: values[0] for key, values in pairs.items() if values}


def form_values(form: Mapping[str, str]) -> Dict[str, str]:
    """Keep only the seven known keys, defaulting to ""."""
    return {name: str(form.get(name, "")) for name, _, _ in INPUT_FIELDS}


def handle(method: str, form: Optional[Mapping[str, str]] = None) -> FormView:
    """
    One request in, one view model out.
    Anything other than POST, or a POST whose body could not be
    decoded (form is None), renders the blank form.
    """
    if method.upper() != "POST" or form is None:
        return FormView(measurements=blank_measurements())

    measurements = blank_measurements(form_values(form))
    try:
        result = calculate(measurements)
    except CalculationError as e:
        logger.info("Rejected submission (%s): %s", e.kind, e.message)
        return FormView(measurements=measurements, error=e.message)

    return FormView(measurements=measurements, results=result.outputs)


def render(view: FormView) -> str:
    template = _env.get_template(PAGE_TEMPLATE)
    return template.render(
        measurements=view.measurements,
        results=view.results,
        error=view.error,
    )


def analyze(request: FuelAnalysisRequest) -> Tuple[int, dict]:
    """
    JSON flavour of `handle`: (status code, payload).
    Validation failures are 422 with the same display message as the form.
    """
    measurements = blank_measurements(request.model_dump())
    echo = {m.name: m.value for m in measurements}
    try:
        result = calculate(measurements)
    except CalculationError as e:
        logger.info("Rejected JSON request (%s): %s", e.kind, e.message)
        return 422, {"input_echo": echo, "error": e.message, "kind": e.kind}

    return 200, {
        "input_echo": echo,
        "results": [m.model_dump() for m in result.outputs],
    }


def reject_request(body: Any, errors: Iterable[dict]) -> Tuple[int, dict]:
    """
    Payload for a JSON body that failed schema validation (null, list or
    object where a field value belongs), in the same shape as `analyze`.
    """
    raw = body if isinstance(body, dict) else {}
    echo = {
        name: str(raw[name]) if isinstance(raw.get(name), (str, int, float)) else ""
        for name, _, _ in INPUT_FIELDS
    }
    labels = {name: label for name, label, _ in INPUT_FIELDS}
    for err in errors:
        for part in err.get("loc", ()):
            if part in labels:
                e = InvalidNumberError(labels[part])
                logger.info("Rejected JSON request (%s): %s", e.kind, e.message)
                return 422, {"input_echo": echo, "error": e.message, "kind": e.kind}

    logger.info("Rejected JSON request: body is not an object of field values")
    return 422, {"input_echo": echo, "error": INVALID_REQUEST_MESSAGE, "kind": "invalid_request"}
